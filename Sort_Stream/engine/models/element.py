"""Element and phase model shared by engines and consumers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, List


class Phase(str, Enum):
    """Role of an element in the running algorithm.

    Phases are opaque tags. Engines emit them and never read them back;
    mapping a phase to a colour or glyph is left to the consumer.
    """

    DIVIDING = "dividing"
    LEFT_MERGE_CANDIDATE = "left_merge_candidate"
    RIGHT_MERGE_CANDIDATE = "right_merge_candidate"
    PLACED_FROM_LEFT = "placed_from_left"
    PLACED_FROM_RIGHT = "placed_from_right"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Element:
    """One value-bearing position of the sequence being sorted.

    Attributes
    ----------
    value:
        Orderable scalar used for comparisons.
    phase:
        Presentation state. Advisory only.
    tag:
        Optional identity carried through the sort unchanged, typically the
        original index. Never compared, which makes stability observable.
    """

    value: Any
    phase: Phase = Phase.NEUTRAL
    tag: Any = None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.value >= other.value

    def with_phase(self, phase: Phase) -> "Element":
        """Return a copy of this element carrying ``phase``."""
        return replace(self, phase=phase)

    def snapshot(self) -> "Element":
        """Return an independent copy suitable for embedding in an operation."""
        return replace(self)


def elements_from_values(values: Iterable[Any]) -> List[Element]:
    """Build neutral elements tagged with their original index."""
    return [Element(value=v, tag=i) for i, v in enumerate(values)]
