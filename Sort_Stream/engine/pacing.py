"""Injectable pacing policies for instrumented engines."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Mapping


class Pause(str, Enum):
    """Instrumentation points after which an engine may pause."""

    DIVIDE = "divide"
    MERGE_START = "merge_start"
    COMPARE = "compare"
    PLACE = "place"
    DRAIN = "drain"
    MERGE_DONE = "merge_done"


#: Reference delays in milliseconds, tuned for human viewing.
DEFAULT_DELAYS_MS: Dict[str, float] = {
    Pause.DIVIDE.value: 100.0,
    Pause.MERGE_START.value: 100.0,
    Pause.COMPARE.value: 80.0,
    Pause.PLACE.value: 60.0,
    Pause.DRAIN.value: 40.0,
    Pause.MERGE_DONE.value: 50.0,
}


@dataclass
class PacingPolicy:
    """Map each :class:`Pause` to a blocking delay in seconds.

    ``sleep`` is called on the engine thread and defaults to
    :func:`time.sleep`. Tests typically use :meth:`instant`.
    """

    delays: Dict[Pause, float] = field(default_factory=dict)
    sleep: Callable[[float], None] = time.sleep

    @classmethod
    def default(cls) -> "PacingPolicy":
        return cls.from_milliseconds(DEFAULT_DELAYS_MS)

    @classmethod
    def instant(cls) -> "PacingPolicy":
        """Return a policy that never sleeps."""
        return cls(delays={p: 0.0 for p in Pause})

    @classmethod
    def from_milliseconds(
        cls, delays_ms: Mapping[str, float], scale: float = 1.0
    ) -> "PacingPolicy":
        """Build a policy from a ``{pause name: ms}`` mapping.

        Missing pauses fall back to :data:`DEFAULT_DELAYS_MS`. ``scale``
        divides every delay so ``scale=2`` runs twice as fast.
        """

        if scale <= 0:
            raise ValueError("scale must be positive")
        merged = {
            **DEFAULT_DELAYS_MS,
            **{getattr(k, "value", k): v for k, v in delays_ms.items()},
        }
        delays: Dict[Pause, float] = {}
        for pause in Pause:
            ms = float(merged[pause.value])
            if ms < 0:
                raise ValueError(f"negative delay for {pause.value}: {ms}")
            delays[pause] = ms / 1000.0 / scale
        return cls(delays=delays)

    def with_factor(self, factor: float) -> "PacingPolicy":
        """Return a copy with every delay multiplied by ``factor``.

        This is the inverse of the ``scale`` divisor: ``with_factor(2)``
        runs twice as slow.
        """
        return PacingPolicy(
            delays={p: d * factor for p, d in self.delays.items()}, sleep=self.sleep
        )

    def delay_for(self, pause: Pause) -> float:
        return self.delays.get(pause, 0.0)

    def pause(self, pause: Pause) -> None:
        """Block for the delay configured for ``pause``, if any."""
        delay = self.delays.get(pause, 0.0)
        if delay > 0:
            self.sleep(delay)


__all__ = ["DEFAULT_DELAYS_MS", "PacingPolicy", "Pause"]
