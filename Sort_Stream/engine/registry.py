"""Name-to-engine lookup for interchangeable sorting algorithms.

An engine is any callable ``(sequence, producer, context=None) -> None`` that
sorts ``sequence`` in place while emitting operations to ``producer``.
"""

from __future__ import annotations

from typing import Callable, Dict, MutableSequence, Optional

from .context import RunContext
from .merge_sort import merge_sort
from .models.element import Element
from .operations import Operation
from .transport import Sender

Engine = Callable[
    [MutableSequence[Element], Sender[Operation], Optional[RunContext]], None
]

ENGINES: Dict[str, Engine] = {
    "merge": merge_sort,
}


def get_engine(name: str) -> Engine:
    """Return the engine registered under ``name``."""

    try:
        return ENGINES[name]
    except KeyError:
        known = ", ".join(sorted(ENGINES))
        raise KeyError(f"unknown engine {name!r}; known engines: {known}") from None


def register_engine(name: str, engine: Engine) -> None:
    """Make ``engine`` available under ``name``, replacing any previous entry."""
    ENGINES[name] = engine


__all__ = ["ENGINES", "Engine", "get_engine", "register_engine"]
