"""Helpers for recording and replaying operation traces in tests and tools."""

from __future__ import annotations

from typing import Dict, Iterable, List, MutableSequence, Optional, Sequence

from .consumer import Mirror
from .engine.context import RunContext
from .engine.merge_sort import merge_sort
from .engine.models.element import Element
from .engine.operations import Operation, Overwrite
from .engine.pacing import PacingPolicy
from .engine.registry import Engine
from .engine.transport import channel


def record(
    sequence: MutableSequence[Element],
    engine: Engine = merge_sort,
    context: Optional[RunContext] = None,
) -> List[Operation]:
    """Run ``engine`` on ``sequence`` synchronously and return its trace.

    No threads are involved: the whole trace is buffered in the channel and
    collected after the engine returns. ``context`` defaults to a run
    without pacing delays.
    """

    if context is None:
        context = RunContext(pacing=PacingPolicy.instant())
    sender, receiver = channel()
    with sender:
        engine(sequence, sender, context)
    return list(receiver)


def replay(initial: Sequence[Element], ops: Iterable[Operation]) -> Mirror:
    """Apply ``ops`` to a fresh mirror of ``initial`` and return it."""
    return Mirror(initial).apply_all(ops)


def last_writes(ops: Iterable[Operation]) -> Dict[int, Element]:
    """Return the final ``Overwrite`` element recorded for each index."""

    writes: Dict[int, Element] = {}
    for op in ops:
        if isinstance(op, Overwrite):
            writes[op.index] = op.element
    return writes


__all__ = ["last_writes", "record", "replay"]
