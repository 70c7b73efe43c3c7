"""Invariant checks used by tests and by the CLI's run verification."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, Optional, Sequence

from Sort_Stream.engine.models.element import Element, Phase
from Sort_Stream.engine.operations import (
    Operation,
    Overwrite,
    SetPhase,
    indices_of,
    kind_of,
)
from Sort_Stream.replay import last_writes


def is_sorted(values: Sequence[Any]) -> bool:
    """Ensure every adjacent pair is in ascending order."""

    return all(values[i] <= values[i + 1] for i in range(len(values) - 1))


def is_stable(original: Sequence[Element], result: Sequence[Element]) -> bool:
    """Equal values keep the left-to-right order they had in ``original``."""

    expected = sorted(original, key=lambda e: e.value)
    return [e.tag for e in expected] == [e.tag for e in result]


def indices_in_range(ops: Iterable[Operation], length: int) -> bool:
    """No operation references an index outside ``[0, length)``."""

    return all(0 <= i < length for op in ops for i in indices_of(op))


def phase_termination_ok(ops: Sequence[Operation], length: int) -> bool:
    """The last ``length`` phase changes reset every index to neutral once."""

    phases = [op for op in ops if isinstance(op, SetPhase)]
    if length == 0:
        return True
    tail = phases[-length:]
    if len(tail) != length:
        return False
    return all(op.phase is Phase.NEUTRAL for op in tail) and sorted(
        op.index for op in tail
    ) == list(range(length))


def trace_conservation_ok(
    initial: Sequence[Element], ops: Iterable[Operation], final: Sequence[Element]
) -> bool:
    """Replaying only the last write per index reproduces the final values."""

    values = [e.value for e in initial]
    for index, element in last_writes(ops).items():
        values[index] = element.value
    return values == [e.value for e in final]


def overwrites_from_input(
    initial: Sequence[Element], ops: Iterable[Operation]
) -> bool:
    """Every ``Overwrite`` carries an input element and merges only permute.

    Elements are matched on ``(value, tag)``. A neutral ``SetPhase`` after a
    run of writes closes a merge; at that point the sequence must hold the
    input multiset again.
    """

    expected = Counter((e.value, e.tag) for e in initial)
    current = [(e.value, e.tag) for e in initial]
    writing = False
    for op in ops:
        if isinstance(op, Overwrite):
            key = (op.element.value, op.element.tag)
            if key not in expected or not 0 <= op.index < len(current):
                return False
            current[op.index] = key
            writing = True
        elif writing and isinstance(op, SetPhase) and op.phase is Phase.NEUTRAL:
            if Counter(current) != expected:
                return False
            writing = False
    return Counter(current) == expected


def count_by_kind(ops: Iterable[Operation]) -> Dict[str, int]:
    """Count operations by type name."""

    return dict(Counter(kind_of(op) for op in ops))


def from_run(
    initial: Sequence[Element],
    ops: Sequence[Operation],
    final: Sequence[Element],
    mirror: Optional[Sequence[Element]] = None,
) -> Dict[str, bool]:
    """Evaluate every invariant for one completed run.

    When ``mirror`` is given the consumer's final elements must also match
    the engine's result by value and be entirely neutral.
    """

    length = len(initial)
    result = {
        "inv_sorted": is_sorted([e.value for e in final]),
        "inv_stable": is_stable(initial, final),
        "inv_indices_in_range": indices_in_range(ops, length),
        "inv_phase_termination": phase_termination_ok(ops, length),
        "inv_trace_conservation": trace_conservation_ok(initial, ops, final),
        "inv_no_fabricated_values": overwrites_from_input(initial, ops),
    }
    if mirror is not None:
        result["inv_mirror_consistent"] = [e.value for e in mirror] == [
            e.value for e in final
        ] and all(e.phase is Phase.NEUTRAL for e in mirror)
    return result
