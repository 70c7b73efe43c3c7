"""Closed set of visualization operations emitted by engines.

Every operation is a frozen record copied out of the engine, so a consumer
may keep and replay it after the engine has moved on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models.element import Element, Phase


@dataclass(frozen=True)
class SetPhase:
    """Presentation state at ``index`` became ``phase``; value unchanged."""

    index: int
    phase: Phase


@dataclass(frozen=True)
class Compare:
    """``index_a`` and ``index_b`` were just compared.

    The ordering result is deliberately not carried.
    """

    index_a: int
    index_b: int


@dataclass(frozen=True)
class Overwrite:
    """The element stored at ``index`` became ``element``."""

    index: int
    element: Element


Operation = Union[SetPhase, Compare, Overwrite]

OPERATION_TYPES = (SetPhase, Compare, Overwrite)


def kind_of(op: Operation) -> str:
    """Return the type name of ``op``, raising ``TypeError`` for foreign objects."""

    if not isinstance(op, OPERATION_TYPES):
        raise TypeError(f"not an operation: {op!r}")
    return type(op).__name__


def indices_of(op: Operation) -> tuple[int, ...]:
    """Return every sequence index referenced by ``op``."""

    if isinstance(op, Compare):
        return (op.index_a, op.index_b)
    if isinstance(op, (SetPhase, Overwrite)):
        return (op.index,)
    raise TypeError(f"not an operation: {op!r}")


__all__ = [
    "Compare",
    "Operation",
    "OPERATION_TYPES",
    "Overwrite",
    "SetPhase",
    "indices_of",
    "kind_of",
]
