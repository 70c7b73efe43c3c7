"""Instrumented top-down merge sort.

The engine sorts ``sequence`` in place and emits an ordered trace of
:mod:`~Sort_Stream.engine.operations` from which every intermediate state of
the sort can be rebuilt. The call is synchronous; pacing delays block the
calling thread so that algorithmic progress itself is slowed down, not just
the rendering of it.

There is no early exit for already sorted input. The number of
``SetPhase`` and ``Overwrite`` operations is a function of ``len`` alone;
only the ``Compare`` count, and which side each slot is filled from, depend
on the data.
"""

from __future__ import annotations

import logging
from typing import List, MutableSequence, Optional

from .context import RunContext
from .models.element import Element, Phase
from .operations import Compare, Operation, Overwrite, SetPhase
from .pacing import Pause
from .transport import Sender

logger = logging.getLogger(__name__)


class _MergeRun:
    """State of a single :func:`merge_sort` call."""

    def __init__(
        self,
        sequence: MutableSequence[Element],
        producer: Sender[Operation],
        context: RunContext,
    ) -> None:
        self.seq = sequence
        self.producer = producer
        self.ctx = context

    def set_phase(self, index: int, phase: Phase) -> None:
        self.seq[index] = self.seq[index].with_phase(phase)
        self.ctx.emit(self.producer, SetPhase(index, phase))

    def place(self, index: int, element: Element, phase: Phase) -> None:
        self.seq[index] = element
        self.ctx.emit(self.producer, Overwrite(index, element.snapshot()))
        self.set_phase(index, phase)

    def sort(self, left: int, right: int) -> None:
        if left >= right:
            return
        self.ctx.checkpoint()
        mid = left + (right - left) // 2

        for i in range(left, right + 1):
            self.set_phase(i, Phase.DIVIDING)
        self.ctx.pause(Pause.DIVIDE)

        self.sort(left, mid)
        self.sort(mid + 1, right)
        self.merge(left, mid, right)

    def merge(self, left: int, mid: int, right: int) -> None:
        # Nothing below may be interrupted: slots are overwritten from the
        # buffers and the range is only a permutation again once merged.
        self.ctx.checkpoint()
        left_buf: List[Element] = list(self.seq[left : mid + 1])
        right_buf: List[Element] = list(self.seq[mid + 1 : right + 1])

        for i in range(left, mid + 1):
            self.set_phase(i, Phase.LEFT_MERGE_CANDIDATE)
        for i in range(mid + 1, right + 1):
            self.set_phase(i, Phase.RIGHT_MERGE_CANDIDATE)
        self.ctx.pause(Pause.MERGE_START)

        i = j = 0
        k = left
        while i < len(left_buf) and j < len(right_buf):
            self.ctx.emit(self.producer, Compare(left + i, mid + 1 + j))
            self.ctx.pause(Pause.COMPARE)
            if left_buf[i] <= right_buf[j]:
                self.place(k, left_buf[i], Phase.PLACED_FROM_LEFT)
                i += 1
            else:
                self.place(k, right_buf[j], Phase.PLACED_FROM_RIGHT)
                j += 1
            self.ctx.pause(Pause.PLACE)
            k += 1

        while i < len(left_buf):
            self.place(k, left_buf[i], Phase.PLACED_FROM_LEFT)
            self.ctx.pause(Pause.DRAIN)
            i += 1
            k += 1

        while j < len(right_buf):
            self.place(k, right_buf[j], Phase.PLACED_FROM_RIGHT)
            self.ctx.pause(Pause.DRAIN)
            j += 1
            k += 1

        for idx in range(left, right + 1):
            self.set_phase(idx, Phase.NEUTRAL)
        self.ctx.pause(Pause.MERGE_DONE)


def merge_sort(
    sequence: MutableSequence[Element],
    producer: Sender[Operation],
    context: Optional[RunContext] = None,
) -> None:
    """Sort ``sequence`` ascending and stably, streaming operations to ``producer``.

    Parameters
    ----------
    sequence:
        Elements to sort. The caller must not touch it until this returns.
    producer:
        Sender half of the transport. Sends are best-effort; if the receiver
        is gone the sort still runs to completion.
    context:
        Pacing, cancellation and counters. Defaults to a fresh
        :class:`RunContext` with the reference delays.

    Raises
    ------
    SortCancelled
        If ``context.cancel`` is set. The sequence is left a permutation of
        its input and the final neutral pass is not emitted.
    """

    ctx = context if context is not None else RunContext()
    run = _MergeRun(sequence, producer, ctx)
    length = len(sequence)
    logger.debug("merge sort started on %d elements", length)

    if length > 1:
        run.sort(0, length - 1)

    for i in range(length):
        run.set_phase(i, Phase.NEUTRAL)

    logger.debug(
        "merge sort finished: %d operations emitted, %d dropped",
        ctx.stats.emitted,
        ctx.stats.dropped,
    )


run = merge_sort

__all__ = ["merge_sort", "run"]
