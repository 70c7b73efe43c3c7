"""Reference consumer: a mirrored sequence fed from the operation stream.

The consumer never sees the engine's sequence. It starts from its own copy
of the initial elements and stays consistent purely by applying operations
in the order they arrive.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .engine.models.element import Element, Phase
from .engine.operations import Compare, Operation, Overwrite, SetPhase
from .engine.transport import ChannelClosed, Receiver

logger = logging.getLogger(__name__)


class Mirror:
    """Consumer-side copy of the sequence being sorted.

    Attributes
    ----------
    highlight:
        Index pair of the most recent ``Compare``; cleared by the next
        operation of any other kind.
    applied:
        Number of operations applied so far.
    """

    def __init__(self, initial: Iterable[Element]) -> None:
        self._elements: List[Element] = [e.snapshot() for e in initial]
        self.highlight: Optional[Tuple[int, int]] = None
        self.applied = 0

    def __len__(self) -> int:
        return len(self._elements)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._elements):
            raise IndexError(
                f"operation index {index} out of range for length {len(self._elements)}"
            )

    def apply(self, op: Operation) -> None:
        """Apply a single operation."""
        if isinstance(op, Compare):
            self._check(op.index_a)
            self._check(op.index_b)
            self.highlight = (op.index_a, op.index_b)
        elif isinstance(op, Overwrite):
            self._check(op.index)
            self._elements[op.index] = op.element.snapshot()
            self.highlight = None
        elif isinstance(op, SetPhase):
            self._check(op.index)
            self._elements[op.index] = self._elements[op.index].with_phase(op.phase)
            self.highlight = None
        else:
            raise TypeError(f"not an operation: {op!r}")
        self.applied += 1

    def apply_all(self, ops: Iterable[Operation]) -> "Mirror":
        for op in ops:
            self.apply(op)
        return self

    def elements(self) -> List[Element]:
        return list(self._elements)

    def values(self) -> List[Any]:
        return [e.value for e in self._elements]

    def phases(self) -> List[Phase]:
        return [e.phase for e in self._elements]


class ConsumerWorker:
    """Drain a :class:`Receiver` into a :class:`Mirror` on a background thread.

    ``on_frame`` is called with the mirror at most once per
    ``frame_interval`` seconds while operations arrive, and once more when
    the stream ends. It runs on the consumer thread. With ``keep_trace``
    every applied operation is also kept in :attr:`trace`.
    """

    def __init__(
        self,
        receiver: Receiver[Operation],
        initial: Iterable[Element],
        on_frame: Optional[Callable[[Mirror], None]] = None,
        frame_interval: float = 0.05,
        keep_trace: bool = False,
    ) -> None:
        self.receiver = receiver
        self.mirror = Mirror(initial)
        self.on_frame = on_frame
        self.frame_interval = frame_interval
        self.frames = 0
        self.trace: Optional[List[Operation]] = [] if keep_trace else None
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(
            target=self.run, name="sort-consumer", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def _frame(self) -> None:
        if self.on_frame is not None:
            self.on_frame(self.mirror)
        self.frames += 1

    def run(self) -> None:
        last = time.monotonic()
        poll = self.frame_interval if self.frame_interval > 0 else None
        try:
            while True:
                try:
                    op = self.receiver.recv(timeout=poll)
                except queue.Empty:
                    continue
                except ChannelClosed:
                    break
                self.mirror.apply(op)
                if self.trace is not None:
                    self.trace.append(op)
                now = time.monotonic()
                if now - last >= self.frame_interval:
                    self._frame()
                    last = now
            self._frame()
        except Exception as exc:
            self.error = exc
            logger.exception("consumer failed after %d operations", self.mirror.applied)
            self.receiver.close()

    def stop(self) -> None:
        """Drop the receiver; the engine keeps running but its sends are skipped."""
        self.receiver.close()

    def join(self, timeout: Optional[float] = None) -> bool:
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def applied(self) -> int:
        return self.mirror.applied


__all__ = ["ConsumerWorker", "Mirror"]
