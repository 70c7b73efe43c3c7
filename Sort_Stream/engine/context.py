"""Host-owned run context passed into engines."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .operations import Operation, kind_of
from .pacing import PacingPolicy, Pause
from .transport import Delivery, Sender


class SortCancelled(RuntimeError):
    """Raised by an engine when its run context was cancelled."""


@dataclass
class RunStats:
    """Counters accumulated over one engine run."""

    emitted: int = 0
    dropped: int = 0
    by_kind: Counter = field(default_factory=Counter)

    def as_dict(self) -> dict:
        return {
            "emitted": self.emitted,
            "dropped": self.dropped,
            "by_kind": dict(self.by_kind),
        }


@dataclass
class RunContext:
    """Everything an engine needs besides the sequence and the sender.

    The host creates one context per run and discards it afterwards; no
    engine state outlives it.

    Attributes
    ----------
    pacing:
        Delay policy consulted at every instrumentation point.
    cancel:
        Optional event; when set the engine stops at its next safe point
        and raises :class:`SortCancelled`.
    stats:
        Emission counters, including operations skipped because the
        receiver was gone.
    """

    pacing: PacingPolicy = field(default_factory=PacingPolicy.default)
    cancel: Optional[threading.Event] = None
    stats: RunStats = field(default_factory=RunStats)

    @property
    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()

    def emit(self, producer: Sender[Operation], op: Operation) -> Delivery:
        """Send ``op`` best-effort and record the outcome."""

        result = producer.send(op)
        self.stats.emitted += 1
        self.stats.by_kind[kind_of(op)] += 1
        if result is Delivery.SKIPPED:
            self.stats.dropped += 1
        return result

    def pause(self, pause: Pause) -> None:
        self.pacing.pause(pause)

    def checkpoint(self) -> None:
        """Raise :class:`SortCancelled` if cancellation was requested."""
        if self.cancelled:
            raise SortCancelled("sort cancelled by host")


__all__ = ["RunContext", "RunStats", "SortCancelled"]
