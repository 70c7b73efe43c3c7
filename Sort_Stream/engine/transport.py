"""Ordered single-producer/single-consumer operation channel.

:func:`channel` returns a :class:`Sender` and a :class:`Receiver` sharing an
unbounded FIFO. The sender never blocks. When the receiver has been closed
sends are skipped instead of failing, and the skip is counted so lost
operations stay visible for diagnostics.
"""

from __future__ import annotations

import logging
import queue
from enum import Enum
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised when using a half whose peer side has finished."""


class Delivery(Enum):
    """Outcome of a single :meth:`Sender.send`."""

    DELIVERED = "delivered"
    SKIPPED = "skipped"


class _ChannelState:
    def __init__(self) -> None:
        self.queue: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self.sender_open = True
        self.receiver_open = True


class Sender(Generic[T]):
    """Producer half of a channel."""

    def __init__(self, state: _ChannelState) -> None:
        self._state = state
        self.sent = 0
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return not self._state.sender_open

    @property
    def connected(self) -> bool:
        """``True`` while the receiver half is still open."""
        return self._state.receiver_open

    @property
    def pending(self) -> int:
        """Approximate number of items queued but not yet received."""
        return self._state.queue.qsize()

    def send(self, item: T) -> Delivery:
        """Enqueue ``item`` without blocking.

        Returns :attr:`Delivery.SKIPPED` when the receiver is gone. Sending on
        a closed sender is a host error and raises :class:`ChannelClosed`.
        """

        if not self._state.sender_open:
            raise ChannelClosed("send on closed sender")
        if not self._state.receiver_open:
            if self.dropped == 0:
                logger.debug("receiver closed; further operations are skipped")
            self.dropped += 1
            return Delivery.SKIPPED
        self._state.queue.put(item)
        self.sent += 1
        return Delivery.DELIVERED

    def close(self) -> None:
        """Mark the end of the stream. Safe to call more than once."""
        if self._state.sender_open:
            self._state.sender_open = False
            self._state.queue.put(_CLOSED)

    def __enter__(self) -> "Sender[T]":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class Receiver(Generic[T]):
    """Consumer half of a channel.

    Iterating blocks until the sender is closed and every queued item has
    been yielded, in submission order.
    """

    def __init__(self, state: _ChannelState) -> None:
        self._state = state
        self._finished = False
        self.received = 0

    @property
    def closed(self) -> bool:
        return not self._state.receiver_open

    @property
    def finished(self) -> bool:
        """``True`` once the end-of-stream marker has been consumed."""
        return self._finished

    def recv(self, timeout: Optional[float] = None) -> T:
        """Return the next item.

        Raises
        ------
        ChannelClosed
            If the stream has ended or this receiver was closed.
        queue.Empty
            If ``timeout`` elapses first.
        """

        return self._get(block=True, timeout=timeout)

    def try_recv(self) -> Optional[T]:
        """Return the next item if one is queued, else ``None``."""
        try:
            return self._get(block=False)
        except (queue.Empty, ChannelClosed):
            return None

    def _get(self, block: bool, timeout: Optional[float] = None) -> T:
        if self._finished or not self._state.receiver_open:
            raise ChannelClosed("stream finished")
        item = self._state.queue.get(block=block, timeout=timeout)
        if item is _CLOSED:
            self._finished = True
            raise ChannelClosed("stream finished")
        self.received += 1
        return item  # type: ignore[return-value]

    def drain(self) -> List[T]:
        """Return every item currently queued without blocking."""
        items: List[T] = []
        while True:
            item = self.try_recv()
            if item is None:
                return items
            items.append(item)

    def close(self) -> None:
        """Drop the receiver; later sends are skipped by the sender."""
        self._state.receiver_open = False

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return

    def __enter__(self) -> "Receiver[T]":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def channel() -> Tuple[Sender[T], Receiver[T]]:
    """Create a connected ``(sender, receiver)`` pair."""

    state = _ChannelState()
    return Sender(state), Receiver(state)


__all__ = ["ChannelClosed", "Delivery", "Receiver", "Sender", "channel"]
