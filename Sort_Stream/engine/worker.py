from __future__ import annotations

import logging
import threading
from typing import MutableSequence, Optional

from .context import RunContext, SortCancelled
from .models.element import Element
from .operations import Operation
from .registry import Engine
from .transport import Sender

logger = logging.getLogger(__name__)


class EngineWorker:
    """Background worker that runs one engine on a separate thread."""

    def __init__(
        self,
        engine: Engine,
        sequence: MutableSequence[Element],
        producer: Sender[Operation],
        context: Optional[RunContext] = None,
    ) -> None:
        """Prepare ``engine`` to sort ``sequence`` into ``producer``.

        The worker owns ``sequence`` from :meth:`start` until :meth:`join`
        returns. A cancel event is attached to ``context`` if it has none.
        """
        self._engine = engine
        self._sequence = sequence
        self._producer = producer
        self.context = context if context is not None else RunContext()
        if self.context.cancel is None:
            self.context.cancel = threading.Event()
        self.cancelled = False
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(
            target=self.run, name="sort-engine", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def run(self) -> None:
        """Run the engine, then close the sender so the consumer can finish."""
        try:
            self._engine(self._sequence, self._producer, self.context)
        except SortCancelled:
            self.cancelled = True
            logger.info("engine cancelled after %d operations", self.context.stats.emitted)
        except Exception as exc:
            self.error = exc
            logger.exception("engine failed")
        finally:
            self._producer.close()

    def stop(self) -> None:
        """Request cancellation at the engine's next safe point."""
        assert self.context.cancel is not None
        self.context.cancel.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the engine; return ``True`` if it has finished."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()
