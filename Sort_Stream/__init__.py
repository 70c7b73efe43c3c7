"""Sort_Stream package initialization."""

from __future__ import annotations

from typing import Any

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .consumer import ConsumerWorker, Mirror
    from .engine.merge_sort import run

__all__ = ["ConsumerWorker", "Mirror", "run"]


def __getattr__(name: str) -> Any:  # pragma: no cover - attribute access
    """Lazily expose the engine entry point and the reference consumer."""

    if name == "run":
        from .engine.merge_sort import run as _run

        return _run
    if name in ("Mirror", "ConsumerWorker"):
        from . import consumer

        return getattr(consumer, name)
    raise AttributeError(name)
