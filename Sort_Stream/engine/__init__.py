"""Instrumented sorting engines and the operation transport."""

from .context import RunContext, RunStats, SortCancelled
from .merge_sort import merge_sort, run
from .models.element import Element, Phase, elements_from_values
from .operations import Compare, Operation, Overwrite, SetPhase
from .pacing import PacingPolicy, Pause
from .registry import ENGINES, get_engine, register_engine
from .transport import ChannelClosed, Delivery, Receiver, Sender, channel

__all__ = [
    "ChannelClosed",
    "Compare",
    "Delivery",
    "ENGINES",
    "Element",
    "Operation",
    "Overwrite",
    "PacingPolicy",
    "Pause",
    "Phase",
    "Receiver",
    "RunContext",
    "RunStats",
    "Sender",
    "SetPhase",
    "SortCancelled",
    "channel",
    "elements_from_values",
    "get_engine",
    "merge_sort",
    "register_engine",
    "run",
]
