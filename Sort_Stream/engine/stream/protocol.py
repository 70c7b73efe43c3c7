"""MessagePack helpers for operation traces.

Each operation is packed as a map with a ``type`` discriminator and a ``v``
version field. A trace file is a plain MessagePack stream: one
``TraceHeader`` map holding the initial sequence, followed by one map per
operation in emission order. Unknown types, unknown versions or missing
fields raise a ``ValueError`` to keep the format stable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

import msgpack  # type: ignore[import-untyped]

from ..models.element import Element, Phase
from ..operations import Compare, Operation, Overwrite, SetPhase

OPERATION_VERSION = 1
TRACE_HEADER_VERSION = 1

_FIELDS = {
    "SetPhase": ("index", "phase"),
    "Compare": ("index_a", "index_b"),
    "Overwrite": ("index", "element"),
}


def element_to_dict(element: Element) -> Dict[str, Any]:
    return {"value": element.value, "phase": element.phase.value, "tag": element.tag}


def element_from_dict(data: Dict[str, Any]) -> Element:
    """Rebuild an :class:`Element` from its packed mapping."""
    if "value" not in data:
        raise ValueError("element missing 'value' field")
    try:
        phase = Phase(data.get("phase", Phase.NEUTRAL.value))
    except ValueError:
        raise ValueError(f"unknown phase: {data.get('phase')!r}") from None
    return Element(value=data["value"], phase=phase, tag=data.get("tag"))


def operation_to_dict(op: Operation) -> Dict[str, Any]:
    if isinstance(op, SetPhase):
        body: Dict[str, Any] = {"index": op.index, "phase": op.phase.value}
    elif isinstance(op, Compare):
        body = {"index_a": op.index_a, "index_b": op.index_b}
    elif isinstance(op, Overwrite):
        body = {"index": op.index, "element": element_to_dict(op.element)}
    else:
        raise TypeError(f"not an operation: {op!r}")
    return {"type": type(op).__name__, "v": OPERATION_VERSION, **body}


def operation_from_dict(msg: Dict[str, Any]) -> Operation:
    """Decode a packed operation mapping ensuring version compatibility."""
    kind = msg.get("type")
    if kind not in _FIELDS:
        raise ValueError(f"unknown operation type: {kind!r}")
    if "v" not in msg:
        raise ValueError("missing 'v' field")
    if msg["v"] != OPERATION_VERSION:
        raise ValueError(f"unsupported {kind} version: {msg['v']}")
    for name in _FIELDS[kind]:
        if name not in msg:
            raise ValueError(f"{kind} missing {name!r} field")
    if kind == "SetPhase":
        try:
            phase = Phase(msg["phase"])
        except ValueError:
            raise ValueError(f"unknown phase: {msg['phase']!r}") from None
        return SetPhase(int(msg["index"]), phase)
    if kind == "Compare":
        return Compare(int(msg["index_a"]), int(msg["index_b"]))
    return Overwrite(int(msg["index"]), element_from_dict(msg["element"]))


def pack_operation(op: Operation) -> bytes:
    """Return msgpack-encoded ``op``."""
    return msgpack.packb(operation_to_dict(op), use_bin_type=True)


def unpack_operation(raw: bytes) -> Operation:
    return operation_from_dict(msgpack.unpackb(raw, raw=False))


def save_trace(
    path: Union[str, Path], initial: Sequence[Element], ops: Iterable[Operation]
) -> int:
    """Write ``initial`` and ``ops`` to ``path``; return the operation count."""

    packer = msgpack.Packer(use_bin_type=True)
    count = 0
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("wb") as fh:
        header = {
            "type": "TraceHeader",
            "v": TRACE_HEADER_VERSION,
            "initial": [element_to_dict(e) for e in initial],
        }
        fh.write(packer.pack(header))
        for op in ops:
            fh.write(packer.pack(operation_to_dict(op)))
            count += 1
    return count


def load_trace(path: Union[str, Path]) -> Tuple[List[Element], List[Operation]]:
    """Read a trace written by :func:`save_trace`."""

    with Path(path).open("rb") as fh:
        unpacker = msgpack.Unpacker(fh, raw=False)
        try:
            header = next(unpacker)
        except StopIteration:
            raise ValueError("empty trace file") from None
        if not isinstance(header, dict) or header.get("type") != "TraceHeader":
            raise ValueError("expected type 'TraceHeader'")
        if header.get("v") != TRACE_HEADER_VERSION:
            raise ValueError(f"unsupported TraceHeader version: {header.get('v')}")
        initial = [element_from_dict(e) for e in header.get("initial", [])]
        ops = [operation_from_dict(msg) for msg in unpacker]
    return initial, ops


__all__ = [
    "OPERATION_VERSION",
    "TRACE_HEADER_VERSION",
    "load_trace",
    "operation_from_dict",
    "operation_to_dict",
    "pack_operation",
    "save_trace",
    "unpack_operation",
]
