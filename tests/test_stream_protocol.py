"""Contract tests for operation trace MessagePack helpers."""

from __future__ import annotations

from pathlib import Path

import msgpack
import pytest

from Sort_Stream.engine.models.element import Element, Phase, elements_from_values
from Sort_Stream.engine.operations import Compare, Overwrite, SetPhase
from Sort_Stream.engine.stream.protocol import (
    load_trace,
    pack_operation,
    save_trace,
    unpack_operation,
)
from Sort_Stream.replay import record, replay


def test_pack_unpack_each_operation() -> None:
    for op in (
        SetPhase(3, Phase.PLACED_FROM_LEFT),
        Compare(0, 4),
        Overwrite(1, Element(7, Phase.DIVIDING, tag=2)),
    ):
        assert unpack_operation(pack_operation(op)) == op


def test_packed_payload_carries_type_and_version() -> None:
    msg = msgpack.unpackb(pack_operation(Compare(1, 2)), raw=False)
    assert msg == {"type": "Compare", "v": 1, "index_a": 1, "index_b": 2}


def test_unpack_unknown_version() -> None:
    raw = msgpack.packb({"type": "Compare", "v": 99, "index_a": 0, "index_b": 1})
    with pytest.raises(ValueError):
        unpack_operation(raw)


def test_unpack_missing_v() -> None:
    raw = msgpack.packb({"type": "SetPhase", "index": 0, "phase": "neutral"})
    with pytest.raises(ValueError):
        unpack_operation(raw)


def test_unpack_unknown_type_and_phase() -> None:
    with pytest.raises(ValueError):
        unpack_operation(msgpack.packb({"type": "Swap", "v": 1}))
    with pytest.raises(ValueError):
        unpack_operation(
            msgpack.packb({"type": "SetPhase", "v": 1, "index": 0, "phase": "red"})
        )


def test_unpack_missing_field() -> None:
    with pytest.raises(ValueError):
        unpack_operation(msgpack.packb({"type": "Overwrite", "v": 1, "index": 0}))


def test_trace_file_replays_to_sorted(tmp_path: Path) -> None:
    seq = elements_from_values([5, 3, 8, 1, 3])
    initial = list(seq)
    ops = record(seq)
    path = tmp_path / "runs" / "trace.msgpack"

    assert save_trace(path, initial, ops) == len(ops)
    loaded_initial, loaded_ops = load_trace(path)

    assert loaded_initial == initial
    assert loaded_ops == ops
    assert replay(loaded_initial, loaded_ops).elements() == seq


def test_load_trace_rejects_bad_header(tmp_path: Path) -> None:
    path = tmp_path / "bad.msgpack"
    path.write_bytes(msgpack.packb({"type": "Compare", "v": 1}))
    with pytest.raises(ValueError):
        load_trace(path)
    empty = tmp_path / "empty.msgpack"
    empty.write_bytes(b"")
    with pytest.raises(ValueError):
        load_trace(empty)
