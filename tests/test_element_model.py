from dataclasses import FrozenInstanceError

import pytest

from Sort_Stream.engine.models.element import Element, Phase, elements_from_values


def test_ordering_uses_value_only():
    a = Element(2, Phase.DIVIDING, tag="a")
    b = Element(2, Phase.NEUTRAL, tag="b")
    c = Element(3)
    assert a <= b and b <= a
    assert not a < b
    assert a < c and c > a and c >= b


def test_with_phase_returns_copy():
    e = Element(5, tag=0)
    moved = e.with_phase(Phase.PLACED_FROM_LEFT)
    assert moved.phase is Phase.PLACED_FROM_LEFT
    assert e.phase is Phase.NEUTRAL
    assert moved.value == 5 and moved.tag == 0


def test_elements_are_frozen():
    e = Element(1)
    with pytest.raises(FrozenInstanceError):
        e.value = 2  # type: ignore[misc]


def test_snapshot_is_equal_but_distinct():
    e = Element(4, Phase.DIVIDING, tag=7)
    snap = e.snapshot()
    assert snap == e
    assert snap is not e


def test_elements_from_values_tags_original_index():
    elems = elements_from_values([9, 8, 7])
    assert [e.tag for e in elems] == [0, 1, 2]
    assert all(e.phase is Phase.NEUTRAL for e in elems)


def test_phase_set_is_closed():
    assert {p.name for p in Phase} == {
        "DIVIDING",
        "LEFT_MERGE_CANDIDATE",
        "RIGHT_MERGE_CANDIDATE",
        "PLACED_FROM_LEFT",
        "PLACED_FROM_RIGHT",
        "NEUTRAL",
    }


def test_ordering_against_other_types_is_unsupported():
    e = Element(1)
    assert e.__lt__(2) is NotImplemented
    assert e.__ge__("x") is NotImplemented
    with pytest.raises(TypeError):
        e < 2  # noqa: B015
    with pytest.raises(TypeError):
        e >= None  # noqa: B015
