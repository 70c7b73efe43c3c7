from dataclasses import FrozenInstanceError

import pytest

from Sort_Stream.engine.models.element import Element, Phase
from Sort_Stream.engine.operations import (
    OPERATION_TYPES,
    Compare,
    Overwrite,
    SetPhase,
    indices_of,
    kind_of,
)


def test_kind_and_indices():
    assert kind_of(SetPhase(1, Phase.NEUTRAL)) == "SetPhase"
    assert kind_of(Compare(0, 3)) == "Compare"
    assert kind_of(Overwrite(2, Element(1))) == "Overwrite"
    assert indices_of(Compare(0, 3)) == (0, 3)
    assert indices_of(Overwrite(2, Element(1))) == (2,)


def test_foreign_objects_rejected():
    with pytest.raises(TypeError):
        kind_of("SetPhase")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        indices_of(object())  # type: ignore[arg-type]


def test_operations_are_immutable():
    op = Compare(0, 1)
    with pytest.raises(FrozenInstanceError):
        op.index_a = 5  # type: ignore[misc]


def test_operation_types_tuple():
    assert OPERATION_TYPES == (SetPhase, Compare, Overwrite)
