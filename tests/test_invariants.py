from invariants import checks
from Sort_Stream.engine.models.element import Element, Phase, elements_from_values
from Sort_Stream.engine.operations import Compare, Overwrite, SetPhase


def test_is_sorted():
    assert checks.is_sorted([])
    assert checks.is_sorted([1, 1, 2])
    assert not checks.is_sorted([2, 1])


def test_is_stable_detects_swapped_equals():
    original = elements_from_values([2, 2, 1])
    good = [original[2], original[0], original[1]]
    bad = [original[2], original[1], original[0]]
    assert checks.is_stable(original, good)
    assert not checks.is_stable(original, bad)


def test_indices_in_range():
    assert checks.indices_in_range([Compare(0, 1), SetPhase(1, Phase.NEUTRAL)], 2)
    assert not checks.indices_in_range([Compare(0, 2)], 2)


def test_phase_termination():
    ops = [
        SetPhase(0, Phase.DIVIDING),
        SetPhase(1, Phase.NEUTRAL),
        Compare(0, 1),
        SetPhase(0, Phase.NEUTRAL),
    ]
    assert checks.phase_termination_ok(ops, 2)
    assert not checks.phase_termination_ok(ops[:2], 2)
    assert not checks.phase_termination_ok([SetPhase(0, Phase.NEUTRAL)] * 2, 2)
    assert checks.phase_termination_ok([], 0)


def test_trace_conservation():
    initial = elements_from_values([3, 1])
    final = [Element(1), Element(3)]
    ops = [Overwrite(0, Element(9)), Overwrite(0, Element(1)), Overwrite(1, Element(3))]
    assert checks.trace_conservation_ok(initial, ops, final)
    assert not checks.trace_conservation_ok(initial, ops[:1], final)


def test_count_by_kind():
    ops = [Compare(0, 1), Compare(1, 2), SetPhase(0, Phase.NEUTRAL)]
    assert checks.count_by_kind(ops) == {"Compare": 2, "SetPhase": 1}


def test_overwrites_from_input():
    initial = elements_from_values([3, 1])
    merged = [
        Overwrite(0, initial[1]),
        SetPhase(0, Phase.PLACED_FROM_RIGHT),
        Overwrite(1, initial[0]),
        SetPhase(1, Phase.PLACED_FROM_LEFT),
        SetPhase(0, Phase.NEUTRAL),
        SetPhase(1, Phase.NEUTRAL),
    ]
    assert checks.overwrites_from_input(initial, merged)
    assert checks.overwrites_from_input([], [])


def test_overwrites_from_input_rejects_fabricated_values():
    initial = elements_from_values([3, 1])
    assert not checks.overwrites_from_input(initial, [Overwrite(0, Element(9, tag=0))])
    # right value, wrong identity
    assert not checks.overwrites_from_input(initial, [Overwrite(0, Element(1, tag=0))])


def test_overwrites_from_input_rejects_duplicating_merge():
    initial = elements_from_values([3, 1])
    ops = [
        Overwrite(0, initial[1]),
        Overwrite(1, initial[1]),
        SetPhase(0, Phase.NEUTRAL),
    ]
    assert not checks.overwrites_from_input(initial, ops)


def test_from_run_reports_fabricated_values():
    initial = elements_from_values([2, 1])
    final = [Element(1, tag=1), Element(2, tag=0)]
    ops = [Overwrite(0, Element(1, tag=7)), Overwrite(0, final[0]), Overwrite(1, final[1])]
    results = checks.from_run(initial, ops, final)
    assert results["inv_trace_conservation"]
    assert not results["inv_no_fabricated_values"]
