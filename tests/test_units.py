import pytest
from photolayout import units


def test_zero():
    assert units.mm_to_px(0) == 0
    assert units.px_to_mm(0) == 0.0


def test_known_values():
    assert units.mm_to_px(1) == 12
    assert units.mm_to_px(40) == 472
    assert units.mm_to_px(25.4) == 300
    assert units.mm_to_px(127) == 1500


def test_mm_px_roundtrip():
    mm = 75
    px = units.mm_to_px(mm)
    assert isinstance(px, int)
    assert units.px_to_mm(px) == pytest.approx(mm, abs=0.05)


def test_monotonic():
    values = [units.mm_to_px(tenth / 10) for tenth in range(0, 2000)]
    assert values == sorted(values)


def test_round_half_up_ties_toward_positive():
    assert units.round_half_up(2.5) == 3
    assert units.round_half_up(-2.5) == -2
    assert units.round_half_up(-2.6) == -3
    assert units.round_half_up(0.49) == 0


def test_snap_unit():
    assert units.snap_unit_px() == 12
