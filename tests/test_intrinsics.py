from dataclasses import fields

import pytest

from densemap.intrinsics import (
    VOLUME_X,
    VOLUME_Y,
    VOLUME_Z,
    Intrinsics,
    JtJJtrSE3,
    div_up,
)


def _filled(start: float) -> JtJJtrSE3:
    terms = JtJJtrSE3()
    for offset, field in enumerate(fields(terms)):
        setattr(terms, field.name, start + offset)
    return terms


def test_intrinsics_default_is_zero():
    intr = Intrinsics()
    assert (intr.fx, intr.fy, intr.cx, intr.cy) == (0.0, 0.0, 0.0, 0.0)


def test_level_zero_is_identity():
    intr = Intrinsics(525.0, 525.0, 319.5, 239.5)
    assert intr.at_level(0) == intr


def test_level_one_halves_values():
    intr = Intrinsics(525.0, 526.0, 319.5, 239.5)
    half = intr.at_level(1)
    assert half == Intrinsics(262.5, 263.0, 159.75, 119.75)


@pytest.mark.parametrize("a,b", [(0, 2), (1, 1), (1, 2), (2, 1)])
def test_levels_compose(a, b):
    intr = Intrinsics(528.0, 524.0, 320.0, 240.0)
    assert intr.at_level(a).at_level(b) == intr.at_level(a + b)


def test_negative_level_rejected():
    with pytest.raises(ValueError):
        Intrinsics(1.0, 1.0, 1.0, 1.0).at_level(-1)


def test_intrinsics_is_immutable():
    intr = Intrinsics(1.0, 2.0, 3.0, 4.0)
    with pytest.raises(AttributeError):
        intr.fx = 5.0
    assert intr.fx == 1.0
    assert intr == Intrinsics(1.0, 2.0, 3.0, 4.0)


def test_jtj_has_29_terms():
    assert len(fields(JtJJtrSE3())) == 29


def test_jtj_add_zero_leaves_unchanged():
    terms = _filled(1.0)
    expected = _filled(1.0)
    terms.add(JtJJtrSE3())
    assert terms == expected


def test_jtj_add_sums_each_field():
    left = _filled(1.0)
    right = _filled(100.0)
    left.add(right)
    for offset, field in enumerate(fields(left)):
        assert getattr(left, field.name) == 101.0 + 2 * offset


def test_jtj_add_is_commutative():
    a, b = _filled(3.0), _filled(-7.5)
    a.add(_filled(-7.5))
    b.add(_filled(3.0))
    assert a == b


def test_jtj_add_does_not_modify_other():
    left = _filled(1.0)
    right = _filled(2.0)
    left.add(right)
    assert right == _filled(2.0)


def test_volume_dimensions_split_into_blocks():
    assert (div_up(VOLUME_X, 32), div_up(VOLUME_Y, 32), div_up(VOLUME_Z, 32)) == (16, 16, 16)


def test_div_up_exact_and_remainder():
    assert div_up(640, 32) == 20
    assert div_up(641, 32) == 21


@pytest.mark.parametrize("total", [1, 7, 31, 32, 33, 480, 640, 1000])
@pytest.mark.parametrize("grain", [1, 8, 16, 32, 256])
def test_div_up_covers_minimally(total, grain):
    blocks = div_up(total, grain)
    assert blocks * grain >= total
    assert (blocks - 1) * grain < total


def test_div_up_zero_total():
    assert div_up(0, 32) == 0


@pytest.mark.parametrize("grain", [0, -4])
def test_div_up_rejects_non_positive_grain(grain):
    with pytest.raises(ValueError):
        div_up(10, grain)