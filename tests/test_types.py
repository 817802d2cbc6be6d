"""
test_types.py
-------------

Tests for the color value types.

Coverage:
- kinds are distinct: no cross-kind equality
- immutability and component iteration
- byte kinds validate range and type
- to_array / from_array
"""

import dataclasses

import numpy as np
import pytest

from lumen_types import (
    LinearRGBAColor,
    LinearRGBColor,
    LinearRGBU8Color,
    SRGBAColor,
    SRGBAU8Color,
    SRGBColor,
    SRGBU8Color,
    XYZColor,
)


def test_kinds_never_compare_equal():
    assert SRGBColor(0.1, 0.2, 0.3) != LinearRGBColor(0.1, 0.2, 0.3)
    assert SRGBColor(0.1, 0.2, 0.3) != XYZColor(0.1, 0.2, 0.3)
    assert SRGBU8Color(1, 2, 3) != LinearRGBU8Color(1, 2, 3)


def test_same_kind_equality_and_hash():
    assert SRGBColor(0.1, 0.2, 0.3) == SRGBColor(0.1, 0.2, 0.3)
    assert hash(SRGBU8Color(1, 2, 3)) == hash(SRGBU8Color(1, 2, 3))


def test_alpha_kinds_are_not_supersets():
    assert not isinstance(SRGBAColor(0.1, 0.2, 0.3, 1.0), SRGBColor)
    assert not isinstance(LinearRGBAColor(0.1, 0.2, 0.3, 1.0), LinearRGBColor)


def test_frozen():
    c = LinearRGBColor(0.1, 0.2, 0.3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.r = 0.5


def test_float_components_are_normalised():
    c = SRGBColor(1, np.float32(0.5), 0)
    assert all(type(v) is float for v in c)


def test_float_kinds_accept_out_of_range():
    assert tuple(LinearRGBColor(-1.0, 2.5, 0.0)) == (-1.0, 2.5, 0.0)


def test_iteration_order():
    assert tuple(SRGBAColor(0.1, 0.2, 0.3, 0.4)) == (0.1, 0.2, 0.3, 0.4)
    assert tuple(XYZColor(1.0, 2.0, 3.0)) == (1.0, 2.0, 3.0)


@pytest.mark.parametrize("bad", [-1, 256, 1000])
def test_byte_range_checked(bad):
    with pytest.raises(ValueError):
        SRGBU8Color(bad, 0, 0)


@pytest.mark.parametrize("bad", [1.0, "1", True, None])
def test_byte_type_checked(bad):
    with pytest.raises(ValueError):
        SRGBAU8Color(0, 0, 0, bad)


def test_byte_accepts_numpy_integers():
    c = SRGBU8Color(np.uint8(10), np.int64(20), 30)
    assert tuple(c) == (10, 20, 30)
    assert all(type(v) is int for v in c)


def test_to_array_dtypes():
    arr = SRGBColor(0.1, 0.2, 0.3).to_array()
    assert arr.dtype == np.float64
    np.testing.assert_array_equal(arr, [0.1, 0.2, 0.3])

    arr = SRGBAU8Color(1, 2, 3, 4).to_array()
    assert arr.dtype == np.uint8
    np.testing.assert_array_equal(arr, [1, 2, 3, 4])


def test_from_array():
    assert LinearRGBAColor.from_array(np.array([0.1, 0.2, 0.3, 0.4])) == LinearRGBAColor(
        0.1, 0.2, 0.3, 0.4
    )
    assert SRGBU8Color.from_array(np.array([1, 2, 3], dtype=np.uint8)) == SRGBU8Color(1, 2, 3)


def test_from_array_length_checked():
    with pytest.raises(ValueError):
        SRGBColor.from_array([0.1, 0.2, 0.3, 0.4])
    with pytest.raises(ValueError):
        SRGBAU8Color.from_array([1, 2, 3])


@pytest.mark.parametrize(
    "kind, arr",
    [(XYZColor, [0.1, 0.2, 0.3]), (LinearRGBU8Color, [1, 2, 3]), (SRGBAColor, [0, 0, 0, 1])],
)
def test_from_array_returns_calling_kind(kind, arr):
    assert type(kind.from_array(arr)) is kind
