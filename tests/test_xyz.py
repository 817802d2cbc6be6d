"""
test_xyz.py
-----------

Tests for the linear RGB <-> CIE XYZ matrix transform.

Coverage:
- derived inverse matrix matches the forward matrix
- xyz_to_linear_rgb / linear_rgb_to_xyz round trip, no clamping
- xyz_to_srgb / srgb_to_xyz composites
"""

import numpy as np
import pytest

from lumen_color import (
    linear_rgb_to_srgb,
    linear_rgb_to_xyz,
    srgb_to_linear_rgb,
    srgb_to_xyz,
    xyz_to_linear_rgb,
    xyz_to_srgb,
)
from lumen_kernels import M_LINEAR_RGB_TO_XYZ, M_XYZ_TO_LINEAR_RGB
from lumen_types import LinearRGBColor, SRGBColor, XYZColor

D65_WHITE = XYZColor(0.95047, 1.0, 1.08883)


def test_forward_matrix_values():
    expected = np.array([
        [ 3.2406255, -1.537208,  -0.4986286],
        [-0.9689307,  1.8757561,  0.0415175],
        [ 0.0557101, -0.2040211,  1.0569959],
    ])
    np.testing.assert_array_equal(M_XYZ_TO_LINEAR_RGB, expected)


def test_inverse_matrix_is_inverse():
    np.testing.assert_allclose(M_XYZ_TO_LINEAR_RGB @ M_LINEAR_RGB_TO_XYZ, np.eye(3), atol=1e-12)
    np.testing.assert_allclose(M_LINEAR_RGB_TO_XYZ @ M_XYZ_TO_LINEAR_RGB, np.eye(3), atol=1e-12)


def test_inverse_matches_published_rgb_to_xyz():
    # Row for luminance Y of the standard sRGB -> XYZ matrix
    np.testing.assert_allclose(M_LINEAR_RGB_TO_XYZ[1], [0.2126, 0.7152, 0.0722], atol=1e-3)


def test_white_point_maps_to_unit_rgb():
    rgb = xyz_to_linear_rgb(D65_WHITE)
    assert isinstance(rgb, LinearRGBColor)
    assert tuple(rgb) == pytest.approx((1.0, 1.0, 1.0), abs=1e-3)


def test_round_trip(rng):
    for rgb in rng.uniform(-0.5, 1.5, size=(200, 3)):
        c = LinearRGBColor.from_array(rgb)
        back = xyz_to_linear_rgb(linear_rgb_to_xyz(c))
        assert tuple(back) == pytest.approx(tuple(c), abs=1e-12)


def test_matrix_stage_does_not_clamp():
    # Saturated spectral-like XYZ falls outside the sRGB gamut
    rgb = xyz_to_linear_rgb(XYZColor(0.1, 0.6, 0.05))
    assert min(rgb) < 0.0
    rgb = xyz_to_linear_rgb(XYZColor(2.0, 2.0, 2.0))
    assert max(rgb) > 1.0


def test_xyz_to_srgb_is_composite():
    xyz = XYZColor(0.2, 0.3, 0.4)
    out = xyz_to_srgb(xyz)
    assert isinstance(out, SRGBColor)
    assert out == linear_rgb_to_srgb(xyz_to_linear_rgb(xyz))


def test_xyz_to_srgb_clamps_out_of_gamut():
    out = xyz_to_srgb(XYZColor(0.1, 0.6, 0.05))
    assert all(0.0 <= v <= 1.0 for v in out)


def test_srgb_to_xyz_is_composite():
    c = SRGBColor(0.25, 0.5, 0.75)
    out = srgb_to_xyz(c)
    assert isinstance(out, XYZColor)
    assert out == linear_rgb_to_xyz(srgb_to_linear_rgb(c))


def test_srgb_white_to_xyz():
    assert tuple(srgb_to_xyz(SRGBColor(1.0, 1.0, 1.0))) == pytest.approx(
        tuple(D65_WHITE), abs=1e-3
    )
