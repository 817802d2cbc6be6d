# -*- coding: utf-8 -*-
"""
Lumen: Color conversion for the rendering pipeline
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Per-Color Conversion API
========================
Named, one-directional conversions between the color kinds defined in
``lumen_types``. Every function is pure and total over its input type.

Range policy:
    - sRGB -> linear and the XYZ matrix stage trust the input range and
      extrapolate.
    - linear -> sRGB clamps every output channel to [0, 1].
    - float -> byte saturates (see ``lumen_kernels.quantize``).

Alpha is treated as one more gamma-encoded scalar in the 4-channel
gamma conversions.
"""

import numpy as np

from lumen_kernels import (
    M_LINEAR_RGB_TO_XYZ,
    M_XYZ_TO_LINEAR_RGB,
    clamp_unit,
    decode,
    dequantize,
    encode,
    quantize,
)
from lumen_types import (
    LinearRGBAColor,
    LinearRGBAU8Color,
    LinearRGBColor,
    LinearRGBU8Color,
    SRGBAColor,
    SRGBAU8Color,
    SRGBColor,
    SRGBU8Color,
    XYZColor,
)

__all__ = [
    # --- Transfer function ---
    "encode",
    "decode",
    # --- Gamma ---
    "srgb_to_linear_rgb",
    "srgba_to_linear_rgba",
    "linear_rgb_to_srgb",
    "linear_rgba_to_srgba",
    # --- XYZ ---
    "xyz_to_linear_rgb",
    "linear_rgb_to_xyz",
    "xyz_to_srgb",
    "srgb_to_xyz",
    # --- Quantization ---
    "to_u8",
    "from_u8",
    "srgb_to_u8",
    "srgba_to_u8",
    "linear_rgb_to_u8",
    "linear_rgba_to_u8",
    "srgb_from_u8",
    "srgba_from_u8",
    "linear_rgb_from_u8",
    "linear_rgba_from_u8",
    # --- Hex ---
    "srgb_u8_from_hex",
    "srgba_u8_from_hex",
    "srgb_u8_to_hex",
    "srgba_u8_to_hex",
    # --- Compositing ---
    "over",
]


# =============================================================================
# 1. sRGB <-> LINEAR RGB
# =============================================================================

def srgb_to_linear_rgb(c: SRGBColor) -> LinearRGBColor:
    """Decodes each channel. No clamping."""
    return LinearRGBColor(decode(c.r), decode(c.g), decode(c.b))

def srgba_to_linear_rgba(c: SRGBAColor) -> LinearRGBAColor:
    """Decodes each channel, alpha included. No clamping."""
    return LinearRGBAColor(decode(c.r), decode(c.g), decode(c.b), decode(c.a))

def linear_rgb_to_srgb(c: LinearRGBColor) -> SRGBColor:
    """Encodes each channel and clamps the result to [0, 1]."""
    return SRGBColor(
        clamp_unit(encode(c.r)),
        clamp_unit(encode(c.g)),
        clamp_unit(encode(c.b)),
    )

def linear_rgba_to_srgba(c: LinearRGBAColor) -> SRGBAColor:
    """Encodes each channel, alpha included, and clamps to [0, 1]."""
    return SRGBAColor(
        clamp_unit(encode(c.r)),
        clamp_unit(encode(c.g)),
        clamp_unit(encode(c.b)),
        clamp_unit(encode(c.a)),
    )


# =============================================================================
# 2. XYZ <-> LINEAR RGB
# =============================================================================

def xyz_to_linear_rgb(xyz: XYZColor) -> LinearRGBColor:
    """
    Applies the XYZ -> linear RGB matrix (D65).

    Out-of-gamut colors produce channels outside [0, 1]; they are passed
    through unmodified.
    """
    rgb = M_XYZ_TO_LINEAR_RGB @ np.array((xyz.x, xyz.y, xyz.z), dtype=np.float64)
    return LinearRGBColor(rgb[0], rgb[1], rgb[2])

def linear_rgb_to_xyz(rgb: LinearRGBColor) -> XYZColor:
    """Applies the inverse matrix, linear RGB -> XYZ (D65)."""
    xyz = M_LINEAR_RGB_TO_XYZ @ np.array((rgb.r, rgb.g, rgb.b), dtype=np.float64)
    return XYZColor(xyz[0], xyz[1], xyz[2])

def xyz_to_srgb(xyz: XYZColor) -> SRGBColor:
    """XYZ -> linear RGB -> sRGB. Clamped by the final stage."""
    return linear_rgb_to_srgb(xyz_to_linear_rgb(xyz))

def srgb_to_xyz(c: SRGBColor) -> XYZColor:
    """sRGB -> linear RGB -> XYZ."""
    return linear_rgb_to_xyz(srgb_to_linear_rgb(c))


# =============================================================================
# 3. FLOAT <-> 8-BIT
# =============================================================================

def to_u8(x: float) -> int:
    """
    Quantizes one channel: floor(x * 256), saturating to 255.

    Negative and NaN inputs map to 0.
    """
    return quantize(x)

def from_u8(b: int) -> float:
    """Expands one channel: b / 255."""
    return dequantize(b)

def srgb_to_u8(c: SRGBColor) -> SRGBU8Color:
    return SRGBU8Color(quantize(c.r), quantize(c.g), quantize(c.b))

def srgba_to_u8(c: SRGBAColor) -> SRGBAU8Color:
    return SRGBAU8Color(quantize(c.r), quantize(c.g), quantize(c.b), quantize(c.a))

def linear_rgb_to_u8(c: LinearRGBColor) -> LinearRGBU8Color:
    return LinearRGBU8Color(quantize(c.r), quantize(c.g), quantize(c.b))

def linear_rgba_to_u8(c: LinearRGBAColor) -> LinearRGBAU8Color:
    return LinearRGBAU8Color(quantize(c.r), quantize(c.g), quantize(c.b), quantize(c.a))

def srgb_from_u8(c: SRGBU8Color) -> SRGBColor:
    return SRGBColor(dequantize(c.r), dequantize(c.g), dequantize(c.b))

def srgba_from_u8(c: SRGBAU8Color) -> SRGBAColor:
    return SRGBAColor(dequantize(c.r), dequantize(c.g), dequantize(c.b), dequantize(c.a))

def linear_rgb_from_u8(c: LinearRGBU8Color) -> LinearRGBColor:
    return LinearRGBColor(dequantize(c.r), dequantize(c.g), dequantize(c.b))

def linear_rgba_from_u8(c: LinearRGBAU8Color) -> LinearRGBAColor:
    return LinearRGBAColor(
        dequantize(c.r), dequantize(c.g), dequantize(c.b), dequantize(c.a)
    )


# =============================================================================
# 4. HEX LITERALS
# =============================================================================
# Only the low 32 bits of the literal are considered.

def srgb_u8_from_hex(value: int) -> SRGBU8Color:
    """0x??RRGGBB -> (R, G, B). Bits 24-31 are ignored."""
    return SRGBU8Color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

def srgba_u8_from_hex(value: int) -> SRGBAU8Color:
    """0xRRGGBBAA -> (R, G, B, A)."""
    return SRGBAU8Color(
        (value >> 24) & 0xFF, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
    )

def srgb_u8_to_hex(c: SRGBU8Color) -> int:
    """(R, G, B) -> 0xRRGGBB."""
    return (c.r << 16) | (c.g << 8) | c.b

def srgba_u8_to_hex(c: SRGBAU8Color) -> int:
    """(R, G, B, A) -> 0xRRGGBBAA."""
    return (c.r << 24) | (c.g << 16) | (c.b << 8) | c.a


# =============================================================================
# 5. COMPOSITING
# =============================================================================

def over(above: LinearRGBAColor, below: LinearRGBAColor) -> LinearRGBAColor:
    """
    Porter-Duff source-over in linear light.

    Both layers and the result use straight (non-premultiplied) alpha:

        alpha_out = a_above + a_below * (1 - a_above)
        rgb_out   = (rgb_above * a_above + rgb_below * a_below * (1 - a_above)) / alpha_out

    Design Decision:
        When both layers are fully transparent (``alpha_out == 0``) the
        quotient is 0/0. The result is defined as transparent black
        ``(0, 0, 0, 0)`` so no NaN reaches later pipeline stages.

    Args:
        above: Top layer.
        below: Bottom layer.

    Returns:
        The composited color.
    """
    a_top = above.a
    a_bot = below.a * (1.0 - a_top)
    a_out = a_top + a_bot
    if a_out == 0.0:
        return LinearRGBAColor(0.0, 0.0, 0.0, 0.0)

    return LinearRGBAColor(
        (above.r * a_top + below.r * a_bot) / a_out,
        (above.g * a_top + below.g * a_bot) / a_out,
        (above.b * a_top + below.b * a_bot) / a_out,
        a_out,
    )
