# -*- coding: utf-8 -*-
"""
Lumen: Color conversion for the rendering pipeline
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Numerical Kernels
=================
Constants, matrices and Numba-compiled kernels shared by the scalar API
(``lumen_color``) and the batched array API (``lumen_colorengine``).

Scalar kernels operate on a single float and are always compiled with
strict IEEE 754 semantics. Array kernels come in two variants
(``fastmath=True`` and ``fastmath=False``) selected at runtime through
``set_strict_ieee``.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - Porter, T. & Duff, T. (1984). "Compositing Digital Images".
"""

import math
import numpy as np
import numpy.typing as npt
from numba import njit, prange
from typing import Final, TypeAlias

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",
    "ArrayU8",

    # --- Constants ---
    "SRGB_ENCODE_THRESHOLD",
    "SRGB_DECODE_THRESHOLD",
    "SRGB_LINEAR_SLOPE",
    "SRGB_SCALE",
    "SRGB_OFFSET",
    "SRGB_GAMMA",
    "U8_MAX",
    "U8_BUCKETS",

    # --- Matrices ---
    "M_XYZ_TO_LINEAR_RGB",
    "M_LINEAR_RGB_TO_XYZ",
    "M_XYZ_TO_LINEAR_RGB_T",
    "M_LINEAR_RGB_TO_XYZ_T",

    # --- Configuration ---
    "set_strict_ieee",
    "is_strict_ieee",

    # --- Scalar kernels ---
    "encode",
    "decode",
    "quantize",
    "dequantize",
    "clamp_unit",

    # --- Array dispatchers ---
    "gamma_encode_array",
    "gamma_decode_array",
    "quantize_array",
    "over_array",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = npt.NDArray[np.floating]
ArrayU8: TypeAlias = npt.NDArray[np.uint8]

# --- sRGB Transfer Function Constants ---
# IEC 61966-2-1. The breakpoints and coefficients are kept in the published
# form so results line up with other sRGB consumers.
SRGB_ENCODE_THRESHOLD: Final[float] = 0.0031308
SRGB_DECODE_THRESHOLD: Final[float] = 0.04045
SRGB_LINEAR_SLOPE: Final[float] = 12.92
SRGB_SCALE: Final[float] = 1.055
SRGB_OFFSET: Final[float] = 0.055
SRGB_GAMMA: Final[float] = 2.4

# --- 8-bit Quantization Constants ---
# Encoding divides the unit interval into 256 buckets, decoding divides by
# 255 (full-range convention). The asymmetry is intentional.
U8_MAX: Final[int] = 255
U8_BUCKETS: Final[float] = 256.0

# --- XYZ <-> Linear RGB ---
# Forward matrix (XYZ -> linear RGB, D65). The inverse is always derived from
# it so both directions stay consistent.
M_XYZ_TO_LINEAR_RGB: Final[ArrayFloat] = np.array([
    [ 3.2406255, -1.537208,  -0.4986286],
    [-0.9689307,  1.8757561,  0.0415175],
    [ 0.0557101, -0.2040211,  1.0569959]
], dtype=np.float64)
M_LINEAR_RGB_TO_XYZ: Final[ArrayFloat] = np.linalg.inv(M_XYZ_TO_LINEAR_RGB)

# Pre-transposed copies for row-vector batches: (N, 3) @ M.T
M_XYZ_TO_LINEAR_RGB_T: Final[ArrayFloat] = M_XYZ_TO_LINEAR_RGB.T.copy()
M_LINEAR_RGB_TO_XYZ_T: Final[ArrayFloat] = M_LINEAR_RGB_TO_XYZ.T.copy()


# --- Runtime Configuration ---
# When True, array kernels use fastmath=False variants that preserve strict
# IEEE 754 semantics (inf / NaN propagation, no FP reassociation).
#
# Toggle at runtime via:
#     import lumen_kernels as lk
#     lk.set_strict_ieee(True)   # enable strict mode
#     lk.set_strict_ieee(False)  # back to fast mode (default)
_STRICT_IEEE: bool = False

def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 array kernels.

    Args:
        enabled: If True, use strict IEEE mode.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)

def is_strict_ieee() -> bool:
    """Returns True if strict IEEE 754 array kernels are active."""
    return _STRICT_IEEE


# =============================================================================
# 1. SCALAR KERNELS
# =============================================================================

@njit(cache=True)
def encode(c: float) -> float:
    """
    Applies the sRGB OETF (linear -> gamma-encoded).

    Defined over all reals; only [0, 1] is meaningful. No clamping.
    """
    if c <= 0.0031308:
        return 12.92 * c
    return 1.055 * (c ** (1.0 / 2.4)) - 0.055

@njit(cache=True)
def decode(v: float) -> float:
    """
    Applies the sRGB EOTF (gamma-encoded -> linear).

    Defined over all reals; only [0, 1] is meaningful. No clamping.
    """
    if v <= 0.04045:
        return v / 12.92
    return ((v + 0.055) / 1.055) ** 2.4

@njit(cache=True)
def clamp_unit(v: float) -> float:
    """Clamps a scalar to [0, 1]."""
    if v < 0.0:
        return 0.0
    if v > 1.0:
        return 1.0
    return v

@njit(cache=True)
def quantize(x: float) -> int:
    """
    Maps a float in nominal [0, 1] to a byte: floor(x * 256), saturated.

    The scaled value is computed in float64 and compared before truncation.
    Values >= 1.0 saturate to 255; negative and NaN inputs map to 0.
    """
    scaled = x * 256.0
    if scaled >= 256.0:
        return 255
    # NaN fails every comparison, so it lands here too
    if not scaled > 0.0:
        return 0
    return int(math.floor(scaled))

@njit(cache=True)
def dequantize(b: int) -> float:
    """Maps a byte to float: b / 255."""
    return b / 255.0


# =============================================================================
# 2. ARRAY KERNELS (Numba Optimized)
# =============================================================================
# NOTE: fastmath=True allows reassociation and relaxed IEEE compliance.
# Results may differ from the strict variants in the last few ulps.

@njit(cache=True, fastmath=True)
def _fast_gamma_encode(linear: ArrayFloat) -> ArrayFloat:
    """
    sRGB OETF over a contiguous buffer.

    Uses an explicit loop instead of `np.where` to avoid allocating a
    boolean mask array.
    """
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0/2.4)) - 0.055
    return out

@njit(cache=True, fastmath=True)
def _fast_gamma_decode(srgb: ArrayFloat) -> ArrayFloat:
    """sRGB EOTF over a contiguous buffer."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()

    for i in range(srgb.size):
        v = srgb_flat[i]
        if v <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = ((v + 0.055) / 1.055) ** 2.4
    return out


# --- Strict IEEE 754 kernel variants (fastmath=False) ---

@njit(cache=True, fastmath=False)
def _fast_gamma_encode_strict(linear: ArrayFloat) -> ArrayFloat:
    """sRGB OETF, strict IEEE 754 variant."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0/2.4)) - 0.055
    return out

@njit(cache=True, fastmath=False)
def _fast_gamma_decode_strict(srgb: ArrayFloat) -> ArrayFloat:
    """sRGB EOTF, strict IEEE 754 variant."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()
    for i in range(srgb.size):
        v = srgb_flat[i]
        if v <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = ((v + 0.055) / 1.055) ** 2.4
    return out

# Quantization and compositing only compare and divide; they are compiled
# once, without fastmath, so NaN checks are not optimised away.

@njit(cache=True, fastmath=False)
def _quantize_kernel(arr: ArrayFloat) -> ArrayU8:
    """Per-element `quantize` into a uint8 buffer of the same shape."""
    out = np.empty(arr.shape, dtype=np.uint8)
    arr_flat = arr.ravel()
    out_flat = out.ravel()
    for i in range(arr.size):
        scaled = arr_flat[i] * 256.0
        if scaled >= 256.0:
            out_flat[i] = 255
        elif not scaled > 0.0:
            out_flat[i] = 0
        else:
            out_flat[i] = np.uint8(math.floor(scaled))
    return out

@njit(cache=True, fastmath=False, parallel=True)
def _over_kernel(above: ArrayFloat, below: ArrayFloat) -> ArrayFloat:
    """
    Porter-Duff source-over on straight-alpha (N, 4) buffers.

    Pixels whose combined alpha is zero become transparent black.
    """
    n = above.shape[0]
    out = np.empty_like(above)

    for i in prange(n):
        a_top = above[i, 3]
        a_bot = below[i, 3] * (1.0 - a_top)
        a_out = a_top + a_bot
        if a_out == 0.0:
            out[i, 0] = 0.0
            out[i, 1] = 0.0
            out[i, 2] = 0.0
            out[i, 3] = 0.0
        else:
            for c in range(3):
                out[i, c] = (above[i, c] * a_top + below[i, c] * a_bot) / a_out
            out[i, 3] = a_out
    return out


# --- Kernel dispatchers ---
# Thin wrappers that check the global _STRICT_IEEE flag and delegate to the
# appropriate compiled variant.

def gamma_encode_array(linear: ArrayFloat) -> ArrayFloat:
    """Dispatch sRGB OETF to fast or strict kernel."""
    if _STRICT_IEEE:
        return _fast_gamma_encode_strict(linear)
    return _fast_gamma_encode(linear)

def gamma_decode_array(srgb: ArrayFloat) -> ArrayFloat:
    """Dispatch sRGB EOTF to fast or strict kernel."""
    if _STRICT_IEEE:
        return _fast_gamma_decode_strict(srgb)
    return _fast_gamma_decode(srgb)

def quantize_array(arr: ArrayFloat) -> ArrayU8:
    """Quantize a contiguous float64 buffer to uint8."""
    return _quantize_kernel(arr)

def over_array(above: ArrayFloat, below: ArrayFloat) -> ArrayFloat:
    """Composite two contiguous (N, 4) float64 buffers of equal shape."""
    return _over_kernel(above, below)
