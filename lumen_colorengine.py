# -*- coding: utf-8 -*-
"""
Lumen: Color conversion for the rendering pipeline
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Batched Color Engine
====================
Array counterpart of ``lumen_color`` for whole pixel buffers. Every public
method accepts a single pixel ``(C,)`` or a batch ``(N, C)`` and returns
the same rank it was given.

Architecture Note:
    Public methods are wrapped by ``handle_shapes`` which validates the
    channel count and materialises a contiguous float64 array. Composite
    pipelines (``xyz_to_srgb``, ``srgb_to_xyz``) chain the ``_raw`` methods
    so the shape check runs once per call.

Results match the scalar API element-wise (fast-math kernels may differ
in the last few ulps; see ``lumen_kernels.set_strict_ieee``).
"""

import functools
import time
import warnings
import numpy as np
from typing import Any, Callable, Tuple

from lumen_kernels import (
    M_LINEAR_RGB_TO_XYZ_T,
    M_XYZ_TO_LINEAR_RGB_T,
    U8_MAX,
    ArrayFloat,
    ArrayU8,
    gamma_decode_array,
    gamma_encode_array,
    over_array,
    quantize_array,
)

__all__ = [
    "handle_shapes",
    "ColorSpaceEngine",
]


# =============================================================================
# 1. ROBUST DECORATORS
# =============================================================================

def handle_shapes(*channels: int) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator factory normalising inputs to contiguous (N, C) float64.

    Args:
        *channels: Accepted sizes of the last dimension.

    Returns:
        A decorator. The wrapped function receives a 2-D array and its
        result is unwrapped back to 1-D if the caller passed a single pixel.
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(arr: ArrayFloat, *args: Any, **kwargs: Any) -> Any:
            arr_in = np.ascontiguousarray(np.atleast_2d(arr), dtype=np.float64)

            if arr_in.ndim != 2 or arr_in.shape[-1] not in channels:
                expected = " or ".join(str(c) for c in channels)
                raise ValueError(
                    f"Expected shape (N, {expected}) or ({expected},), got {arr_in.shape}"
                )

            res = func(arr_in, *args, **kwargs)

            if np.ndim(arr) == 1:
                return res[0]
            return res
        return wrapper
    return decorator


# =============================================================================
# 2. COLOR SPACE ENGINE
# =============================================================================

class ColorSpaceEngine:
    """Static utility class for batched color transformations."""

    # =====================================================================
    #  Internal _raw fast-path methods  (assume validated (N, C) float64)
    # =====================================================================

    @staticmethod
    def _srgb_to_linear_raw(srgb: ArrayFloat) -> ArrayFloat:
        return gamma_decode_array(srgb)

    @staticmethod
    def _linear_to_srgb_raw(linear: ArrayFloat) -> ArrayFloat:
        # Clamp after encoding; the OETF itself is never fed clipped input
        return np.clip(gamma_encode_array(linear), 0.0, 1.0)

    @staticmethod
    def _xyz_to_linear_rgb_raw(xyz: ArrayFloat) -> ArrayFloat:
        return np.dot(xyz, M_XYZ_TO_LINEAR_RGB_T)

    @staticmethod
    def _linear_rgb_to_xyz_raw(rgb: ArrayFloat) -> ArrayFloat:
        return np.dot(rgb, M_LINEAR_RGB_TO_XYZ_T)

    # =====================================================================
    #  Public API  (shape-safe wrappers)
    # =====================================================================

    @staticmethod
    @handle_shapes(3, 4)
    def srgb_to_linear(srgb: ArrayFloat) -> ArrayFloat:
        """
        Decodes sRGB(A) to linear RGB(A). No clamping.

        Args:
            srgb: Gamma-encoded data, shape (N, 3|4) or (3|4,). Alpha, if
                  present, is decoded like the color channels.

        Returns:
            Linear-light values with the input's shape.
        """
        return ColorSpaceEngine._srgb_to_linear_raw(srgb)

    @staticmethod
    @handle_shapes(3, 4)
    def linear_to_srgb(linear: ArrayFloat) -> ArrayFloat:
        """
        Encodes linear RGB(A) to sRGB(A), clamping each channel to [0, 1].

        Args:
            linear: Linear-light data, shape (N, 3|4) or (3|4,).

        Returns:
            Gamma-encoded values in [0, 1].
        """
        return ColorSpaceEngine._linear_to_srgb_raw(linear)

    @staticmethod
    @handle_shapes(3)
    def xyz_to_linear_rgb(xyz: ArrayFloat) -> ArrayFloat:
        """XYZ (D65) -> linear RGB. Out-of-gamut values pass through."""
        return ColorSpaceEngine._xyz_to_linear_rgb_raw(xyz)

    @staticmethod
    @handle_shapes(3)
    def linear_rgb_to_xyz(rgb: ArrayFloat) -> ArrayFloat:
        """Linear RGB -> XYZ (D65)."""
        return ColorSpaceEngine._linear_rgb_to_xyz_raw(rgb)

    @staticmethod
    @handle_shapes(3)
    def xyz_to_srgb(xyz: ArrayFloat) -> ArrayFloat:
        """Direct conversion XYZ -> sRGB (clamped)."""
        linear = ColorSpaceEngine._xyz_to_linear_rgb_raw(xyz)
        return ColorSpaceEngine._linear_to_srgb_raw(linear)

    @staticmethod
    @handle_shapes(3)
    def srgb_to_xyz(srgb: ArrayFloat) -> ArrayFloat:
        """Direct conversion sRGB -> XYZ."""
        linear = ColorSpaceEngine._srgb_to_linear_raw(srgb)
        return ColorSpaceEngine._linear_rgb_to_xyz_raw(linear)

    # --- Quantization ---

    @staticmethod
    @handle_shapes(3, 4)
    def to_u8(values: ArrayFloat) -> ArrayU8:
        """
        Quantizes float channels to bytes: floor(x * 256), saturating to 255.

        Negative inputs map to 0. NaN inputs map to 0 and raise a
        ``RuntimeWarning``.

        Args:
            values: Float data, shape (N, 3|4) or (3|4,).

        Returns:
            uint8 array with the input's shape.
        """
        if np.isnan(values).any():
            warnings.warn(
                f"to_u8: {int(np.isnan(values).sum())} NaN component(s) "
                "quantized to 0.",
                RuntimeWarning,
                stacklevel=3,
            )
        return quantize_array(values)

    @staticmethod
    @handle_shapes(3, 4)
    def from_u8(values: ArrayFloat) -> ArrayFloat:
        """
        Expands byte channels to floats: b / 255.

        Args:
            values: Byte data (any integer or float dtype), shape (N, 3|4)
                    or (3|4,).

        Returns:
            float64 array with the input's shape.
        """
        return values / float(U8_MAX)

    # --- Hex literals ---

    @staticmethod
    def hex_to_srgb_u8(values: Any) -> ArrayU8:
        """
        Decomposes 0x??RRGGBB literals into (R, G, B) bytes.

        Args:
            values: A single int or a 1-D sequence of ints. Bits 24-31 are
                    ignored.

        Returns:
            uint8 array, shape (3,) for a scalar or (N, 3).
        """
        return ColorSpaceEngine._split_hex(values, (16, 8, 0))

    @staticmethod
    def hex_to_srgba_u8(values: Any) -> ArrayU8:
        """Decomposes 0xRRGGBBAA literals into (R, G, B, A) bytes."""
        return ColorSpaceEngine._split_hex(values, (24, 16, 8, 0))

    @staticmethod
    def _split_hex(values: Any, shifts: Tuple[int, ...]) -> ArrayU8:
        # Mask to the low 32 bits as Python ints; wider literals overflow int64
        packed = np.asarray(np.asarray(values, dtype=object) & 0xFFFFFFFF, dtype=np.int64)
        if packed.ndim > 1:
            raise ValueError(f"Expected a scalar or 1-D array of literals, got {packed.shape}")
        shifts_arr = np.array(shifts, dtype=np.int64)
        return ((packed[..., None] >> shifts_arr) & 0xFF).astype(np.uint8)

    # --- Compositing ---

    @staticmethod
    def _prepare_layers(above: ArrayFloat, below: ArrayFloat) -> Tuple[ArrayFloat, ArrayFloat]:
        """
        Broadcasting helper for ``over``.

        A single (1, 4) layer is materialised against the other operand's
        batch size so the kernel always sees equal, C-contiguous shapes.
        """
        top = np.ascontiguousarray(np.atleast_2d(above), dtype=np.float64)
        bot = np.ascontiguousarray(np.atleast_2d(below), dtype=np.float64)

        if top.ndim != 2 or bot.ndim != 2 or top.shape[-1] != 4 or bot.shape[-1] != 4:
            raise ValueError(f"Inputs must have shape (N, 4), got {top.shape} and {bot.shape}")

        if top.shape[0] != bot.shape[0]:
            if top.shape[0] == 1:
                top = np.ascontiguousarray(np.broadcast_to(top, bot.shape))
            elif bot.shape[0] == 1:
                bot = np.ascontiguousarray(np.broadcast_to(bot, top.shape))
            else:
                raise ValueError(f"Shapes {top.shape} and {bot.shape} are not broadcastable.")
        return top, bot

    @staticmethod
    def over(above: ArrayFloat, below: ArrayFloat) -> ArrayFloat:
        """
        Porter-Duff source-over on straight-alpha linear RGBA buffers.

        Design Decision:
            Pixels where both layers are fully transparent composite to
            transparent black (0, 0, 0, 0) rather than 0/0.

        Args:
            above: Top layer, shape (N, 4) or (4,).
            below: Bottom layer, shape (N, 4) or (4,).

        Returns:
            Composited pixels. Supports broadcasting (e.g., 1 vs N).
        """
        top, bot = ColorSpaceEngine._prepare_layers(above, below)
        res = over_array(top, bot)
        if np.ndim(above) == 1 and np.ndim(below) == 1:
            return res[0]
        return res


# =============================================================================
# Validation Block
# =============================================================================
if __name__ == "__main__":
    print("--- Lumen Color Engine Validation ---")

    # 1. Gamma Round-Trip
    print("1. Testing Gamma Round-Trip (sRGB->linear->sRGB)...")
    srgb_in = np.random.rand(1000, 4)
    srgb_out = ColorSpaceEngine.linear_to_srgb(ColorSpaceEngine.srgb_to_linear(srgb_in))
    max_err = np.max(np.abs(srgb_in - srgb_out))
    print(f"   Max Error: {max_err:.2e} {'[PASS]' if max_err < 1e-9 else '[FAIL]'}")

    # 2. XYZ Round-Trip
    print("2. Testing XYZ Round-Trip (linear->XYZ->linear)...")
    rgb_in = np.random.rand(1000, 3)
    rgb_out = ColorSpaceEngine.xyz_to_linear_rgb(ColorSpaceEngine.linear_rgb_to_xyz(rgb_in))
    max_err_xyz = np.max(np.abs(rgb_in - rgb_out))
    print(f"   Max Error: {max_err_xyz:.2e} {'[PASS]' if max_err_xyz < 1e-12 else '[FAIL]'}")

    # 3. Quantization Round-Trip (exhaustive)
    print("3. Testing 8-bit Round-Trip (all 256 levels)...")
    levels = np.repeat(np.arange(256, dtype=np.uint8)[:, None], 4, axis=1)
    back = ColorSpaceEngine.to_u8(ColorSpaceEngine.from_u8(levels))
    print(f"   {'[PASS]' if np.array_equal(levels, back) else '[FAIL]'}")

    # 4. Shape Safety
    print("4. Testing Shape Safety...")
    try:
        ColorSpaceEngine.srgb_to_xyz(np.zeros((10, 5)))
    except ValueError as e:
        print(f"   Caught expected error: {e}")

    # 5. Compositing zero-alpha policy
    print("5. Testing over() with zero combined alpha...")
    clear = np.array([0.3, 0.6, 0.9, 0.0])
    print(f"   Result: {ColorSpaceEngine.over(clear, clear)} (Expected: [0. 0. 0. 0.])")

    # 6. Benchmark
    N_bench = 4_000_000
    print(f"6. Benchmarking sRGB->linear->sRGB->u8 ({N_bench:,} RGBA pixels)...")
    pixels = np.random.rand(N_bench, 4)
    t0 = time.perf_counter()
    _ = ColorSpaceEngine.to_u8(ColorSpaceEngine.linear_to_srgb(ColorSpaceEngine.srgb_to_linear(pixels)))
    t1 = time.perf_counter()
    print(f"   Processed {N_bench:,} pixels in {(t1-t0)*1000:.2f} ms")
