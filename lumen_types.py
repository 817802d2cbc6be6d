# -*- coding: utf-8 -*-
"""
Lumen: Color conversion for the rendering pipeline
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Color Value Types
=================
One frozen dataclass per color kind. Kinds never convert implicitly and
never compare equal to each other, even with identical components: an
``SRGBColor`` is not a ``LinearRGBColor``.

Float kinds accept any real component (out-of-range values are legal
conversion inputs). Byte kinds require ints in [0, 255].
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterator, Sequence, TypeVar

import numpy as np

from lumen_kernels import U8_MAX, ArrayFloat, ArrayU8

__all__ = [
    "SRGBColor",
    "SRGBAColor",
    "LinearRGBColor",
    "LinearRGBAColor",
    "SRGBU8Color",
    "SRGBAU8Color",
    "LinearRGBU8Color",
    "LinearRGBAU8Color",
    "XYZColor",
]


# ---------------------------------------------------------------------------
# Component storage helpers
# ---------------------------------------------------------------------------
# These carry storage behaviour only. Conversion functions are annotated with
# the concrete kinds below, never with these mixins.

_FloatT = TypeVar("_FloatT", bound="_FloatComponents")
_ByteT = TypeVar("_ByteT", bound="_ByteComponents")


class _FloatComponents:
    __slots__ = ()

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, float(getattr(self, f.name)))

    def __iter__(self) -> Iterator[float]:
        return (getattr(self, f.name) for f in fields(self))

    def to_array(self) -> ArrayFloat:
        """Components as a 1-D float64 array."""
        return np.array(tuple(self), dtype=np.float64)

    @classmethod
    def from_array(cls: type[_FloatT], arr: Sequence[float] | ArrayFloat) -> _FloatT:
        n = len(fields(cls))
        if len(arr) != n:
            raise ValueError(f"{cls.__name__} expects {n} components, got {len(arr)}")
        return cls(*(float(v) for v in arr))


class _ByteComponents:
    __slots__ = ()

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise ValueError(
                    f"{type(self).__name__}.{f.name} must be an int, got {type(v).__name__}"
                )
            if not 0 <= v <= U8_MAX:
                raise ValueError(
                    f"{type(self).__name__}.{f.name} must be in [0, {U8_MAX}], got {v}"
                )
            object.__setattr__(self, f.name, int(v))

    def __iter__(self) -> Iterator[int]:
        return (getattr(self, f.name) for f in fields(self))

    def to_array(self) -> ArrayU8:
        """Components as a 1-D uint8 array."""
        return np.array(tuple(self), dtype=np.uint8)

    @classmethod
    def from_array(cls: type[_ByteT], arr: Sequence[int] | ArrayU8) -> _ByteT:
        n = len(fields(cls))
        if len(arr) != n:
            raise ValueError(f"{cls.__name__} expects {n} components, got {len(arr)}")
        return cls(*(int(v) for v in arr))


# ---------------------------------------------------------------------------
# 1.  Gamma-encoded float kinds
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class SRGBColor(_FloatComponents):
    """Gamma-encoded sRGB, nominal [0, 1] per channel."""
    r: float
    g: float
    b: float


@dataclass(slots=True, frozen=True)
class SRGBAColor(_FloatComponents):
    """Gamma-encoded sRGB with alpha."""
    r: float
    g: float
    b: float
    a: float


# ---------------------------------------------------------------------------
# 2.  Linear-light float kinds
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class LinearRGBColor(_FloatComponents):
    """Linear-light RGB. Matrix transforms may leave [0, 1] transiently."""
    r: float
    g: float
    b: float


@dataclass(slots=True, frozen=True)
class LinearRGBAColor(_FloatComponents):
    """Linear-light RGB with straight (non-premultiplied) alpha."""
    r: float
    g: float
    b: float
    a: float


# ---------------------------------------------------------------------------
# 3.  8-bit kinds
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class SRGBU8Color(_ByteComponents):
    r: int
    g: int
    b: int


@dataclass(slots=True, frozen=True)
class SRGBAU8Color(_ByteComponents):
    r: int
    g: int
    b: int
    a: int


@dataclass(slots=True, frozen=True)
class LinearRGBU8Color(_ByteComponents):
    r: int
    g: int
    b: int


@dataclass(slots=True, frozen=True)
class LinearRGBAU8Color(_ByteComponents):
    r: int
    g: int
    b: int
    a: int


# ---------------------------------------------------------------------------
# 4.  CIE XYZ
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class XYZColor(_FloatComponents):
    """CIE 1931 XYZ tristimulus values (D65). Unconstrained."""
    x: float
    y: float
    z: float
