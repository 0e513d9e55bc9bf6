#!/usr/bin/env python3
"""
swfloat: Software Binary Floating-Point

This library provides binary floating-point arithmetic with configurable
exponent width, precision and rounding mode, implemented on fixed-width
integers only. It implements IEEE 754 semantics (subnormals, signed zeros,
infinities and NaNs) and converts bit-exactly to and from native 32-bit and
64-bit floats.

Examples:
    >>> from swfloat import FP16, FP32, from_f64
    >>> x = from_f64(FP32, 2.5).cast(FP16)
    >>> y = from_f64(FP32, 1.5).cast(FP16)
    >>> x + y
    4

    >>> sem = Semantics(10, 10, "Zero")
    >>> Float(sem, False, 1, 13)
    0.050781

    >>> pi(FP128).as_f64()
    3.141592653589793
    >>> hex(from_bits(FP32, 0x41700000).to_bits())
    '0x41700000'

Constants:
    BF16, FP16, FP32, FP64, FP128, FP256: Standard floating-point formats
    pi, e: Mathematical constants for a given format
    Float, Semantics, RoundingMode: Classes for representing floating-point
        numbers and their semantics
    from_i64, from_u64, from_f32, from_f64, from_bits: Constructors for
        creating Float objects from integers, floats and bit patterns
"""

from .arithmetic import add, compare, div, fma, maximum, minimum, mul, scale
from .arithmetic import sub
from .bigint import BigInt, LossFraction
from .cast import as_f32, as_f64, cast, fp32, fp64, from_bits, from_f32
from .cast import from_f64, to_bits
from .core import Category, Float, normalize
from .functions import e, exp, pi, rem, sin, sqr, sqrt
from .semantics import BF16, FP16, FP32, FP64, FP128, FP256
from .semantics import RoundingMode, Semantics


def zero(sem: Semantics, sign: bool = False) -> Float:
    return Float.zero(sem, sign)


def inf(sem: Semantics, sign: bool = False) -> Float:
    return Float.inf(sem, sign)


def nan(sem: Semantics, sign: bool = False) -> Float:
    return Float.nan(sem, sign)


def from_i64(sem: Semantics, value: int) -> Float:
    return Float.from_i64(sem, value)


def from_u64(sem: Semantics, value: int) -> Float:
    return Float.from_u64(sem, value)


version = "0.2.0"
