"""
Conversion between Float formats, and to and from the IEEE-754 bit
encodings used by native 32-bit and 64-bit floats.
"""

import struct

from .bigint import BigInt, LossFraction
from .core import Category, Float, normalize
from .semantics import FP32, FP64, Semantics


def _mask(bits: int) -> int:
    return (1 << bits) - 1


def from_bits(sem: Semantics, raw: int) -> Float:
    """Decodes an interchange-format bit pattern: [sign|exponent|mantissa],
    with `sem.exponent` exponent bits and `sem.precision - 1` mantissa
    bits."""
    ebits, mbits = sem.exponent, sem.mantissa
    if raw < 0 or raw >> sem.width:
        raise ValueError("0x%x is not a %d-bit pattern" % (raw, sem.width))
    # Extract the biased exponent (wipe the sign and mantissa).
    biased_exp = (raw >> mbits) & _mask(ebits)
    sign = bool((raw >> (ebits + mbits)) & 1)
    # Wipe the sign and exponent.
    mantissa = raw & _mask(mbits)

    # Check for NaN/Inf.
    if biased_exp == _mask(ebits):
        if mantissa == 0:
            return Float.inf(sem, sign)
        return Float.nan(sem, sign)

    exp = biased_exp - sem.bias
    if biased_exp != 0:
        # Add the implicit bit for normal numbers.
        mantissa |= 1 << mbits
    else:
        # Denormals share the exponent of the smallest normal.
        exp += 1

    return normalize(sem, sign, exp, BigInt.from_int(mantissa, sem.limbs))


def to_bits(x: Float) -> int:
    """Encodes `x` in the interchange format of its own semantics. NaNs are
    encoded with the quiet bit as their only payload."""
    sem = x.semantics
    ebits, mbits = sem.exponent, sem.mantissa
    category = x.category
    if category is Category.Infinity:
        exp, mantissa = _mask(ebits), 0
    elif category is Category.NaN:
        exp, mantissa = _mask(ebits), 1 << (mbits - 1)
    elif category is Category.Zero:
        exp, mantissa = 0, 0
    else:
        exp = x.exponent + sem.bias
        assert exp > 0
        m = x.mantissa
        # Encode denormals. If the exponent is the minimum value and there is
        # no leading integer bit then this is a denormal value.
        if exp == 1 and not m.get_bit(mbits):
            exp = 0
        mantissa = int(m.low_bits(mbits))

    bits = int(x.sign)
    bits = (bits << ebits) | exp
    bits = (bits << mbits) | mantissa
    return bits


def cast(x: Float, sem: Semantics, mode=None) -> Float:
    """Converts `x` to the format `sem`, rounding with `mode` (or the mode of
    `sem`) when the target is narrower."""
    category = x.category
    if category is Category.Zero:
        return Float.zero(sem, x.sign)
    if category is Category.Infinity:
        return Float.inf(sem, x.sign)
    if category is Category.NaN:
        return Float.nan(sem, x.sign)
    exp_delta = x.semantics.precision - sem.precision
    return normalize(sem, x.sign, x.exponent - exp_delta, x.mantissa,
                     LossFraction.ExactlyZero, mode)


def from_f32(sem: Semantics, value: float) -> Float:
    """Converts a value that is representable as a native 32-bit float."""
    (raw,) = struct.unpack("<I", struct.pack("<f", value))
    return cast(from_bits(FP32, raw), sem)


def from_f64(sem: Semantics, value: float) -> Float:
    (raw,) = struct.unpack("<Q", struct.pack("<d", value))
    return cast(from_bits(FP64, raw), sem)


def as_f32(x: Float) -> float:
    """Rounds `x` to a native 32-bit float, returned as a Python float that
    holds the same value."""
    raw = to_bits(cast(x, FP32))
    return struct.unpack("<f", struct.pack("<I", raw))[0]


def as_f64(x: Float) -> float:
    raw = to_bits(cast(x, FP64))
    return struct.unpack("<d", struct.pack("<Q", raw))[0]


def fp32(value: float) -> Float:
    return from_f32(FP32, value)


def fp64(value: float) -> Float:
    return from_f64(FP64, value)
