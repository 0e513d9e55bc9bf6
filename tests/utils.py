"""Helpers shared by the tests: a deterministic random stream, a list of
native values that catch edge cases, and bit casts for native floats."""

import math
import struct
import sys

MASK32 = 0xFFFFFFFF


class Lfsr:
    """Linear-feedback shift register."""

    def __init__(self):
        self.state = 0x13371337

    def next(self):
        a = (self.state >> 24) & 1
        b = (self.state >> 23) & 1
        c = (self.state >> 22) & 1
        d = (self.state >> 17) & 1
        n = a ^ b ^ c ^ d ^ 1
        self.state = ((self.state << 1) | n) & MASK32

    def get(self) -> int:
        res = 0
        for _ in range(32):
            self.next()
            res = (res << 1) ^ (self.state & 1)
        return res

    def get64(self) -> int:
        hi = self.get()
        return (hi << 32) | self.get()


# Interesting values that various tests use to catch edge cases.
SPECIAL_VALUES = [
    -math.nan,
    math.nan,
    math.inf,
    -math.inf,
    sys.float_info.epsilon,
    -sys.float_info.epsilon,
    0.000000000000000000000000000000000000001,
    -sys.float_info.max,
    sys.float_info.max,
    math.pi,
    math.log(2),
    math.sqrt(2),
    math.e,
    0.0,
    -0.0,
    10.0,
    -10.0,
    -0.00001,
    0.1,
    355.0 / 113.0,
]


def f2i(f: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", f))[0]


def i2f(i: int) -> float:
    return struct.unpack("<d", struct.pack("<Q", i))[0]


def f32_to_bits(f: float) -> int:
    return struct.unpack("<I", struct.pack("<f", f))[0]


def bits_to_f32(i: int) -> float:
    return struct.unpack("<f", struct.pack("<I", i))[0]


def same_f64(a: float, b: float) -> bool:
    """Bit equality, with any NaN equal to any other NaN."""
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)
    return f2i(a) == f2i(b)
