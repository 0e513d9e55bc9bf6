import math
from fractions import Fraction

import numpy as np
import pytest
from utils import SPECIAL_VALUES, bits_to_f32, i2f, same_f64

from swfloat import (FP16, FP32, FP64, BigInt, Semantics, add, compare, div,
                     fma, fp32, fp64, from_bits, from_i64, inf, maximum,
                     minimum, mul, nan, scale, sub, zero)
from swfloat.arithmetic import long_divide

OPS = {
    "add": (add, np.add),
    "sub": (sub, np.subtract),
    "mul": (mul, np.multiply),
    "div": (div, np.divide),
}


def native(op, a, b, dtype=np.float64):
    with np.errstate(all="ignore"):
        return float(op(dtype(a), dtype(b)))


def exact(x) -> Fraction:
    """The exact rational value of a finite number."""
    return Fraction(x.as_f64())


def test_addition():
    def add_helper(a, b):
        return add(fp64(a), fp64(b)).as_f64()

    assert add_helper(1., 1.) == 2.
    assert add_helper(8., 4.) == 12.
    assert add_helper(128., 2.) == 130.
    assert add_helper(128., -8.) == 120.
    assert add_helper(64., -60.) == 4.
    assert add_helper(69., -65.) == 4.
    assert add_helper(69., 69.) == 138.
    assert add_helper(69., 1.) == 70.
    assert add_helper(-128., -8.) == -136.
    assert add_helper(64., -65.) == -1.
    assert add_helper(-64., -65.) == -129.
    assert add_helper(-15., -15.) == -30.
    assert add_helper(-15., 15.) == 0.

    for i in range(-4, 15):
        for j in range(i, 15):
            assert add_helper(float(j), float(i)) == float(i + j)


def test_fp32_integer_addition():
    for i in range(-100, 100, 3):
        for j in range(-100, 100, 7):
            a = fp32(float(i))
            b = fp32(float(j))
            assert (a + b).as_f32() == native(np.add, i, j, np.float32)
            assert (a - b).as_f32() == native(np.subtract, i, j, np.float32)


@pytest.mark.parametrize("name", sorted(OPS))
def test_special_values(name):
    op, ref = OPS[name]
    for v0 in SPECIAL_VALUES:
        for v1 in SPECIAL_VALUES:
            r = op(fp64(v0), fp64(v1)).as_f64()
            assert same_f64(r, native(ref, v0, v1)), (v0, v1)


@pytest.mark.parametrize("name", sorted(OPS))
def test_random_f64(name, lfsr):
    op, ref = OPS[name]
    for _ in range(300):
        v0 = i2f(lfsr.get64())
        v1 = i2f(lfsr.get64())
        r = op(fp64(v0), fp64(v1)).as_f64()
        assert same_f64(r, native(ref, v0, v1)), (v0, v1)


@pytest.mark.parametrize("name", sorted(OPS))
def test_random_f32(name, lfsr):
    op, ref = OPS[name]
    for _ in range(300):
        v0 = bits_to_f32(lfsr.get())
        v1 = bits_to_f32(lfsr.get())
        r = op(fp32(v0), fp32(v1)).as_f32()
        assert same_f64(r, native(ref, v0, v1, np.float32)), (v0, v1)


def test_close_exponents(lfsr):
    # Cancellation and carries, with operands of nearby magnitudes.
    for _ in range(300):
        bits = lfsr.get64()
        v0 = i2f(bits)
        flip = ((lfsr.get() & 0x3) << 52) | (lfsr.get() & 0xFFFFF)
        v1 = i2f(bits ^ flip)
        for name in ("add", "sub"):
            op, ref = OPS[name]
            r = op(fp64(v0), fp64(v1)).as_f64()
            assert same_f64(r, native(ref, v0, v1)), (v0, v1)


def test_subnormal_arithmetic():
    tiny = from_bits(FP32, 1)
    assert (tiny + tiny).to_bits() == 2
    assert (from_bits(FP32, 0x00800000) - tiny).to_bits() == 0x007FFFFF
    assert (tiny * fp32(0.5)).is_zero()
    assert (tiny * fp32(1.5)).to_bits() == 2
    assert (from_bits(FP32, 3) / fp32(2.0)).to_bits() == 2


def test_zero_sum_sign():
    for mode in ("NearestTiesToEven", "NearestTiesToAway", "Zero",
                 "Positive", "Negative"):
        sem = FP32.with_mode(mode)
        x = from_i64(sem, 7)
        r = x + (-x)
        assert r.is_zero()
        assert r.is_negative() == (mode == "Negative")
        r = zero(sem) + zero(sem, True)
        assert r.is_negative() == (mode == "Negative")

    # The mode argument wins over the semantics mode.
    x = fp32(3.0)
    assert sub(x, x, "Negative").is_negative()
    assert not sub(x, x).is_negative()
    assert add(zero(FP32, True), zero(FP32, True)).is_negative()


def test_directed_rounding():
    one = fp32(1.0)
    third = div(one, fp32(3.0), "Positive")
    below = div(one, fp32(3.0), "Negative")
    assert exact(third) > Fraction(1, 3) > exact(below)
    assert third.to_bits() == below.to_bits() + 1
    assert div(one, fp32(3.0), "Zero").to_bits() == below.to_bits()
    assert div(-one, fp32(3.0), "Zero").to_bits() == (
        below.to_bits() | 0x80000000)

    big = fp32(3.0e38)
    # Overflow goes to infinity in every mode.
    assert add(big, big, "Zero").is_inf()


def test_fma_single_rounding():
    a = fp32(1.0 + 2.0 ** -12)
    c = fp32(-(1.0 + 2.0 ** -11))
    assert (a * a + c).is_zero()
    assert fma(a, a, c).as_f64() == 2.0 ** -24

    # Special operands behave like the separate operations.
    assert fma(inf(FP32), zero(FP32), fp32(1.0)).is_nan()
    assert fma(fp32(2.0), fp32(3.0), inf(FP32, True)).is_inf()
    assert fma(fp32(2.0), fp32(3.0), zero(FP32)).as_f64() == 6.0
    assert fma(nan(FP32), fp32(1.0), fp32(1.0)).is_nan()
    assert fma(fp32(2.0), fp32(-3.0), fp32(6.0)).is_zero()


def test_fma_against_exact(lfsr):
    for _ in range(200):
        a = fp64(i2f((lfsr.get64() & 0x800FFFFFFFFFFFFF) | (1023 << 52)))
        b = fp64(i2f((lfsr.get64() & 0x800FFFFFFFFFFFFF) | (1020 << 52)))
        c = fp64(i2f((lfsr.get64() & 0x800FFFFFFFFFFFFF) | (1019 << 52)))
        r = fma(a, b, c)
        want = float(exact(a) * exact(b) + exact(c))
        # float(Fraction) rounds correctly to nearest even.
        assert r.as_f64() == want


def test_compare():
    one = fp64(1.0)
    two = fp64(2.0)
    assert compare(one, two) == -1
    assert compare(two, one) == 1
    assert compare(one, fp64(1.0)) == 0
    assert compare(zero(FP64), zero(FP64, True)) == 0
    assert compare(fp64(-3.0), fp64(-2.0)) == -1
    assert compare(inf(FP64, True), fp64(-1e300)) == -1
    assert compare(inf(FP64), inf(FP64)) == 0
    assert compare(nan(FP64), one) is None
    assert compare(from_bits(FP64, 1), zero(FP64)) == 1

    x = nan(FP64)
    assert not x == x
    assert x != x
    assert not x < one and not x >= one

    for v0 in SPECIAL_VALUES:
        for v1 in SPECIAL_VALUES:
            a, b = fp64(v0), fp64(v1)
            assert (a < b) == (v0 < v1)
            assert (a == b) == (v0 == v1)
            assert (a >= b) == (v0 >= v1)


def test_min_max():
    def check(v0, v1):
        with np.errstate(all="ignore"):
            lo = float(np.fmin(v0, v1))
            hi = float(np.fmax(v0, v1))
        test = minimum(fp64(v0), fp64(v1)).as_f64()
        assert math.isnan(test) == math.isnan(lo)
        assert math.isnan(lo) or test == lo
        test = maximum(fp64(v0), fp64(v1)).as_f64()
        assert math.isnan(test) == math.isnan(hi)
        assert math.isnan(hi) or test == hi

    for v0 in SPECIAL_VALUES:
        for v1 in SPECIAL_VALUES:
            check(v0, v1)

    assert fp64(math.nan).min(fp64(5.0)).as_f64() == 5.0
    assert fp64(5.0).max(fp64(math.nan)).as_f64() == 5.0
    assert not fp64(-0.0).max(fp64(0.0)).is_negative()
    assert fp64(0.0).min(fp64(-0.0)).is_negative()


def test_scale():
    x = from_i64(FP64, 1)
    assert scale(x, 1).as_f64() == 2.0
    assert x.scale(-1).as_f64() == 0.5
    assert x.scale(1024).is_inf()
    assert x.scale(-1074).to_bits() == 1
    assert x.scale(-1076).is_zero()
    assert inf(FP64).scale(-5).is_inf()
    assert fp64(3.0).scale(-1075, "Positive").to_bits() == 2
    assert fp64(1.0).scale(-1080, "Positive").to_bits() == 1


def test_long_divide():
    q, r = long_divide(BigInt.from_int(100), BigInt.from_int(7))
    assert int(q) == 14
    assert int(r) == 2

    n = (1 << 150) + 12345
    d = (1 << 70) + 3
    q, r = long_divide(BigInt.from_int(n, 3), BigInt.from_int(d, 2))
    assert (int(q), int(r)) == divmod(n, d)
    assert q.limbs == 3

    with pytest.raises(ZeroDivisionError):
        long_divide(BigInt.from_int(1), BigInt.zero(1))


def test_mixed_semantics():
    with pytest.raises(ValueError, match="different semantics"):
        add(fp32(1.0), fp64(1.0))
    with pytest.raises(ValueError):
        fma(fp32(1.0), fp32(1.0), fp64(1.0))
    # The rounding mode is not part of the format check.
    assert add(fp32(1.0), fp32(1.0).cast(FP32.with_mode("Zero"))) == 2


def test_fp16_against_numpy(lfsr):
    for _ in range(300):
        b0 = lfsr.get() & 0xFFFF
        b1 = lfsr.get() & 0xFFFF
        v0 = float(np.array([b0], dtype=np.uint16).view(np.float16)[0])
        v1 = float(np.array([b1], dtype=np.uint16).view(np.float16)[0])
        x, y = from_bits(FP16, b0), from_bits(FP16, b1)
        # numpy computes half precision in binary32, which is wide enough to
        # round only once.
        assert same_f64((x * y).as_f64(),
                        native(np.multiply, v0, v1, np.float16))
        assert same_f64((x + y).as_f64(), native(np.add, v0, v1, np.float16))


def test_wide_formats():
    sem = Semantics(15, 113)
    third = from_i64(sem, 1) / from_i64(sem, 3)
    assert (third * from_i64(sem, 3) - from_i64(sem, 1)).abs() <= (
        from_i64(sem, 1).scale(-112))
    assert third.as_f64() == 1.0 / 3.0
