"""
The basic operations: addition, subtraction, multiplication, division,
fused multiply-add, comparison, scaling, min and max.

Each operation handles the special categories first and then works on the
raw mantissas, leaving the rounding to `normalize`.
"""

from typing import Optional, Tuple

from . import cast
from .bigint import BigInt, LossFraction, limbs_for_bits
from .core import Float, normalize
from .semantics import RoundingMode, Semantics

# Extra low bits kept while aligning operands for addition. With two guard
# bits a cancellation never needs bits that were shifted out.
GUARD_BITS = 2


def _check_format(x: Float, y: Float) -> Semantics:
    a, b = x.semantics, y.semantics
    if (a.exponent, a.precision, a.limbs) != (b.exponent, b.precision,
                                              b.limbs):
        raise ValueError("operands have different semantics: %s and %s" %
                         (a, b))
    return a


def _zero_sum_sign(sem: Semantics, mode) -> bool:
    """The sign of an exact zero sum of two opposite values."""
    mode = sem.mode if mode is None else RoundingMode.parse(mode)
    return mode is RoundingMode.Negative


def _add_raw(x: Float, y: Float, subtract: bool
             ) -> Tuple[bool, int, BigInt, LossFraction]:
    """
    Adds (or subtracts) two normal numbers without rounding.

    Returns (sign, exponent, mantissa, loss) in the raw form accepted by
    `normalize`. A zero mantissa with no loss is an exact cancellation.
    See Chapter 8. Algorithms for the Five Basic Operations -- Pg 248.
    """
    sem = x.semantics
    x_sign = x.sign
    y_sign = y.sign ^ subtract
    # Canonical order: the first operand has the larger exponent.
    if y.exponent > x.exponent:
        x, y = y, x
        x_sign, y_sign = y_sign, x_sign

    assert x.is_normal() and y.is_normal()

    # Room for the guard bits and for a carry.
    limbs = limbs_for_bits(sem.precision + GUARD_BITS + 1)
    a = x.mantissa.resize(limbs).shift_left(GUARD_BITS)
    b = y.mantissa.resize(limbs).shift_left(GUARD_BITS)
    exp = x.exponent - GUARD_BITS

    # Mantissa alignment. Shifting further than the mantissa width only
    # changes the loss, which is LessThanHalf from there on.
    delta = min(x.exponent - y.exponent, sem.precision + GUARD_BITS + 1)
    b, loss = b.shift_right_with_loss(delta)

    sign = x_sign
    if x_sign == y_sign:
        total, carry = a.add(b)
        assert not carry
        return sign, exp, total, loss

    if b > a:
        # Only possible without a loss, when the exponents are close.
        a, b = b, a
        sign = not sign
    diff, borrow = a.sub(b)
    assert not borrow
    if not loss.is_exactly_zero():
        # The shifted-out part of b is subtracted too: borrow one unit and
        # keep the complement of the lost fraction.
        diff, _ = diff.sub(BigInt.from_int(1, limbs))
        loss = loss.invert()
    return sign, exp, diff, loss


def _add_special(x: Float, y: Float, subtract: bool, mode
                 ) -> Optional[Float]:
    """Handles the operands that are not both normal. Returns None when the
    main algorithm needs to run."""
    sem = x.semantics
    y_sign = y.sign ^ subtract
    if x.is_nan():
        return x
    if y.is_nan():
        return y
    if x.is_inf():
        if y.is_inf() and x.sign != y_sign:
            return Float.nan(sem, x.sign)  # Inf - Inf.
        return x
    if y.is_inf():
        return y.copy_sign(y_sign)
    if x.is_zero() and y.is_zero():
        if x.sign == y_sign:
            return x
        return Float.zero(sem, _zero_sum_sign(sem, mode))
    if x.is_zero():
        return y.copy_sign(y_sign)
    if y.is_zero():
        return x
    return None


def _add_sub(x: Float, y: Float, subtract: bool, mode) -> Float:
    sem = _check_format(x, y)
    special = _add_special(x, y, subtract, mode)
    if special is not None:
        return special
    sign, exp, mantissa, loss = _add_raw(x, y, subtract)
    if mantissa.is_zero() and loss.is_exactly_zero():
        return Float.zero(sem, _zero_sum_sign(sem, mode))
    return normalize(sem, sign, exp, mantissa, loss, mode)


def add(x: Float, y: Float, mode=None) -> Float:
    return _add_sub(x, y, False, mode)


def sub(x: Float, y: Float, mode=None) -> Float:
    return _add_sub(x, y, True, mode)


def _mul_raw(x: Float, y: Float) -> Tuple[bool, int, BigInt]:
    """The exact product of two normal numbers, in raw form."""
    sem = x.semantics
    product = x.mantissa.mul(y.mantissa)
    exp = x.exponent + y.exponent - (sem.precision - 1)
    return x.sign ^ y.sign, exp, product


def mul(x: Float, y: Float, mode=None) -> Float:
    sem = _check_format(x, y)
    sign = x.sign ^ y.sign
    if x.is_nan():
        return x
    if y.is_nan():
        return y
    if (x.is_inf() and y.is_zero()) or (x.is_zero() and y.is_inf()):
        return Float.nan(sem, sign)
    if x.is_inf() or y.is_inf():
        return Float.inf(sem, sign)
    if x.is_zero() or y.is_zero():
        return Float.zero(sem, sign)
    sign, exp, product = _mul_raw(x, y)
    return normalize(sem, sign, exp, product, LossFraction.ExactlyZero, mode)


def long_divide(num: BigInt, den: BigInt) -> Tuple[BigInt, BigInt]:
    """Binary long division, one quotient digit per step. Returns the
    quotient and the remainder, both with the limb count of `num`."""
    if den.is_zero():
        raise ZeroDivisionError("BigInt division by zero")
    limbs = max(num.limbs, den.limbs)
    den = den.resize(limbs)
    quotient = BigInt.zero(limbs)
    rem = BigInt.zero(limbs)
    for i in reversed(range(num.bit_length())):
        rem = rem.shift_left(1)
        if num.get_bit(i):
            rem = rem.set_bit(0)
        if rem >= den:
            rem, _ = rem.sub(den)
            quotient = quotient.set_bit(i)
    return quotient.resize(num.limbs), rem.resize(num.limbs)


def div(x: Float, y: Float, mode=None) -> Float:
    sem = _check_format(x, y)
    sign = x.sign ^ y.sign
    if x.is_nan():
        return x
    if y.is_nan():
        return y
    if (x.is_inf() and y.is_inf()) or (x.is_zero() and y.is_zero()):
        return Float.nan(sem, sign)
    if x.is_inf() or y.is_zero():
        return Float.inf(sem, sign)
    if x.is_zero() or y.is_inf():
        return Float.zero(sem, sign)

    p = sem.precision
    a, b = x.mantissa, y.mantissa
    # Shift the dividend so the quotient has at least p + 2 bits.
    shift = max(0, p + 2 + b.bit_length() - a.bit_length())
    limbs = limbs_for_bits(a.bit_length() + shift + 1)
    num = a.resize(limbs).shift_left(shift)
    quotient, rem = long_divide(num, b)

    # Classify the remainder against half of the divisor.
    if rem.is_zero():
        loss = LossFraction.ExactlyZero
    else:
        twice = rem.resize(limbs + 1).shift_left(1)
        b_wide = b.resize(limbs + 1)
        if twice < b_wide:
            loss = LossFraction.LessThanHalf
        elif twice == b_wide:
            loss = LossFraction.ExactlyHalf
        else:
            loss = LossFraction.MoreThanHalf

    exp = x.exponent - y.exponent - shift + (p - 1)
    return normalize(sem, sign, exp, quotient, loss, mode)


def fma(a: Float, b: Float, c: Float, mode=None) -> Float:
    """Computes a * b + c with a single rounding."""
    sem = _check_format(a, b)
    _check_format(a, c)
    if a.is_nan() or b.is_nan() or c.is_nan() or not (
            a.is_normal() and b.is_normal()):
        # A special product is exact, so two roundings do not differ.
        return add(mul(a, b, mode), c, mode)

    # The exact product fits in twice the precision, and the wider exponent
    # keeps products of subnormals normal.
    wide = Semantics(sem.exponent + 2 + sem.precision.bit_length(),
                     2 * sem.precision, sem.mode)
    sign, exp, product = _mul_raw(a, b)
    prod = normalize(wide, sign, exp + sem.precision, product)
    if c.is_inf():
        return c
    if c.is_zero():
        return cast.cast(prod, sem, mode)

    sign, exp, mantissa, loss = _add_raw(prod, cast.cast(c, wide), False)
    if mantissa.is_zero() and loss.is_exactly_zero():
        return Float.zero(sem, _zero_sum_sign(sem, mode))
    # Round the wide sum directly into the target format.
    exp -= wide.precision - sem.precision
    return normalize(sem, sign, exp, mantissa, loss, mode)


def compare(x: Float, y: Float) -> Optional[int]:
    """Returns -1, 0 or 1, or None if the values are unordered (NaN)."""
    _check_format(x, y)
    if x.is_nan() or y.is_nan():
        return None
    if x.is_zero() and y.is_zero():
        return 0
    if x.sign != y.sign:
        return 1 if y.sign else -1
    # Same sign: compare the magnitudes, then flip for negatives.
    direction = -1 if x.sign else 1

    def magnitude(v: Float):
        if v.is_zero():
            return (0, 0, 0)
        if v.is_inf():
            return (2, 0, 0)
        return (1, v.exponent, int(v.mantissa))

    mx, my = magnitude(x), magnitude(y)
    if mx == my:
        return 0
    return direction if mx > my else -direction


def scale(x: Float, n: int, mode=None) -> Float:
    """Similar to 'scalbln'. Multiplies the number by 2**n."""
    if not x.is_normal():
        return x
    return normalize(x.semantics, x.sign, x.exponent + n, x.mantissa,
                     LossFraction.ExactlyZero, mode)


def maximum(x: Float, y: Float) -> Float:
    """Returns the greater of x and y. A NaN is only returned if both are
    NaN, and +0 is greater than -0."""
    _check_format(x, y)
    if x.is_nan():
        return y
    if y.is_nan():
        return x
    if x.sign != y.sign:
        return y if x.sign else x  # Handle (+-)0.
    return x if x > y else y


def minimum(x: Float, y: Float) -> Float:
    _check_format(x, y)
    if x.is_nan():
        return y
    if y.is_nan():
        return x
    if x.sign != y.sign:
        return x if x.sign else y  # Handle (+-)0.
    return y if x > y else x


