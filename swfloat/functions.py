"""
Numeric functions built on the basic operations: square root, remainder,
the constants pi and e, sine and the exponential function.
"""

import functools
import logging

from .core import Float
from .semantics import RoundingMode, Semantics

logger = logging.getLogger(__name__)


def sqr(x: Float) -> Float:
    """Calculates the power of two."""
    return x * x


def sqrt(x: Float) -> Float:
    """Calculates the square root of the number using the Newton Raphson
    method."""
    if x.is_zero():
        return x  # (+/-) zero
    if x.is_nan() or x.is_negative():
        return Float.nan(x.semantics, x.sign)  # (-/+)Nan, -Number.
    if x.is_inf():
        return x  # Inf+.

    target = x
    two = Float.from_u64(x.semantics, 2)

    # Start the search at max(2, x).
    guess = two if target < two else target
    prev = guess
    steps = 0
    while True:
        steps += 1
        # Halve before adding, so the sum stays finite at the top of the
        # range under directed rounding.
        guess = guess.scale(-1) + (target / guess).scale(-1)
        # Stop when value did not change or regressed.
        if prev <= guess:
            logger.debug("sqrt(%s) converged after %d steps", x, steps)
            return guess
        prev = guess


def rem(x: Float, y: Float) -> Float:
    """Returns the remainder from a division of two floats, the way C 'fmod'
    does: the result has the sign of `x`."""
    # Handle NaNs.
    if x.is_nan() or y.is_nan() or x.is_inf() or y.is_zero():
        return Float.nan(x.semantics, x.sign)
    # Handle values that are obviously zero or self.
    if x.is_zero() or y.is_inf():
        return x

    lhs = x.abs()
    rhs = y.abs()
    assert lhs.is_normal() and rhs.is_normal()

    # Instead of subtracting rhs from lhs one step at a time, subtract rhs
    # scaled by the largest power of two that fits, like a division does.
    steps = 0
    while lhs >= rhs and lhs.is_normal():
        # Align the leading bits. Subnormals carry a short mantissa at emin,
        # so the stored exponents alone are not enough.
        scale = ((lhs.exponent + lhs.mantissa.bit_length()) -
                 (rhs.exponent + rhs.mantissa.bit_length()))

        # Scale rhs by a power of two. If we overshoot, take a step back.
        diff = rhs.scale(scale, RoundingMode.NearestTiesToEven)
        if diff > lhs:
            diff = rhs.scale(scale - 1, RoundingMode.NearestTiesToEven)

        lhs = lhs - diff
        steps += 1

    logger.debug("rem converged after %d steps", steps)
    # Set the original sign.
    return lhs.copy_sign(x.sign)


def _pi_iterations(sem: Semantics) -> int:
    # The AGM doubles the number of correct digits in each step.
    return sem.precision.bit_length() + 4


@functools.lru_cache(maxsize=None)
def pi(sem: Semantics) -> Float:
    """
    Computes PI -- Algorithm description in Pg 246:
    Fast Multiple-Precision Evaluation of Elementary Functions
    by Richard P. Brent.
    """
    one = Float.from_i64(sem, 1)
    two = Float.from_i64(sem, 2)
    four = Float.from_i64(sem, 4)

    a = one
    b = one / two.sqrt()
    t = one / four
    x = one

    iterations = 0
    while a != b and iterations < _pi_iterations(sem):
        y = a
        a = (a + b).scale(-1)
        b = (b * y).sqrt()
        t = t - x * (a - y).sqr()
        x = x * two
        iterations += 1
    logger.debug("pi for %s took %d iterations", sem, iterations)
    return a * a / t


@functools.lru_cache(maxsize=None)
def e(sem: Semantics) -> Float:
    """Computes e using Euler's continued fraction, which is a simple
    series."""
    two = Float.from_i64(sem, 2)
    one = Float.from_i64(sem, 1)
    term = one
    iterations = sem.exponent * 2
    for i in reversed(range(1, iterations)):
        v = Float.from_i64(sem, i)
        term = v + v / term

    logger.debug("e for %s used %d terms", sem, iterations)
    return two + one / term


def _sin_taylor(x: Float) -> Float:
    """sin(x) = x - x^3 / 3! + x^5 / 5! - x^7/7! ...."""
    sem = x.semantics
    neg = False
    top = x
    bottom = 1
    total = Float.zero(sem)
    x2 = x.sqr()
    for i in range(1, 10):
        # Update sum.
        elem = top / Float.from_u64(sem, bottom)
        total = total - elem if neg else total + elem

        # Prepare the next element.
        top = top * x2
        bottom = bottom * (i * 2) * (i * 2 + 1)
        neg = not neg
    return total


def _sin_triple_angle(x: Float, steps: int) -> Float:
    """Reduce sin(x) in the range 0..pi/2, using the identity:
    sin(3x) = 3sin(x)-4(sin(x)^3)"""
    if steps == 0:
        return _sin_taylor(x)
    sem = x.semantics
    three = Float.from_u64(sem, 3)
    four = Float.from_u64(sem, 4)

    sx = _sin_triple_angle(x / three, steps - 1)
    return three * sx - four * (sx * sx * sx)


def sin(x: Float) -> Float:
    """Returns the sine function."""
    # Fast Trigonometric functions for Arbitrary Precision number
    # by Henrik Vestermark.
    if x.is_zero():
        return x
    if x.is_nan() or x.is_inf():
        return Float.nan(x.semantics, x.sign)

    sem = x.semantics
    neg = False
    val = x

    # Handle the negatives.
    if val.is_negative():
        val = val.neg()
        neg = not neg

    p = pi(sem)
    pi2 = p.scale(1, RoundingMode.Zero)
    pi_half = p.scale(-1, RoundingMode.Zero)

    # Step 1: reduce to [0, 2pi].
    if val > pi2:
        val = rem(val, pi2)

    # Step 2: fold to [0, pi].
    if val > p:
        val = val - p
        neg = not neg

    # Step 3: fold to [0, pi/2].
    if val > pi_half:
        val = p - val

    res = _sin_triple_angle(val, 5)
    return res.neg() if neg else res


def exp(x: Float) -> Float:
    """
    Computes e**x.

    The argument is halved until it is below 1/2, the Taylor series is
    summed, and the result is squared back. The work happens at a wider
    precision that covers the bits lost by the squaring.
    """
    sem = x.semantics
    if x.is_nan():
        return x
    if x.is_inf():
        return Float.zero(sem) if x.is_negative() else x
    if x.is_zero():
        return Float.from_u64(sem, 1)

    # Past this magnitude the result overflows or underflows in any case.
    limit = Float.from_u64(sem, 2 * (sem.emax + sem.precision))
    if x.abs() > limit:
        return Float.zero(sem) if x.is_negative() else Float.inf(sem)

    halvings = max(0, x.exponent + 2)
    work = sem.grow(2 + sem.precision.bit_length(), 16 + halvings)
    r = x.cast(work).scale(-halvings)

    one = Float.from_u64(work, 1)
    total = one
    term = one
    terms = 0
    for n in range(1, work.precision):
        term = term * r / Float.from_u64(work, n)
        terms = n
        if term.is_zero() or total + term == total:
            break
        total = total + term

    for _ in range(halvings):
        total = total.sqr()

    logger.debug("exp(%s) used %d terms and %d squarings", x, terms,
                 halvings)
    return total.cast(sem)
