"""
The Float value type and the normalization/rounding engine.

A normal Float holds `precision` bits of mantissa with the leading bit at
position `precision - 1`, and its value is

    (-1)**sign * mantissa * 2**(exponent - (precision - 1))

Subnormal numbers keep the minimum exponent and a clear leading bit. Zero,
Infinity and NaN are tracked by the category, and carry a sign.
"""

import enum
import math
from decimal import Context, Decimal
from fractions import Fraction

from .bigint import BigInt, LossFraction
from .semantics import RoundingMode, Semantics


class Category(enum.Enum):
    Zero = 0
    Normal = 1
    Infinity = 2
    NaN = 3


def _round_up(mode: RoundingMode, loss: LossFraction, lsb: bool,
              sign: bool) -> bool:
    """Returns True if the truncated mantissa needs to be incremented."""
    if loss.is_exactly_zero():
        return False
    if mode is RoundingMode.NearestTiesToEven:
        if loss.is_exactly_half():
            return lsb
        return loss is LossFraction.MoreThanHalf
    if mode is RoundingMode.NearestTiesToAway:
        return loss.is_gte_half()
    if mode is RoundingMode.Positive:
        return not sign
    if mode is RoundingMode.Negative:
        return sign
    return False  # Zero.


class Float:
    """
    Float(sem, sign, exponent, mantissa)

    A binary floating-point number in the format described by `sem`. The
    public constructor takes an exponent in [sem.emin, sem.emax] and a
    mantissa of at most `sem.precision` bits and rounds the result into
    canonical form; a zero mantissa makes a Zero.

    Floats are immutable. Arithmetic returns new values.
    """

    __slots__ = ("_sem", "_sign", "_exp", "_mantissa", "_category")

    def __init__(self, sem: Semantics, sign: bool, exponent: int, mantissa):
        emin, emax = sem.exp_bounds
        if not emin <= exponent <= emax:
            raise ValueError("exponent %d outside of [%d, %d]" %
                             (exponent, emin, emax))
        if not isinstance(mantissa, BigInt):
            mantissa = BigInt.from_int(mantissa)
        if mantissa.bit_length() > sem.precision:
            raise ValueError("mantissa 0x%x is wider than %d bits" %
                             (int(mantissa), sem.precision))
        r = normalize(sem, bool(sign), exponent, mantissa)
        self._assign(r._sem, r._sign, r._exp, r._mantissa, r._category)

    def _assign(self, sem, sign, exp, mantissa, category):
        self._sem = sem
        self._sign = sign
        self._exp = exp
        self._mantissa = mantissa
        self._category = category

    @classmethod
    def _make(cls, sem: Semantics, sign: bool, exp: int, mantissa: BigInt,
              category: Category) -> "Float":
        """Builds a Float from fields that are already canonical."""
        x = cls.__new__(cls)
        x._assign(sem, sign, exp, mantissa, category)
        return x

    @classmethod
    def zero(cls, sem: Semantics, sign: bool = False) -> "Float":
        return cls._make(sem, sign, sem.emin, BigInt.zero(sem.limbs),
                         Category.Zero)

    @classmethod
    def inf(cls, sem: Semantics, sign: bool = False) -> "Float":
        return cls._make(sem, sign, sem.emax + 1, BigInt.zero(sem.limbs),
                         Category.Infinity)

    @classmethod
    def nan(cls, sem: Semantics, sign: bool = False) -> "Float":
        return cls._make(sem, sign, sem.emax + 1, BigInt.zero(sem.limbs),
                         Category.NaN)

    @classmethod
    def from_u64(cls, sem: Semantics, value: int) -> "Float":
        """Converts an unsigned integer, rounding with the semantics mode."""
        if value < 0:
            raise ValueError("from_u64 expects a non-negative value: %d" %
                             value)
        return cls.from_i64(sem, value)

    @classmethod
    def from_i64(cls, sem: Semantics, value: int) -> "Float":
        # The sign is known before rounding, for the directed modes.
        return normalize(sem, value < 0, sem.precision - 1,
                         BigInt.from_int(abs(value)))

    # Accessors.

    @property
    def semantics(self) -> Semantics:
        return self._sem

    @property
    def sign(self) -> bool:
        return self._sign

    @property
    def exponent(self) -> int:
        """The unbiased exponent of the leading mantissa bit."""
        return self._exp

    @property
    def mantissa(self) -> BigInt:
        """The mantissa, including the explicit leading bit."""
        return self._mantissa

    @property
    def category(self) -> Category:
        return self._category

    def is_zero(self) -> bool:
        return self._category is Category.Zero

    def is_normal(self) -> bool:
        """Returns True for finite non-zero values, subnormals included."""
        return self._category is Category.Normal

    def is_subnormal(self) -> bool:
        return (self.is_normal() and self._exp == self._sem.emin and
                not self._mantissa.get_bit(self._sem.precision - 1))

    def is_inf(self) -> bool:
        return self._category is Category.Infinity

    def is_nan(self) -> bool:
        return self._category is Category.NaN

    def is_finite(self) -> bool:
        return self.is_zero() or self.is_normal()

    def is_negative(self) -> bool:
        return self._sign

    # Sign manipulation never rounds, so it is handled here.

    def neg(self) -> "Float":
        return Float._make(self._sem, not self._sign, self._exp,
                           self._mantissa, self._category)

    def abs(self) -> "Float":
        if not self._sign:
            return self
        return self.neg()

    def copy_sign(self, sign: bool) -> "Float":
        if sign == self._sign:
            return self
        return self.neg()

    # Delegates to the operator modules.

    def cast(self, sem: Semantics, mode=None) -> "Float":
        return cast.cast(self, sem, mode)

    def to_bits(self) -> int:
        return cast.to_bits(self)

    def as_f32(self) -> float:
        return cast.as_f32(self)

    def as_f64(self) -> float:
        return cast.as_f64(self)

    def scale(self, n: int, mode=None) -> "Float":
        return arithmetic.scale(self, n, mode)

    def min(self, other: "Float") -> "Float":
        return arithmetic.minimum(self, other)

    def max(self, other: "Float") -> "Float":
        return arithmetic.maximum(self, other)

    def sqrt(self) -> "Float":
        return functions.sqrt(self)

    def sqr(self) -> "Float":
        return functions.sqr(self)

    def rem(self, other: "Float") -> "Float":
        return functions.rem(self, other)

    def sin(self) -> "Float":
        return functions.sin(self)

    def exp(self) -> "Float":
        return functions.exp(self)

    # Python operator protocol.

    def _coerce(self, other):
        if isinstance(other, Float):
            return other
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return Float.from_i64(self._sem, other)
        if isinstance(other, float):
            return cast.from_f64(self._sem, other)
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.add(self, other)

    def __radd__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.add(other, self)

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.sub(self, other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.sub(other, self)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.mul(self, other)

    def __rmul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.mul(other, self)

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.div(self, other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return arithmetic.div(other, self)

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.abs()

    def exact_value(self):
        """Returns the exact value as a Fraction. Infinities come back as
        float infinities and NaN as a float NaN."""
        if self.is_nan():
            return math.nan
        if self.is_inf():
            return -math.inf if self._sign else math.inf
        shift = self._exp - (self._sem.precision - 1)
        m = int(self._mantissa)
        if shift >= 0:
            val = Fraction(m << shift)
        else:
            val = Fraction(m, 1 << -shift)
        return -val if self._sign else val

    def _compare(self, other):
        if isinstance(other, Float):
            return arithmetic.compare(self, other)
        if isinstance(other, bool):
            return NotImplemented
        if not isinstance(other, (int, float, Fraction)):
            return NotImplemented
        # Python numbers compare by exact value, without rounding them into
        # this format first.
        if self.is_nan() or (isinstance(other, float) and math.isnan(other)):
            return None
        val = self.exact_value()
        return (val > other) - (val < other)

    def __eq__(self, other):
        c = self._compare(other)
        if c is NotImplemented:
            return c
        return c == 0

    def __ne__(self, other):
        c = self._compare(other)
        if c is NotImplemented:
            return c
        return c != 0

    def __lt__(self, other):
        c = self._compare(other)
        if c is NotImplemented:
            return c
        return c is not None and c < 0

    def __le__(self, other):
        c = self._compare(other)
        if c is NotImplemented:
            return c
        return c is not None and c <= 0

    def __gt__(self, other):
        c = self._compare(other)
        if c is NotImplemented:
            return c
        return c is not None and c > 0

    def __ge__(self, other):
        c = self._compare(other)
        if c is NotImplemented:
            return c
        return c is not None and c >= 0

    def __hash__(self):
        # Equal numbers hash alike, including ints, floats and Fractions.
        if self.is_nan():
            return hash((Category.NaN, self._sign, self._sem))
        return hash(self.exact_value())

    def __bool__(self):
        return not self.is_zero()

    def __float__(self):
        return self.as_f64()

    def __int__(self):
        """Truncates toward zero, like int() of a builtin float."""
        if self.is_nan():
            raise ValueError("cannot convert float NaN to integer")
        if self.is_inf():
            raise OverflowError("cannot convert float infinity to integer")
        if self.is_zero():
            return 0
        shift = self._exp - (self._sem.precision - 1)
        m = self._mantissa
        if shift >= 0:
            val = int(m) << shift
        else:
            val = int(m.shift_right(-shift))
        return -val if self._sign else val

    def to_decimal(self) -> Decimal:
        """Returns the value as a Decimal, rounded to enough significant
        digits to tell apart any two values of this format."""
        if self.is_nan():
            return Decimal("-NaN" if self._sign else "NaN")
        if self.is_inf():
            return Decimal("-Infinity" if self._sign else "Infinity")
        if self.is_zero():
            return Decimal("-0" if self._sign else "0")
        # log10(2) ~ 0.30103, plus two digits to round-trip.
        digits = self._sem.precision * 30103 // 100000 + 2
        ctx = Context(prec=digits, Emin=-(10 ** 9), Emax=10 ** 9)
        shift = self._exp - (self._sem.precision - 1)
        m = int(self._mantissa)
        if shift >= 0:
            val = ctx.plus(Decimal(m << shift))
        else:
            # m / 2**k has at most k + precision significant digits.
            exact = Context(prec=-shift + self._sem.precision + 2,
                            Emin=-(10 ** 9), Emax=10 ** 9)
            val = ctx.plus(exact.divide(Decimal(m), Decimal(1 << -shift)))
        val = val.normalize(ctx)
        return -val if self._sign else val

    def __str__(self):
        d = self.to_decimal()
        if d.is_nan():
            return "NaN"
        if d.is_infinite():
            return "-Inf" if d < 0 else "Inf"
        if -7 <= d.adjusted() < self._sem.precision * 30103 // 100000 + 2:
            return format(d, "f")
        return format(d, "e")

    def __repr__(self):
        return str(self)

    def dump(self) -> str:
        """Returns the internal fields, for debugging."""
        return "FP[S=%d : E=%d : M=0x%x : %s]" % (
            self._sign, self._exp, int(self._mantissa), self._category.name)


def normalize(sem: Semantics, sign: bool, exp: int, mantissa: BigInt,
              loss: LossFraction = LossFraction.ExactlyZero,
              mode: RoundingMode = None) -> Float:
    """
    Brings a raw (sign, exponent, mantissa) triple into canonical form.

    The raw value is `mantissa * 2**(exp - (precision - 1))`, the mantissa
    may have any width, and `loss` describes bits below the mantissa lsb
    that the caller already dropped. The result is rounded with `mode`, or
    with the semantics mode when none is given.
    """
    mode = sem.mode if mode is None else RoundingMode.parse(mode)
    precision = sem.precision
    emin, emax = sem.exp_bounds

    if mantissa.is_zero():
        assert loss.is_exactly_zero(), "a lost fraction needs a mantissa"
        return Float.zero(sem, sign)

    # Align the msb with the leading bit, but never below the minimum
    # exponent; what does not fit becomes a subnormal.
    shift = mantissa.bit_length() - precision
    if exp + shift < emin:
        shift = emin - exp
    exp += shift

    # Work in a buffer that can hold the aligned mantissa plus a carry.
    work = max(mantissa.limbs, sem.limbs + 1)
    mantissa = mantissa.resize(work)
    if shift > 0:
        mantissa, lost = mantissa.shift_right_with_loss(shift)
        loss = lost.combine(loss)
    elif shift < 0:
        assert loss.is_exactly_zero(), "cannot shift left past lost bits"
        mantissa = mantissa.shift_left(-shift)

    if exp > emax:
        return Float.inf(sem, sign)

    if _round_up(mode, loss, mantissa.get_bit(0), sign):
        one = BigInt.from_int(1, mantissa.limbs)
        mantissa, _ = mantissa.add(one)
        # A carry into bit `precision` renormalizes to 1.000.
        if mantissa.get_bit(precision):
            mantissa = mantissa.shift_right(1)
            exp += 1
            if exp > emax:
                return Float.inf(sem, sign)

    if mantissa.is_zero():
        return Float.zero(sem, sign)
    return Float._make(sem, sign, exp, mantissa.resize(sem.limbs),
                       Category.Normal)


from . import arithmetic, cast, functions  # noqa: E402
