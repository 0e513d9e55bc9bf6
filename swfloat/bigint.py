"""
Fixed-width unsigned integers made of 64-bit limbs.

A BigInt backs the mantissa of every Float and serves as scratch space for
multiplication and division. Limbs are stored least significant first in
an immutable tuple, so copies never alias.
"""

import enum
from functools import total_ordering
from typing import Iterable, Tuple

LIMB_BITS = 64
LIMB_MASK = (1 << LIMB_BITS) - 1


def limbs_for_bits(bits: int) -> int:
    """Returns the number of limbs needed to hold `bits` bits (at least 1)."""
    return max(1, -(-bits // LIMB_BITS))


class LossFraction(enum.Enum):
    """Classifies the bits that were discarded by a right shift, relative to
    the least significant bit that was kept."""

    ExactlyZero = 0  # 0000000
    LessThanHalf = 1  # 0xxxxxx
    ExactlyHalf = 2  # 1000000
    MoreThanHalf = 3  # 1xxxxxx

    def is_exactly_zero(self) -> bool:
        return self is LossFraction.ExactlyZero

    def is_exactly_half(self) -> bool:
        return self is LossFraction.ExactlyHalf

    def is_lt_half(self) -> bool:
        return self in (LossFraction.ExactlyZero, LossFraction.LessThanHalf)

    def is_gte_half(self) -> bool:
        return not self.is_lt_half()

    def invert(self) -> "LossFraction":
        """Returns the classification of `1 - f` for a loss `f`."""
        if self is LossFraction.LessThanHalf:
            return LossFraction.MoreThanHalf
        if self is LossFraction.MoreThanHalf:
            return LossFraction.LessThanHalf
        return self

    def combine(self, lower: "LossFraction") -> "LossFraction":
        """Merges this loss with `lower`, a loss of strictly less significant
        bits that were dropped earlier."""
        if lower.is_exactly_zero():
            return self
        if self is LossFraction.ExactlyZero:
            return LossFraction.LessThanHalf
        if self is LossFraction.ExactlyHalf:
            return LossFraction.MoreThanHalf
        return self


@total_ordering
class BigInt:
    """
    An unsigned integer of `limbs * 64` bits.

    All operations return new instances. Arithmetic reports carries and
    borrows to the caller instead of dropping them, and shifts are defined
    for any non-negative distance, including distances past the width.
    """

    __slots__ = ("_parts",)

    def __init__(self, parts: Iterable[int]):
        parts = tuple(parts)
        if not parts:
            raise ValueError("a BigInt needs at least one limb")
        for p in parts:
            if p < 0 or p > LIMB_MASK:
                raise ValueError("limb out of range: %r" % p)
        self._parts = parts

    @classmethod
    def _raw(cls, parts: Tuple[int, ...]) -> "BigInt":
        # Skips validation, for limbs that are in range by construction.
        b = cls.__new__(cls)
        b._parts = parts
        return b

    @classmethod
    def zero(cls, limbs: int) -> "BigInt":
        return cls._raw((0,) * limbs)

    @classmethod
    def from_int(cls, value: int, limbs: int = None) -> "BigInt":
        """Builds a BigInt from a non-negative Python int. When `limbs` is not
        given, the smallest limb count that holds the value is used."""
        if value < 0:
            raise ValueError("BigInt values are unsigned: %d" % value)
        needed = limbs_for_bits(value.bit_length())
        if limbs is None:
            limbs = needed
        elif needed > limbs:
            raise ValueError(
                "%d does not fit in %d limbs" % (value, limbs))
        parts = []
        for _ in range(limbs):
            parts.append(value & LIMB_MASK)
            value >>= LIMB_BITS
        return cls._raw(tuple(parts))

    @property
    def limbs(self) -> int:
        return len(self._parts)

    @property
    def width(self) -> int:
        """The number of bits this integer can hold."""
        return len(self._parts) * LIMB_BITS

    @property
    def parts(self) -> Tuple[int, ...]:
        return self._parts

    def __int__(self) -> int:
        value = 0
        for p in reversed(self._parts):
            value = (value << LIMB_BITS) | p
        return value

    __index__ = __int__

    def __repr__(self) -> str:
        return "BigInt(0x%x, limbs=%d)" % (int(self), self.limbs)

    def __hash__(self) -> int:
        return hash(int(self))

    def __eq__(self, other) -> bool:
        if not isinstance(other, BigInt):
            return NotImplemented
        return self._cmp(other) == 0

    def __lt__(self, other) -> bool:
        if not isinstance(other, BigInt):
            return NotImplemented
        return self._cmp(other) < 0

    def _cmp(self, other: "BigInt") -> int:
        # Missing high limbs of the shorter operand count as zero.
        n = max(self.limbs, other.limbs)
        for i in reversed(range(n)):
            a = self._parts[i] if i < self.limbs else 0
            b = other._parts[i] if i < other.limbs else 0
            if a != b:
                return -1 if a < b else 1
        return 0

    def is_zero(self) -> bool:
        return not any(self._parts)

    def bit_length(self) -> int:
        """Returns the index of the first digit after the msb, so zero has a
        bit length of zero."""
        for i in reversed(range(self.limbs)):
            if self._parts[i]:
                return i * LIMB_BITS + self._parts[i].bit_length()
        return 0

    def leading_zeros(self) -> int:
        return self.width - self.bit_length()

    def get_bit(self, i: int) -> bool:
        if i < 0 or i >= self.width:
            return False
        return bool((self._parts[i // LIMB_BITS] >> (i % LIMB_BITS)) & 1)

    def set_bit(self, i: int) -> "BigInt":
        if i < 0 or i >= self.width:
            raise ValueError("bit %d is outside a %d-bit integer" %
                             (i, self.width))
        parts = list(self._parts)
        parts[i // LIMB_BITS] |= 1 << (i % LIMB_BITS)
        return BigInt._raw(tuple(parts))

    def low_bits(self, n: int) -> "BigInt":
        """Keeps the lowest `n` bits and clears the rest."""
        parts = []
        for i, p in enumerate(self._parts):
            lo = i * LIMB_BITS
            if n >= lo + LIMB_BITS:
                parts.append(p)
            elif n > lo:
                parts.append(p & ((1 << (n - lo)) - 1))
            else:
                parts.append(0)
        return BigInt._raw(tuple(parts))

    def resize(self, limbs: int) -> "BigInt":
        """Returns the same value with a different limb count. Shrinking is
        only allowed when no set bit is dropped."""
        if limbs >= self.limbs:
            return BigInt._raw(self._parts + (0,) * (limbs - self.limbs))
        if any(self._parts[limbs:]):
            raise ValueError(
                "resizing %r to %d limbs drops set bits" % (self, limbs))
        return BigInt._raw(self._parts[:limbs])

    def _check_same_size(self, other: "BigInt"):
        if self.limbs != other.limbs:
            raise ValueError("limb count mismatch: %d vs %d" %
                             (self.limbs, other.limbs))

    def add(self, other: "BigInt") -> Tuple["BigInt", bool]:
        """Adds two integers of the same width. Returns the sum and the carry
        out of the top limb."""
        self._check_same_size(other)
        carry = 0
        parts = []
        for a, b in zip(self._parts, other._parts):
            s = a + b + carry
            parts.append(s & LIMB_MASK)
            carry = s >> LIMB_BITS
        return BigInt._raw(tuple(parts)), bool(carry)

    def sub(self, other: "BigInt") -> Tuple["BigInt", bool]:
        """Subtracts two integers of the same width. Returns the difference
        (modulo 2**width) and whether a borrow was needed."""
        self._check_same_size(other)
        borrow = 0
        parts = []
        for a, b in zip(self._parts, other._parts):
            d = a - b - borrow
            borrow = 1 if d < 0 else 0
            parts.append(d & LIMB_MASK)
        return BigInt._raw(tuple(parts)), bool(borrow)

    def mul(self, other: "BigInt") -> "BigInt":
        """Schoolbook multiplication. The product has `self.limbs +
        other.limbs` limbs, so it never overflows."""
        parts = [0] * (self.limbs + other.limbs)
        for i, a in enumerate(self._parts):
            if a == 0:
                continue
            carry = 0
            for j, b in enumerate(other._parts):
                t = parts[i + j] + a * b + carry
                parts[i + j] = t & LIMB_MASK
                carry = t >> LIMB_BITS
            k = i + other.limbs
            while carry:
                t = parts[k] + carry
                parts[k] = t & LIMB_MASK
                carry = t >> LIMB_BITS
                k += 1
        return BigInt._raw(tuple(parts))

    def shift_left(self, n: int) -> "BigInt":
        """Shifts left by `n` bits. Bits moved past the width are discarded;
        callers size the integer so that this does not happen."""
        if n < 0:
            raise ValueError("negative shift: %d" % n)
        if n == 0:
            return self
        size = self.limbs
        words, bits = divmod(n, LIMB_BITS)
        if words >= size:
            return BigInt.zero(size)
        parts = [0] * size
        for i in range(size - 1, words - 1, -1):
            v = self._parts[i - words] << bits
            if bits and i - words - 1 >= 0:
                v |= self._parts[i - words - 1] >> (LIMB_BITS - bits)
            parts[i] = v & LIMB_MASK
        return BigInt._raw(tuple(parts))

    def shift_right(self, n: int) -> "BigInt":
        if n < 0:
            raise ValueError("negative shift: %d" % n)
        if n == 0:
            return self
        size = self.limbs
        words, bits = divmod(n, LIMB_BITS)
        if words >= size:
            return BigInt.zero(size)
        parts = [0] * size
        for i in range(size - words):
            v = self._parts[i + words] >> bits
            if bits and i + words + 1 < size:
                v |= self._parts[i + words + 1] << (LIMB_BITS - bits)
            parts[i] = v & LIMB_MASK
        return BigInt._raw(tuple(parts))

    def _any_bits_below(self, n: int) -> bool:
        """Returns True if any of the lowest `n` bits is set."""
        words, bits = divmod(min(n, self.width), LIMB_BITS)
        if any(self._parts[:words]):
            return True
        if bits and words < self.limbs:
            return bool(self._parts[words] & ((1 << bits) - 1))
        return False

    def loss_for_shift(self, n: int) -> LossFraction:
        """Classifies the lowest `n` bits, the ones a right shift by `n`
        would discard."""
        if n <= 0:
            return LossFraction.ExactlyZero
        half = self.get_bit(n - 1)
        rest = self._any_bits_below(n - 1)
        if half:
            return (LossFraction.MoreThanHalf if rest
                    else LossFraction.ExactlyHalf)
        return LossFraction.LessThanHalf if rest else LossFraction.ExactlyZero

    def shift_right_with_loss(self, n: int) -> Tuple["BigInt", LossFraction]:
        return self.shift_right(n), self.loss_for_shift(n)
