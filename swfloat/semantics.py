"""
Precision configuration for Float values.

A Semantics describes one binary floating-point format: the width of the
exponent field, the precision of the significand (including the leading
bit), the rounding mode used whenever a value of the format is rounded,
and the number of 64-bit limbs that store the mantissa.
"""

import enum
from dataclasses import dataclass
from typing import Union

from .bigint import LIMB_BITS, limbs_for_bits


class RoundingMode(enum.Enum):
    NearestTiesToEven = "NearestTiesToEven"
    NearestTiesToAway = "NearestTiesToAway"
    Zero = "Zero"
    Positive = "Positive"
    Negative = "Negative"

    @classmethod
    def parse(cls, mode: Union["RoundingMode", str]) -> "RoundingMode":
        """Accepts a RoundingMode or its name."""
        if isinstance(mode, cls):
            return mode
        try:
            return cls(mode)
        except ValueError:
            raise ValueError(
                "Unknown rounding mode %r, expected one of: %s"
                % (mode, ", ".join(m.value for m in cls))) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Semantics:
    """
    Semantics(exponent, precision, mode="NearestTiesToEven", limbs=None)

    `precision` counts the explicit leading bit, so IEEE binary32 is
    Semantics(8, 24) and its stored mantissa field is 23 bits wide.
    """

    exponent: int
    precision: int
    mode: RoundingMode = RoundingMode.NearestTiesToEven
    limbs: int = None

    def __post_init__(self):
        if self.exponent < 2:
            raise ValueError(
                "exponent must be at least 2 bits, got %r" % self.exponent)
        if self.precision < 2:
            raise ValueError(
                "precision must be at least 2 bits, got %r" % self.precision)
        object.__setattr__(self, "mode", RoundingMode.parse(self.mode))
        needed = limbs_for_bits(self.precision)
        if self.limbs is None:
            object.__setattr__(self, "limbs", needed)
        elif self.limbs < needed:
            raise ValueError(
                "%d limbs cannot hold a %d-bit mantissa"
                % (self.limbs, self.precision))

    @property
    def mantissa(self) -> int:
        """The width of the stored mantissa field (no implicit bit)."""
        return self.precision - 1

    @property
    def bias(self) -> int:
        return (1 << (self.exponent - 1)) - 1

    @property
    def emin(self) -> int:
        """The exponent of the smallest normal number (and of subnormals)."""
        return 1 - self.bias

    @property
    def emax(self) -> int:
        return self.bias

    @property
    def exp_bounds(self):
        return self.emin, self.emax

    @property
    def width(self) -> int:
        """The size of the interchange encoding in bits."""
        return 1 + self.exponent + self.mantissa

    @property
    def limb_width(self) -> int:
        return self.limbs * LIMB_BITS

    def with_mode(self, mode: Union[RoundingMode, str]) -> "Semantics":
        return Semantics(self.exponent, self.precision, mode, self.limbs)

    def grow(self, exponent: int, precision: int) -> "Semantics":
        """Returns a wider format with the same rounding mode, used as a
        working precision by the numeric functions."""
        return Semantics(self.exponent + exponent,
                         self.precision + precision, self.mode)


# Parameters match IEEE 754 standard formats
BF16 = Semantics(8, 8)  # BFloat16
FP16 = Semantics(5, 11)  # Half precision
FP32 = Semantics(8, 24)  # Single precision
FP64 = Semantics(11, 53)  # Double precision
FP128 = Semantics(15, 113)  # Quadruple precision
FP256 = Semantics(19, 237)  # Octuple precision
