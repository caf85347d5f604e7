"""
Fixed-point arithmetic for midimorph.

Times and scale factors are stored as signed-magnitude fixed-point values
with a binary fractional denominator, so scaling and comparison give the same
bits on every run instead of drifting like floats do.
"""

from dataclasses import dataclass
from fractions import Fraction
from functools import total_ordering
from typing import Tuple, Union

from .errors import InvalidArgumentError

FRACTION_BITS = 16
ONE = 1 << FRACTION_BITS


def _round_shift(value: int, bits: int) -> int:
    """Shift a non-negative integer right, rounding half away from zero."""
    if bits <= 0:
        return value << -bits
    return (value + (1 << (bits - 1))) >> bits


@dataclass(frozen=True)
class SignedInt:
    """
    Signed-magnitude integer used for semitone and scale-factor arguments.

    Attributes:
        magnitude: Absolute value (>= 0)
        negative: True when the value is below zero
    """

    magnitude: int
    negative: bool = False

    def __post_init__(self):
        if self.magnitude < 0:
            raise InvalidArgumentError(
                f"SignedInt magnitude must be >= 0, got {self.magnitude}"
            )
        if self.magnitude == 0 and self.negative:
            object.__setattr__(self, "negative", False)

    @classmethod
    def from_int(cls, value: int) -> "SignedInt":
        return cls(abs(value), value < 0)

    def __int__(self) -> int:
        return -self.magnitude if self.negative else self.magnitude

    __index__ = __int__

    def __repr__(self) -> str:
        return f"SignedInt({int(self)})"


def as_int(value: Union[int, SignedInt]) -> int:
    """Accept a plain int or a SignedInt and return a plain int."""
    if isinstance(value, SignedInt):
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"Expected an integer, got {value!r}")
    return value


@total_ordering
@dataclass(frozen=True, eq=False)
class FixedPoint:
    """
    Signed fixed-point number: (-1 if negative) * magnitude / 2**FRACTION_BITS.

    Addition and subtraction are exact. Multiplication keeps full precision
    internally and rounds once, half away from zero, back to the fixed
    resolution; the sign of a product follows the operand signs.

    Attributes:
        magnitude: Scaled absolute value (>= 0)
        negative: Sign flag, never set for zero
    """

    magnitude: int
    negative: bool = False

    def __post_init__(self):
        if self.magnitude < 0:
            raise InvalidArgumentError(
                f"FixedPoint magnitude must be >= 0, got {self.magnitude}"
            )
        if self.magnitude == 0 and self.negative:
            object.__setattr__(self, "negative", False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_raw(cls, raw: int) -> "FixedPoint":
        """Build from a signed, already-scaled integer."""
        return cls(abs(raw), raw < 0)

    @classmethod
    def from_int(cls, value: int) -> "FixedPoint":
        return cls.from_raw(value * ONE)

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> "FixedPoint":
        """Build numerator/denominator, rounded to the nearest representable value."""
        if denominator == 0:
            raise InvalidArgumentError("FixedPoint ratio denominator must be non-zero")
        negative = (numerator < 0) != (denominator < 0)
        num, den = abs(numerator) * ONE, abs(denominator)
        magnitude = (2 * num + den) // (2 * den)
        return cls(magnitude, negative)

    @classmethod
    def from_float(cls, value: float) -> "FixedPoint":
        fraction = Fraction(value)
        return cls.from_ratio(fraction.numerator, fraction.denominator)

    @classmethod
    def coerce(cls, value) -> "FixedPoint":
        """
        Convert any supported numeric value to FixedPoint.

        Args:
            value: FixedPoint, SignedInt, int, float or Fraction

        Returns:
            FixedPoint instance

        Raises:
            InvalidArgumentError: If the value cannot be represented
        """
        if isinstance(value, FixedPoint):
            return value
        if isinstance(value, SignedInt):
            return cls.from_int(int(value))
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Cannot use bool {value!r} as a number")
        if isinstance(value, int):
            return cls.from_int(value)
        if isinstance(value, Fraction):
            return cls.from_ratio(value.numerator, value.denominator)
        if isinstance(value, float):
            if value != value or value in (float("inf"), float("-inf")):
                raise InvalidArgumentError(f"Cannot represent {value!r} as FixedPoint")
            return cls.from_float(value)
        raise InvalidArgumentError(f"Cannot convert {value!r} to FixedPoint")

    @classmethod
    def zero(cls) -> "FixedPoint":
        return cls(0)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @property
    def raw(self) -> int:
        """Signed scaled integer."""
        return -self.magnitude if self.negative else self.magnitude

    def to_fraction(self) -> Fraction:
        return Fraction(self.raw, ONE)

    def to_float(self) -> float:
        return self.raw / ONE

    def round_ticks(self) -> int:
        """Nearest integer; exact halves go up (toward +inf)."""
        return (self.raw + ONE // 2) // ONE

    def split(self) -> Tuple[int, int]:
        """Return (integer part, fractional numerator) of the magnitude."""
        return divmod(self.magnitude, ONE)

    def __int__(self) -> int:
        whole = self.magnitude >> FRACTION_BITS
        return -whole if self.negative else whole

    def __float__(self) -> float:
        return self.to_float()

    def __bool__(self) -> bool:
        return self.magnitude != 0

    def __hash__(self) -> int:
        # Must match hash() of the equal int or Fraction
        return hash(self.to_fraction())

    def __repr__(self) -> str:
        whole, frac = self.split()
        sign = "-" if self.negative else ""
        if frac == 0:
            return f"FixedPoint({sign}{whole})"
        return f"FixedPoint({sign}{whole}+{frac}/{ONE})"

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __neg__(self) -> "FixedPoint":
        return FixedPoint(self.magnitude, not self.negative)

    def __abs__(self) -> "FixedPoint":
        return FixedPoint(self.magnitude)

    def __add__(self, other) -> "FixedPoint":
        other = _operand(other)
        if other is NotImplemented:
            return NotImplemented
        if self.negative == other.negative:
            return FixedPoint(self.magnitude + other.magnitude, self.negative)
        # Opposite signs: the larger magnitude decides the sign
        if self.magnitude >= other.magnitude:
            return FixedPoint(self.magnitude - other.magnitude, self.negative)
        return FixedPoint(other.magnitude - self.magnitude, other.negative)

    __radd__ = __add__

    def __sub__(self, other) -> "FixedPoint":
        other = _operand(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other) -> "FixedPoint":
        other = _operand(other)
        if other is NotImplemented:
            return NotImplemented
        return other - self

    def __mul__(self, other) -> "FixedPoint":
        other = _operand(other)
        if other is NotImplemented:
            return NotImplemented
        magnitude = _round_shift(self.magnitude * other.magnitude, FRACTION_BITS)
        return FixedPoint(magnitude, self.negative != other.negative)

    __rmul__ = __mul__

    def scale_div(self, divisor: int) -> "FixedPoint":
        """Divide by a non-zero integer, rounding to the nearest resolution step."""
        if divisor == 0:
            raise InvalidArgumentError("Cannot divide FixedPoint by zero")
        negative = self.negative != (divisor < 0)
        den = abs(divisor)
        magnitude = (2 * self.magnitude + den) // (2 * den)
        return FixedPoint(magnitude, negative)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        other = _operand(other)
        if other is NotImplemented:
            return NotImplemented
        return self.raw == other.raw

    def __lt__(self, other) -> bool:
        other = _operand(other)
        if other is NotImplemented:
            return NotImplemented
        return self.raw < other.raw


def _operand(value):
    if isinstance(value, FixedPoint):
        return value
    if isinstance(value, (SignedInt, int, Fraction)) and not isinstance(value, bool):
        return FixedPoint.coerce(value)
    return NotImplemented


ZERO = FixedPoint(0)
