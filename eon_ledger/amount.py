"""
Fixed-Point Amount Module

Token amounts carry exactly 8 fractional digits and are held as a scaled
integer (units of 10^-8) so arithmetic never drifts. NEVER uses float.
"""

from decimal import Decimal, DecimalException
from dataclasses import dataclass
from typing import Union

from .errors import InvalidAmountError

DECIMALS = 8
SCALE = 10 ** DECIMALS

# Stored balances are signed 256-bit integers of units
MAX_UNITS = 2 ** 255 - 1
MAX_DIGITS = len(str(MAX_UNITS))

AmountLike = Union["Amount", Decimal, int, str]


@dataclass(frozen=True, order=True)
class Amount:
    """
    Immutable 8-decimal token amount.
    `units` is the integer numerator over 10^8 and may be negative in
    intermediate arithmetic.
    """
    units: int

    def __post_init__(self):
        if isinstance(self.units, bool) or not isinstance(self.units, int):
            raise InvalidAmountError(f"Amount units must be an integer, got {type(self.units).__name__}")
        if abs(self.units) > MAX_UNITS:
            raise InvalidAmountError("Amount is out of range")

    @classmethod
    def from_units(cls, units: int) -> 'Amount':
        return cls(units)

    @classmethod
    def zero(cls) -> 'Amount':
        return cls(0)

    @classmethod
    def of(cls, value: AmountLike) -> 'Amount':
        """
        Build an Amount from a whole/decimal value.

        Args:
            value: Amount, Decimal, int, or decimal string ("100.5")

        Raises:
            InvalidAmountError: for floats, malformed strings, non-finite values,
                more than 8 fractional digits, or values out of range
        """
        if isinstance(value, Amount):
            return value
        if isinstance(value, float):
            raise InvalidAmountError("Floats are not accepted as amounts; use str or Decimal")
        if isinstance(value, bool):
            raise InvalidAmountError("Booleans are not amounts")
        if isinstance(value, int):
            return cls(value * SCALE)

        try:
            decimal_value = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except DecimalException:
            raise InvalidAmountError(f"Not a decimal amount: {value!r}")

        if not decimal_value.is_finite():
            raise InvalidAmountError(f"Amount must be finite: {value!r}")

        # Exact integer math on the digits; the Decimal context would round
        sign, digits, exponent = decimal_value.as_tuple()
        kept = len(digits)
        while kept > 1 and digits[kept - 1] == 0:
            kept -= 1
        exponent += len(digits) - kept
        digits = digits[:kept]
        if digits == (0,):
            return cls(0)
        if exponent < -DECIMALS:
            raise InvalidAmountError(
                f"Amount {value} has more than {DECIMALS} fractional digits"
            )

        shift = exponent + DECIMALS
        if len(digits) + shift > MAX_DIGITS:
            raise InvalidAmountError(f"Amount {value} is out of range")
        units = int("".join(map(str, digits))) * 10 ** shift
        return cls(-units if sign else units)

    def __add__(self, other: 'Amount') -> 'Amount':
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units + other.units)

    def __sub__(self, other: 'Amount') -> 'Amount':
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units - other.units)

    def __neg__(self) -> 'Amount':
        return Amount(-self.units)

    def __abs__(self) -> 'Amount':
        return Amount(abs(self.units))

    def is_zero(self) -> bool:
        return self.units == 0

    def is_negative(self) -> bool:
        return self.units < 0

    def to_decimal(self) -> Decimal:
        """Exact decimal value with 8 fractional digits"""
        digits = tuple(int(d) for d in str(abs(self.units)))
        return Decimal((int(self.is_negative()), digits, -DECIMALS))

    def __str__(self) -> str:
        return f"{self.to_decimal():f}"

    def __repr__(self) -> str:
        return f"Amount('{self}')"
