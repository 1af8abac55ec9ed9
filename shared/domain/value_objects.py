"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts in the minor currency unit
- DateRange: Represents an inclusive range of rental days
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = {
    'INR': ('₹', 100),
    'USD': ('$', 100),
    'EUR': ('€', 100),
}


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Holds an integer amount in the currency's minor unit (paise for INR).
    Every persisted amount in the system is a Money; conversion to the
    major unit happens only for display via ``to_major``/``format``.
    """
    minor_units: int
    currency: str = 'INR'

    def __post_init__(self):
        # Validation
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError("Money amount must be an integer number of minor units")
        if self.minor_units < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    @classmethod
    def from_major(cls, amount, currency: str = 'INR') -> 'Money':
        """Build Money from a major-unit amount such as ``Decimal('30.50')``."""
        factor = SUPPORTED_CURRENCIES.get(currency, (None, 100))[1]
        minor = Decimal(str(amount)) * factor
        if minor != minor.to_integral_value():
            raise ValueError(f"{amount} has more precision than {currency} allows")
        return cls(int(minor), currency)

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.minor_units + other.minor_units, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")
        return Money(self.minor_units - other.minor_units, self.currency)

    def __mul__(self, factor: int) -> 'Money':
        """Multiply money by a whole number (e.g. a day count)"""
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError("Can only multiply Money by an integer")
        return Money(self.minor_units * factor, self.currency)

    __rmul__ = __mul__

    def __lt__(self, other: 'Money') -> bool:
        if not isinstance(other, Money) or self.currency != other.currency:
            return NotImplemented
        return self.minor_units < other.minor_units

    def __le__(self, other: 'Money') -> bool:
        if not isinstance(other, Money) or self.currency != other.currency:
            return NotImplemented
        return self.minor_units <= other.minor_units

    def to_major(self) -> Decimal:
        factor = SUPPORTED_CURRENCIES[self.currency][1]
        return (Decimal(self.minor_units) / factor).quantize(Decimal('0.01'))

    def format(self) -> str:
        symbol = SUPPORTED_CURRENCIES[self.currency][0]
        return f"{symbol}{self.to_major():,.2f}"

    def __str__(self):
        return f"{self.to_major():,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.minor_units}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents rental days from start_date to end_date, both inclusive.
    A range that starts and ends on the same day is a one-day rental.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        # Validation
        if self.end_date < self.start_date:
            raise ValueError(f"End date ({self.end_date}) must not precede start date ({self.start_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Both ends are inclusive, so ranges sharing a single day overlap.

        Examples:
            - DateRange(10, 12) overlaps with DateRange(11, 11) -> True
            - DateRange(10, 12) overlaps with DateRange(12, 14) -> True
            - DateRange(10, 12) overlaps with DateRange(13, 14) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date <= other.end_date and
                self.end_date >= other.start_date)

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date <= self.end_date

    @property
    def day_count(self) -> int:
        """Inclusive number of rental days."""
        return (self.end_date - self.start_date).days + 1

    def __len__(self) -> int:
        return self.day_count

    def __str__(self):
        return f"{self.start_date.strftime('%d.%m.%Y')} - {self.end_date.strftime('%d.%m.%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
