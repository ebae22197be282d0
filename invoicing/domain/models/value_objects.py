"""
Value Objects for the domain layer.
Immutable objects that represent values and encapsulate business logic.
"""

from typing import Union
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from dataclasses import dataclass
import re

from invoicing.domain.models.base import (
    ValidationError,
    InvalidValueError,
    DivisionByZeroError,
)


# Working precision for all invoice arithmetic
MONEY_PLACES = 4
_QUANTUM = Decimal(1).scaleb(-MONEY_PLACES)

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number, field: str = "amount", code: str = "INVALID_MONEY_VALUE") -> Decimal:
    """Convert a number to a finite Decimal, going through str() for floats."""
    if isinstance(value, bool):
        raise InvalidValueError(f"Invalid numeric value: {value!r}", field, code)
    if isinstance(value, float):
        value = str(value)
    try:
        result = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidValueError(f"Invalid numeric value: {value!r}", field, code)
    if not result.is_finite():
        raise InvalidValueError(f"Amount must be a finite number, got {value!r}", field, code)
    return result


@dataclass(frozen=True, eq=False)
class Money:
    """
    Value object representing a monetary amount.

    The amount is always finite and quantized to four fractional digits using
    round-half-away-from-zero, so every arithmetic result is rounded at the
    point it is produced. Negative amounts are allowed (a negative balance is
    a signal, not something to floor).
    """

    amount: Decimal

    def __post_init__(self):
        """Normalize and round the amount after initialization."""
        amount = to_decimal(self.amount)
        rounded = amount.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
        if rounded == 0:
            rounded = abs(rounded)
        object.__setattr__(self, 'amount', rounded)

    @classmethod
    def zero(cls) -> "Money":
        """Create a zero money object."""
        return cls(Decimal('0'))

    @classmethod
    def sum(cls, amounts) -> "Money":
        """Add up an iterable of Money, starting from zero."""
        total = cls.zero()
        for amount in amounts:
            total = total.add(amount)
        return total

    def add(self, other: "Money") -> "Money":
        """Add two money objects."""
        return Money(self.amount + other.amount)

    def subtract(self, other: "Money") -> "Money":
        """Subtract another money object. The result may be negative."""
        return Money(self.amount - other.amount)

    def multiply(self, factor: Number) -> "Money":
        """Multiply money by a factor."""
        return Money(self.amount * to_decimal(factor, "factor"))

    def divide(self, divisor: Number) -> "Money":
        """Divide money by a divisor."""
        divisor = to_decimal(divisor, "divisor")
        if divisor == 0:
            raise DivisionByZeroError()
        return Money(self.amount / divisor)

    def round(self, decimals: int = 2) -> "Money":
        """
        Round half away from zero to the given number of decimals.
        Money never holds more than MONEY_PLACES decimals, so asking for more is an error.
        """
        if decimals > MONEY_PLACES:
            raise InvalidValueError(
                f"Cannot round to more than {MONEY_PLACES} decimals, got {decimals}",
                "decimals",
                "INVALID_ROUNDING",
            )
        quantum = Decimal(1).scaleb(-decimals)
        return Money(self.amount.quantize(quantum, rounding=ROUND_HALF_UP))

    def is_zero(self) -> bool:
        """Check if the amount is zero."""
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_greater_than(self, other: "Money") -> bool:
        """Compare if this money is greater than other."""
        return self.amount > other.amount

    def is_less_than(self, other: "Money") -> bool:
        """Compare if this money is less than other."""
        return self.amount < other.amount

    def equals(self, other: "Money") -> bool:
        """Check if two money objects are equal."""
        return self.amount == other.amount

    def format(self, symbol: str = "$") -> str:
        """Format money for display with two decimals."""
        rounded = self.amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        return f"{sign}{symbol}{abs(rounded):,.2f}"

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: Number) -> "Money":
        return self.multiply(factor)

    def __truediv__(self, divisor: Number) -> "Money":
        return self.divide(divisor)

    def __neg__(self) -> "Money":
        return Money(-self.amount)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount == other.amount

    def __hash__(self) -> int:
        return hash(self.amount)

    def __lt__(self, other: "Money") -> bool:
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount:.{MONEY_PLACES}f}"

    def __repr__(self) -> str:
        return f"Money('{self}')"


@dataclass(frozen=True)
class InvoiceNumber:
    """Value object representing an invoice number in the form INV-<n>."""

    value: str

    PREFIX = "INV"
    PATTERN = re.compile(r'^INV-\d+$')

    def __post_init__(self):
        """Validate the invoice number format."""
        value = (self.value or "").strip()
        if not self.PATTERN.match(value):
            raise ValidationError(
                f"Invalid invoice number format: {self.value!r}",
                "invoice_number",
                "INVALID_INVOICE_NUMBER_FORMAT",
            )
        object.__setattr__(self, 'value', value)

    @classmethod
    def from_sequence(cls, sequence: int) -> "InvoiceNumber":
        """Build an invoice number from its numeric sequence."""
        return cls(f"{cls.PREFIX}-{sequence}")

    @property
    def sequence(self) -> int:
        """Numeric part of the invoice number."""
        return int(self.value.split('-', 1)[1])

    def next(self) -> "InvoiceNumber":
        """Get the next invoice number in sequence."""
        return InvoiceNumber.from_sequence(self.sequence + 1)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"InvoiceNumber('{self.value}')"


def _required_text(value: str, field: str, max_length: int) -> str:
    """Trim a required text value and enforce its maximum length."""
    code_prefix = field.upper()
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required", field, f"{code_prefix}_REQUIRED")
    if len(trimmed) > max_length:
        raise ValidationError(
            f"{field.replace('_', ' ').capitalize()} cannot exceed {max_length} characters",
            field,
            f"{code_prefix}_TOO_LONG",
        )
    return trimmed


@dataclass(frozen=True)
class CustomerName:
    """Trimmed customer display name."""

    value: str

    def __post_init__(self):
        object.__setattr__(self, 'value', _required_text(self.value, "name", 255))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EmailAddress:
    """Value object representing a validated, lowercased email address."""

    value: str

    EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

    def __post_init__(self):
        """Validate and normalize the email address."""
        trimmed = (self.value or "").strip()
        if not trimmed:
            raise ValidationError("Email is required", "email", "EMAIL_REQUIRED")
        if not self.EMAIL_PATTERN.match(trimmed):
            raise ValidationError(f"Invalid email address: {trimmed}", "email", "INVALID_EMAIL_FORMAT")
        if len(trimmed) > 255:
            raise ValidationError("Email cannot exceed 255 characters", "email", "EMAIL_TOO_LONG")
        object.__setattr__(self, 'value', trimmed.lower())

    def domain_part(self) -> str:
        """Get the domain part (after @) of the email."""
        return self.value.split('@')[1]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PhoneNumber:
    """Value object representing a phone number as entered, trimmed."""

    value: str

    def __post_init__(self):
        object.__setattr__(self, 'value', _required_text(self.value, "phone", 50))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Address:
    """Postal address. Every component is required."""

    street: str
    city: str
    state: str
    postal_code: str
    country: str

    def __post_init__(self):
        """Trim and validate each address component."""
        object.__setattr__(self, 'street', _required_text(self.street, "street", 255))
        object.__setattr__(self, 'city', _required_text(self.city, "city", 100))
        object.__setattr__(self, 'state', _required_text(self.state, "state", 100))
        object.__setattr__(self, 'postal_code', _required_text(self.postal_code, "postal_code", 20))
        object.__setattr__(self, 'country', _required_text(self.country, "country", 100))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
        }

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.postal_code}, {self.country}"
