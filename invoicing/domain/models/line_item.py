"""
Line item domain model.
A single billable row on an invoice: description x quantity x unit price.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from invoicing.domain.models.base import BaseEntity, ValidationError
from invoicing.domain.models.value_objects import Money, Number, to_decimal


MAX_DESCRIPTION_LENGTH = 500
QUANTITY_PLACES = Decimal('0.0001')


def _validate_description(description: str) -> str:
    trimmed = (description or "").strip()
    if not trimmed:
        raise ValidationError("Description is required", "description", "DESCRIPTION_REQUIRED")
    if len(trimmed) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters",
            "description",
            "DESCRIPTION_TOO_LONG",
        )
    return trimmed


def _validate_quantity(quantity: Number) -> Decimal:
    value = to_decimal(quantity, "quantity", "INVALID_QUANTITY")
    value = value.quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)
    if value <= 0:
        raise ValidationError("Quantity must be greater than zero", "quantity", "INVALID_QUANTITY")
    return value


def _validate_unit_price(unit_price) -> Money:
    price = unit_price if isinstance(unit_price, Money) else Money(to_decimal(unit_price, "unit_price", "INVALID_UNIT_PRICE"))
    if price.is_negative():
        raise ValidationError("Unit price cannot be negative", "unit_price", "INVALID_UNIT_PRICE")
    return price


@dataclass(eq=False)
class LineItem(BaseEntity):
    """
    Billable entry owned by an invoice.

    ``amount`` is always ``round4(unit_price * quantity)``; it is recomputed by
    every mutation and never set on its own. Line items are created and
    changed only through their owning :class:`Invoice`.
    """

    invoice_id: str
    description: str
    quantity: Decimal
    unit_price: Money
    amount: Money = None
    position: int = 0

    def __post_init__(self):
        self.description = _validate_description(self.description)
        self.quantity = _validate_quantity(self.quantity)
        self.unit_price = _validate_unit_price(self.unit_price)
        self._calculate_amount()

    @classmethod
    def create(
        cls,
        invoice_id: str,
        description: str,
        quantity: Number,
        unit_price,
        position: int = 0,
    ) -> "LineItem":
        """Create a validated line item."""
        return cls(
            invoice_id=invoice_id,
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            position=position,
        )

    def update(
        self,
        description: Optional[str] = None,
        quantity: Optional[Number] = None,
        unit_price=None,
    ) -> None:
        """Change any of the line item's inputs and recompute its amount."""
        # Validate everything before assigning so a failure leaves the item untouched
        new_description = _validate_description(description) if description is not None else self.description
        new_quantity = _validate_quantity(quantity) if quantity is not None else self.quantity
        new_price = _validate_unit_price(unit_price) if unit_price is not None else self.unit_price

        self.description = new_description
        self.quantity = new_quantity
        self.unit_price = new_price
        self._calculate_amount()
        self.mark_as_updated()

    def _calculate_amount(self) -> None:
        self.amount = self.unit_price.multiply(self.quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "invoice_id": self.invoice_id,
            "description": self.description,
            "quantity": str(self.quantity),
            "unit_price": str(self.unit_price),
            "amount": str(self.amount),
            "position": self.position,
        }
