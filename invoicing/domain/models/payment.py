"""
Payment domain model.
An immutable record of money received against one invoice.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional
from enum import Enum

from invoicing.domain.models.base import (
    ValidationError,
    InvalidAmountError,
    new_id,
    utc_now,
)
from invoicing.domain.models.value_objects import Money, to_decimal


MAX_REFERENCE_LENGTH = 255
MAX_NOTES_LENGTH = 1000


class PaymentMethod(str, Enum):
    """Payment method."""
    CASH = "cash"
    CHECK = "check"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"


@dataclass(frozen=True)
class Payment:
    """
    Payment record for an invoice.

    Payments are created once and never changed or deleted. The set of
    payments for an invoice is the only source of truth for the amount paid.
    """

    invoice_id: str
    amount: Money
    payment_method: PaymentMethod
    payment_date: date
    reference: Optional[str] = None
    notes: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        invoice_id: str,
        amount,
        payment_method,
        payment_date: date,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "Payment":
        """Create a validated payment."""
        if not invoice_id:
            raise ValidationError("Invoice ID is required", "invoice_id", "INVALID_INVOICE_ID")

        if not isinstance(amount, Money):
            amount = Money(to_decimal(amount, "amount", "INVALID_PAYMENT_AMOUNT"))
        if not amount.is_positive():
            raise InvalidAmountError("Payment amount must be greater than zero", "amount", "INVALID_PAYMENT_AMOUNT")

        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise ValidationError(
                f"Invalid payment method: {payment_method}",
                "payment_method",
                "INVALID_PAYMENT_METHOD",
            )

        if payment_date > utc_now().date():
            raise ValidationError("Payment date cannot be in the future", "payment_date", "PAYMENT_DATE_IN_FUTURE")

        if reference is not None and len(reference) > MAX_REFERENCE_LENGTH:
            raise ValidationError(
                f"Reference cannot exceed {MAX_REFERENCE_LENGTH} characters",
                "reference",
                "REFERENCE_TOO_LONG",
            )
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(
                f"Notes cannot exceed {MAX_NOTES_LENGTH} characters",
                "notes",
                "NOTES_TOO_LONG",
            )

        return cls(
            invoice_id=invoice_id,
            amount=amount,
            payment_method=method,
            payment_date=payment_date,
            reference=reference,
            notes=notes,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "invoice_id": self.invoice_id,
            "amount": str(self.amount),
            "payment_method": self.payment_method.value,
            "payment_date": self.payment_date.isoformat(),
            "reference": self.reference,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
        }
