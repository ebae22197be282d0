"""
Domain events related to payments.
"""

from typing import Dict, Any
from dataclasses import dataclass
from datetime import date

from .base import DomainEvent


@dataclass
class PaymentRecorded(DomainEvent):
    """Event fired when a payment is applied to an invoice."""

    payment_id: str
    invoice_id: str
    amount: str
    payment_method: str
    payment_date: date
    remaining_balance: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "payment_id": self.payment_id,
            "invoice_id": self.invoice_id,
            "amount": self.amount,
            "payment_method": self.payment_method,
            "payment_date": self.payment_date.isoformat(),
            "remaining_balance": self.remaining_balance,
        }
