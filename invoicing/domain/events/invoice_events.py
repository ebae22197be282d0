"""
Domain events related to invoices.
Events for the invoice lifecycle: creation, line item changes and status transitions.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass
from datetime import date

from .base import DomainEvent


@dataclass
class InvoiceCreated(DomainEvent):
    """Event fired when a new draft invoice is created."""

    invoice_id: str
    user_id: str
    customer_id: str
    invoice_number: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "user_id": self.user_id,
            "customer_id": self.customer_id,
            "invoice_number": self.invoice_number,
        }


@dataclass
class LineItemAdded(DomainEvent):
    """Event fired when a line item is added to a draft invoice."""

    invoice_id: str
    line_item_id: str
    description: str
    amount: str
    invoice_total: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "line_item_id": self.line_item_id,
            "description": self.description,
            "amount": self.amount,
            "invoice_total": self.invoice_total,
        }


@dataclass
class LineItemUpdated(DomainEvent):
    """Event fired when a line item is changed."""

    invoice_id: str
    line_item_id: str
    amount: str
    invoice_total: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "line_item_id": self.line_item_id,
            "amount": self.amount,
            "invoice_total": self.invoice_total,
        }


@dataclass
class LineItemRemoved(DomainEvent):
    """Event fired when a line item is removed."""

    invoice_id: str
    line_item_id: str
    invoice_total: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "line_item_id": self.line_item_id,
            "invoice_total": self.invoice_total,
        }


@dataclass
class InvoiceUpdated(DomainEvent):
    """Event fired when invoice details (notes, terms, dates, tax) change."""

    invoice_id: str
    changed_fields: list

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "changed_fields": list(self.changed_fields),
        }


@dataclass
class InvoiceMarkedAsSent(DomainEvent):
    """Event fired when an invoice moves from draft to sent."""

    invoice_id: str
    invoice_number: str
    customer_id: str
    total: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "invoice_number": self.invoice_number,
            "customer_id": self.customer_id,
            "total": self.total,
        }


@dataclass
class InvoicePaid(DomainEvent):
    """Event fired when the payment ledger settles an invoice."""

    invoice_id: str
    invoice_number: str
    total: str
    paid_date: Optional[date] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "invoice_number": self.invoice_number,
            "total": self.total,
            "paid_date": self.paid_date.isoformat() if self.paid_date else None,
        }


@dataclass
class InvoiceDeleted(DomainEvent):
    """Event fired when a draft invoice is soft deleted."""

    invoice_id: str
    invoice_number: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "invoice_number": self.invoice_number,
        }
