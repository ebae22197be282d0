"""
Domain events for the invoicing system.
"""

from .base import DomainEvent, EventHandler, EventDispatcher

from .invoice_events import (
    InvoiceCreated,
    LineItemAdded,
    LineItemUpdated,
    LineItemRemoved,
    InvoiceUpdated,
    InvoiceMarkedAsSent,
    InvoicePaid,
    InvoiceDeleted,
)

from .customer_events import (
    CustomerCreated,
    CustomerUpdated,
    CustomerDeleted,
)

from .payment_events import PaymentRecorded


__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "InvoiceCreated",
    "LineItemAdded",
    "LineItemUpdated",
    "LineItemRemoved",
    "InvoiceUpdated",
    "InvoiceMarkedAsSent",
    "InvoicePaid",
    "InvoiceDeleted",
    "CustomerCreated",
    "CustomerUpdated",
    "CustomerDeleted",
    "PaymentRecorded",
]
