"""
Repository interfaces for the domain layer.
"""

from .customer_repository import CustomerRepository
from .invoice_repository import InvoiceRepository
from .payment_repository import PaymentRepository
from .unit_of_work import UnitOfWork


__all__ = [
    "CustomerRepository",
    "InvoiceRepository",
    "PaymentRepository",
    "UnitOfWork",
]
