"""
SQLAlchemy repository implementations.
"""

from .customer_repository import SQLAlchemyCustomerRepository
from .invoice_repository import SQLAlchemyInvoiceRepository
from .payment_repository import SQLAlchemyPaymentRepository


__all__ = [
    "SQLAlchemyCustomerRepository",
    "SQLAlchemyInvoiceRepository",
    "SQLAlchemyPaymentRepository",
]
