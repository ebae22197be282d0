"""Unit of work interface.
One transaction plus the repositories bound to it.
"""

from abc import ABC, abstractmethod

from invoicing.domain.repositories.customer_repository import CustomerRepository
from invoicing.domain.repositories.invoice_repository import InvoiceRepository
from invoicing.domain.repositories.payment_repository import PaymentRepository


class UnitOfWork(ABC):
    """
    Transaction boundary for use cases.

    Used as an async context manager. Work is persisted only by an explicit
    :meth:`commit`; leaving the block without committing (or because of an
    exception) rolls everything back.
    """

    customers: CustomerRepository
    invoices: InvoiceRepository
    payments: PaymentRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
