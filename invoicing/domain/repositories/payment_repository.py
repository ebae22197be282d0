"""Payment repository interface.
Payments are insert-only: the contract has no update or delete.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from invoicing.domain.models.payment import Payment
from invoicing.domain.models.value_objects import Money


class PaymentRepository(ABC):
    """Repository interface for the payment ledger."""

    @abstractmethod
    async def save(self, payment: Payment) -> Payment:
        """Insert a new payment."""
        pass

    @abstractmethod
    async def find_by_id(self, payment_id: str, user_id: str) -> Optional[Payment]:
        """Find a payment whose invoice belongs to the user."""
        pass

    @abstractmethod
    async def total_for_invoice(self, invoice_id: str) -> Money:
        """
        Sum of all payments recorded against an invoice.
        Zero when there are none.
        """
        pass

    @abstractmethod
    async def list_by_invoice(self, invoice_id: str) -> List[Payment]:
        """Payments for an invoice, oldest first."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Payment]:
        """Payments against any of the user's non-deleted invoices."""
        pass
