"""Invoice repository interface.
Defines the contract for invoice data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.models.value_objects import InvoiceNumber


class InvoiceRepository(ABC):
    """
    Repository interface for the Invoice aggregate.
    Invoices are always loaded together with their line items and scoped to their owner.
    """

    @abstractmethod
    async def save(self, invoice: Invoice) -> Invoice:
        """
        Save an invoice together with its line items.
        Line items missing from the aggregate are removed from storage.
        """
        pass

    @abstractmethod
    async def find_by_id(
        self,
        invoice_id: str,
        user_id: str,
        for_update: bool = False,
    ) -> Optional[Invoice]:
        """
        Find a non-deleted invoice by id for its owner.
        With ``for_update`` the row stays locked until the transaction ends.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: str,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[str] = None,
    ) -> List[Invoice]:
        """
        List a user's non-deleted invoices, newest first.
        """
        pass

    @abstractmethod
    async def get_last_invoice_number(self, user_id: str) -> Optional[InvoiceNumber]:
        """
        Highest invoice number issued to the user, deleted invoices included.
        """
        pass
