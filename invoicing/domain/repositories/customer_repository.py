"""Customer repository interface.
Defines the contract for customer data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from invoicing.domain.models.customer import Customer


class CustomerRepository(ABC):
    """Repository interface for the Customer aggregate."""

    @abstractmethod
    async def save(self, customer: Customer) -> Customer:
        """Insert or update a customer."""
        pass

    @abstractmethod
    async def find_by_id(self, customer_id: str, user_id: str) -> Optional[Customer]:
        """
        Find a non-deleted customer by id for its owner.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str, user_id: str) -> Optional[Customer]:
        """
        Find a non-deleted customer of the user by (lowercased) email.
        Used for uniqueness checks.
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Customer]:
        """List a user's non-deleted customers ordered by name."""
        pass
