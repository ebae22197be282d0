"""
Customer domain model.
Represents a billing party that invoices are issued to.
"""

from dataclasses import dataclass
from typing import Optional

from invoicing.domain.models.base import (
    AggregateRoot,
    ValidationError,
    InvalidStateError,
    AlreadyDeletedError,
    utc_now,
)
from invoicing.domain.models.value_objects import (
    CustomerName,
    EmailAddress,
    PhoneNumber,
    Address,
)
from invoicing.domain.events.customer_events import (
    CustomerCreated,
    CustomerUpdated,
    CustomerDeleted,
)


@dataclass(eq=False)
class Customer(AggregateRoot):
    """
    Customer aggregate root.
    Invoices reference customers by id only and never load their state.
    """

    user_id: str
    name: CustomerName
    email: EmailAddress
    address: Address
    phone_number: PhoneNumber

    @classmethod
    def create(
        cls,
        user_id: str,
        name: str,
        email: str,
        address: Address,
        phone_number: str,
    ) -> "Customer":
        """Create a new customer with validated details."""
        if not user_id:
            raise ValidationError("User ID is required", "user_id", "INVALID_USER_ID")

        customer = cls(
            user_id=user_id,
            name=CustomerName(name),
            email=EmailAddress(email),
            address=address,
            phone_number=PhoneNumber(phone_number),
        )
        customer.add_event(CustomerCreated(
            customer_id=customer.id,
            user_id=user_id,
            name=str(customer.name),
            email=str(customer.email),
        ))
        return customer

    def update(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[Address] = None,
        phone_number: Optional[str] = None,
    ) -> None:
        """Update customer details. Deleted customers cannot be changed."""
        if self.is_deleted:
            raise InvalidStateError("Cannot update a deleted customer", "CANNOT_UPDATE_DELETED_CUSTOMER")

        # Build every value object first so invalid input changes nothing
        new_name = CustomerName(name) if name is not None else None
        new_email = EmailAddress(email) if email is not None else None
        new_phone = PhoneNumber(phone_number) if phone_number is not None else None

        changed = []
        if new_name is not None:
            self.name = new_name
            changed.append("name")
        if new_email is not None:
            self.email = new_email
            changed.append("email")
        if address is not None:
            self.address = address
            changed.append("address")
        if new_phone is not None:
            self.phone_number = new_phone
            changed.append("phone_number")

        self.mark_as_updated()
        if changed:
            self.add_event(CustomerUpdated(customer_id=self.id, changed_fields=changed))

    def soft_delete(self) -> None:
        """Mark the customer as deleted."""
        if self.is_deleted:
            raise AlreadyDeletedError("Customer is already deleted")

        self.deleted_at = utc_now()
        self.mark_as_updated()
        self.add_event(CustomerDeleted(customer_id=self.id, user_id=self.user_id))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": str(self.name),
            "email": str(self.email),
            "address": self.address.to_dict(),
            "phone_number": str(self.phone_number),
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
