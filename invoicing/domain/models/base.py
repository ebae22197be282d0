"""
Base entity and exception classes for the domain layer.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime, timezone
from typing import Optional, Any, Dict, List
from abc import ABC
from dataclasses import dataclass, field
import uuid


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid.uuid4())


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides identity, timestamps and domain event collection.
    """

    id: str = field(default_factory=new_id, kw_only=True)
    created_at: datetime = field(default_factory=utc_now, kw_only=True)
    updated_at: datetime = field(default_factory=utc_now, kw_only=True)

    # Domain events
    _events: List[Any] = field(default_factory=list, init=False, repr=False, compare=False)

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        return hash((self.__class__.__name__, self.id))

    def mark_as_updated(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = utc_now()

    def add_event(self, event: Any) -> None:
        """Add a domain event."""
        self._events.append(event)

    def pull_events(self) -> List[Any]:
        """Get and clear all domain events."""
        events = self._events.copy()
        self._events.clear()
        return events


@dataclass(eq=False)
class AggregateRoot(BaseEntity):
    """
    Base class for aggregate roots.
    Aggregate roots are the entry points to aggregates and collect domain events.
    """

    deleted_at: Optional[datetime] = field(default=None, kw_only=True)

    @property
    def is_deleted(self) -> bool:
        """Check if the aggregate has been soft deleted."""
        return self.deleted_at is not None


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """Exception raised when a field is malformed or out of range."""

    def __init__(self, message: str, field: Optional[str] = None, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class InvalidValueError(ValidationError):
    """Raised when a value cannot be represented (e.g. a non-finite amount)."""


class InvalidAmountError(ValidationError):
    """Raised when a monetary amount is not acceptable for the operation."""


class DivisionByZeroError(DomainException):
    """Raised when dividing a monetary amount by zero."""

    def __init__(self, message: str = "Cannot divide by zero"):
        super().__init__(message, "DIVISION_BY_ZERO")


class BusinessRuleViolation(DomainException):
    """Exception raised when a business rule is violated."""

    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATION"):
        super().__init__(message, code)


class InvalidStateError(BusinessRuleViolation):
    """Operation is not legal in the aggregate's current status."""


class PreconditionFailedError(BusinessRuleViolation):
    """A transition's precondition does not hold."""


class LimitExceededError(BusinessRuleViolation):
    """A collection limit would be exceeded."""


class AlreadyDeletedError(BusinessRuleViolation):
    """The aggregate has already been soft deleted."""

    def __init__(self, message: str, code: str = "ALREADY_DELETED"):
        super().__init__(message, code)


class ExceedsBalanceError(BusinessRuleViolation):
    """A payment amount is larger than the outstanding balance."""

    def __init__(self, message: str, code: str = "PAYMENT_EXCEEDS_BALANCE"):
        super().__init__(message, code)


class BalanceInvariantError(BusinessRuleViolation):
    """Recorded payments exceed the invoice total."""

    def __init__(self, message: str, code: str = "NEGATIVE_BALANCE"):
        super().__init__(message, code)


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any, code: Optional[str] = None):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, code or "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateEntityError(DomainException):
    """Exception raised when trying to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any, code: str = "DUPLICATE_ENTITY"):
        message = f"{entity_type} with {field}='{value}' already exists"
        super().__init__(message, code)
        self.entity_type = entity_type
        self.field = field
        self.value = value


class EmailAlreadyExistsError(DuplicateEntityError):
    """A non-deleted customer with this email already exists for the user."""

    def __init__(self, email: str):
        super().__init__("Customer", "email", email, "EMAIL_ALREADY_EXISTS")


class InvoiceNumberConflictError(DuplicateEntityError):
    """Another invoice took this number first. Creating the invoice again allocates a new one."""

    def __init__(self, invoice_number: str):
        super().__init__("Invoice", "invoice_number", invoice_number, "INVOICE_NUMBER_CONFLICT")
