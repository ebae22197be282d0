"""
Domain models for the invoicing system.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    AggregateRoot,
    DomainException,
    ValidationError,
    InvalidValueError,
    InvalidAmountError,
    DivisionByZeroError,
    BusinessRuleViolation,
    InvalidStateError,
    PreconditionFailedError,
    LimitExceededError,
    AlreadyDeletedError,
    ExceedsBalanceError,
    BalanceInvariantError,
    EntityNotFoundError,
    DuplicateEntityError,
    EmailAlreadyExistsError,
    InvoiceNumberConflictError,
)

# Value Objects
from .value_objects import (
    Money,
    InvoiceNumber,
    CustomerName,
    EmailAddress,
    PhoneNumber,
    Address,
)

# Domain entities
from .line_item import LineItem
from .invoice import Invoice, InvoiceStatus, MAX_LINE_ITEMS
from .payment import Payment, PaymentMethod
from .customer import Customer


__all__ = [
    "BaseEntity",
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "InvalidValueError",
    "InvalidAmountError",
    "DivisionByZeroError",
    "BusinessRuleViolation",
    "InvalidStateError",
    "PreconditionFailedError",
    "LimitExceededError",
    "AlreadyDeletedError",
    "ExceedsBalanceError",
    "BalanceInvariantError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "EmailAlreadyExistsError",
    "InvoiceNumberConflictError",
    "Money",
    "InvoiceNumber",
    "CustomerName",
    "EmailAddress",
    "PhoneNumber",
    "Address",
    "LineItem",
    "Invoice",
    "InvoiceStatus",
    "MAX_LINE_ITEMS",
    "Payment",
    "PaymentMethod",
    "Customer",
]
