"""
Domain events related to customers.
"""

from typing import Dict, Any
from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class CustomerCreated(DomainEvent):
    """Event fired when a customer is created."""

    customer_id: str
    user_id: str
    name: str
    email: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
        }


@dataclass
class CustomerUpdated(DomainEvent):
    """Event fired when customer details change."""

    customer_id: str
    changed_fields: list

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "changed_fields": list(self.changed_fields),
        }


@dataclass
class CustomerDeleted(DomainEvent):
    """Event fired when a customer is soft deleted."""

    customer_id: str
    user_id: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "user_id": self.user_id,
        }
