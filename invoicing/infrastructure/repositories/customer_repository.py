"""
Customer repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from invoicing.domain.models.base import EmailAlreadyExistsError
from invoicing.domain.models.customer import Customer
from invoicing.domain.repositories.customer_repository import CustomerRepository as CustomerRepositoryInterface
from invoicing.infrastructure.db.integrity import is_unique_violation
from invoicing.infrastructure.db.models import CustomerModel
from invoicing.infrastructure.mappers.customer_mapper import CustomerMapper


class SQLAlchemyCustomerRepository(CustomerRepositoryInterface):
    """SQLAlchemy implementation of customer repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = CustomerMapper()
        self.model = CustomerModel

    async def save(self, customer: Customer) -> Customer:
        """Save a customer entity."""
        model = self.session.get(CustomerModel, customer.id)
        if model is None:
            self.session.add(self.mapper.domain_to_model(customer))
        else:
            self.mapper.apply_to_model(customer, model)

        try:
            self.session.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent create for the same email
            if is_unique_violation(exc, "uq_customers_user_email_active", "customers.email"):
                raise EmailAlreadyExistsError(str(customer.email)) from exc
            raise
        return customer

    async def find_by_id(self, customer_id: str, user_id: str) -> Optional[Customer]:
        """Get a non-deleted customer by ID for its owner."""
        model = self._active(user_id).filter(CustomerModel.id == customer_id).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def find_by_email(self, email: str, user_id: str) -> Optional[Customer]:
        """Get a non-deleted customer by email for its owner."""
        model = self._active(user_id).filter(CustomerModel.email == email.strip().lower()).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def list_by_user(self, user_id: str) -> List[Customer]:
        """List a user's non-deleted customers ordered by name."""
        models = self._active(user_id).order_by(CustomerModel.name).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def _active(self, user_id: str):
        return self.session.query(CustomerModel).filter(
            CustomerModel.user_id == user_id,
            CustomerModel.deleted_at.is_(None),
        )
