"""
Payment repository implementation using SQLAlchemy.
The ledger is insert-only.
"""

from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from invoicing.domain.models.payment import Payment
from invoicing.domain.models.value_objects import Money
from invoicing.domain.repositories.payment_repository import PaymentRepository as PaymentRepositoryInterface
from invoicing.infrastructure.db.models import PaymentModel, InvoiceModel
from invoicing.infrastructure.mappers.payment_mapper import PaymentMapper


class SQLAlchemyPaymentRepository(PaymentRepositoryInterface):
    """SQLAlchemy implementation of payment repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = PaymentMapper()
        self.model = PaymentModel

    async def save(self, payment: Payment) -> Payment:
        """Insert a payment row."""
        self.session.add(self.mapper.domain_to_model(payment))
        self.session.flush()
        return payment

    async def find_by_id(self, payment_id: str, user_id: str) -> Optional[Payment]:
        """Get a payment by id. Ownership comes from the invoice it was recorded against."""
        model = self._owned_by(user_id).filter(PaymentModel.id == payment_id).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def total_for_invoice(self, invoice_id: str) -> Money:
        """Sum the ledger for one invoice inside the current transaction."""
        total = self.session.query(
            func.coalesce(func.sum(PaymentModel.amount), 0)
        ).filter(PaymentModel.invoice_id == invoice_id).scalar()
        return Money(total)

    async def list_by_invoice(self, invoice_id: str) -> List[Payment]:
        models = self.session.query(PaymentModel).filter(
            PaymentModel.invoice_id == invoice_id
        ).order_by(PaymentModel.payment_date, PaymentModel.created_at).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def list_by_user(self, user_id: str) -> List[Payment]:
        models = self._owned_by(user_id).order_by(PaymentModel.payment_date, PaymentModel.created_at).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def _owned_by(self, user_id: str):
        return self.session.query(PaymentModel).join(
            InvoiceModel, PaymentModel.invoice_id == InvoiceModel.id
        ).filter(
            InvoiceModel.user_id == user_id,
            InvoiceModel.deleted_at.is_(None),
        )
