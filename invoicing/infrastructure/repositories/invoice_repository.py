"""
Invoice repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from invoicing.domain.models.base import InvoiceNumberConflictError
from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.models.value_objects import InvoiceNumber
from invoicing.domain.repositories.invoice_repository import InvoiceRepository as InvoiceRepositoryInterface
from invoicing.infrastructure.db.integrity import is_unique_violation
from invoicing.infrastructure.db.models import InvoiceModel
from invoicing.infrastructure.mappers.invoice_mapper import InvoiceMapper


class SQLAlchemyInvoiceRepository(InvoiceRepositoryInterface):
    """SQLAlchemy implementation of invoice repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = InvoiceMapper()
        self.model = InvoiceModel

    async def save(self, invoice: Invoice) -> Invoice:
        """Insert or update an invoice and its line items."""
        model = self.session.get(InvoiceModel, invoice.id)
        if model is None:
            model = self.mapper.domain_to_model(invoice)
            self.session.add(model)
        else:
            self.mapper.apply_to_model(invoice, model)

        try:
            self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc, "uq_invoices_user_number", "invoices.invoice_number"):
                raise InvoiceNumberConflictError(str(invoice.invoice_number)) from exc
            raise
        return invoice

    async def find_by_id(
        self,
        invoice_id: str,
        user_id: str,
        for_update: bool = False,
    ) -> Optional[Invoice]:
        """Find a non-deleted invoice by id for its owner."""
        query = self.session.query(InvoiceModel).filter(
            InvoiceModel.id == invoice_id,
            InvoiceModel.user_id == user_id,
            InvoiceModel.deleted_at.is_(None),
        )
        if for_update:
            # Ignored by SQLite; on PostgreSQL the row stays locked until commit or rollback
            query = query.with_for_update()

        model = query.first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def list_by_user(
        self,
        user_id: str,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[str] = None,
    ) -> List[Invoice]:
        """List a user's non-deleted invoices, newest first."""
        query = self.session.query(InvoiceModel).filter(
            InvoiceModel.user_id == user_id,
            InvoiceModel.deleted_at.is_(None),
        )
        if status is not None:
            query = query.filter(InvoiceModel.status == InvoiceStatus(status))
        if customer_id is not None:
            query = query.filter(InvoiceModel.customer_id == customer_id)

        models = query.order_by(InvoiceModel.issue_date.desc(), InvoiceModel.created_at.desc()).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def get_last_invoice_number(self, user_id: str) -> Optional[InvoiceNumber]:
        """Highest invoice number issued to the user, deleted invoices included."""
        numbers = self.session.query(InvoiceModel.invoice_number).filter(
            InvoiceModel.user_id == user_id
        ).all()

        # Compared numerically so INV-10000 sorts after INV-9999
        parsed = [InvoiceNumber(number) for (number,) in numbers]
        if not parsed:
            return None
        return max(parsed, key=lambda n: n.sequence)
