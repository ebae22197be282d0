"""
SQLAlchemy unit of work.
Owns one session and the repositories bound to it for the length of a use case.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from invoicing.domain.repositories.unit_of_work import UnitOfWork
from invoicing.infrastructure.db.database import SessionLocal
from invoicing.infrastructure.repositories.customer_repository import SQLAlchemyCustomerRepository
from invoicing.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from invoicing.infrastructure.repositories.payment_repository import SQLAlchemyPaymentRepository


logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Unit of work backed by a single SQLAlchemy session and transaction."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal
        self.session: Optional[Session] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.customers = SQLAlchemyCustomerRepository(self.session)
        self.invoices = SQLAlchemyInvoiceRepository(self.session)
        self.payments = SQLAlchemyPaymentRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                logger.debug(f"Rolling back unit of work after {exc_type.__name__}")
            await self.rollback()
        finally:
            self.session.close()
            self.session = None

    async def commit(self) -> None:
        self.session.commit()

    async def rollback(self) -> None:
        self.session.rollback()


def sqlalchemy_uow_factory(session_factory: Optional[sessionmaker] = None) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Build a zero-argument factory that creates a fresh unit of work per call."""
    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)
    return factory
