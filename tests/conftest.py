"""
Shared test fixtures.

Unit tests run against an in-memory unit of work that keeps committed state
in a FakeStore and stages writes until commit, so rollbacks behave like a
real transaction. Integration tests use SQLite through SQLAlchemy.
"""

import asyncio
import copy
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from invoicing.application.locks import InvoiceLockRegistry
from invoicing.domain.events.base import DomainEvent, EventDispatcher, EventHandler
from invoicing.domain.models.base import utc_now
from invoicing.domain.models.customer import Customer
from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.models.payment import Payment
from invoicing.domain.models.value_objects import Address, InvoiceNumber, Money
from invoicing.domain.repositories import (
    CustomerRepository,
    InvoiceRepository,
    PaymentRepository,
    UnitOfWork,
)
from invoicing.infrastructure.auth.jwt_handler import JWTHandler
from invoicing.infrastructure.db.database import (
    create_db_engine,
    create_session_factory,
    create_all_tables,
)
from invoicing.infrastructure.db.unit_of_work import sqlalchemy_uow_factory


OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"


def _detached(entity):
    """Copy an aggregate without its pending events, like a fresh load."""
    clone = copy.deepcopy(entity)
    if hasattr(clone, "_events"):
        clone._events = []
    return clone


class FakeStore:
    """Committed state shared by every fake unit of work."""

    def __init__(self):
        self.customers: Dict[str, Customer] = {}
        self.invoices: Dict[str, Invoice] = {}
        self.payments: List[Payment] = []
        self.commits = 0


class FakeCustomerRepository(CustomerRepository):

    def __init__(self, uow: "FakeUnitOfWork"):
        self.uow = uow

    def _all(self) -> Dict[str, Customer]:
        return {**self.uow.store.customers, **self.uow.pending_customers}

    async def save(self, customer: Customer) -> Customer:
        self.uow.pending_customers[customer.id] = _detached(customer)
        return customer

    async def find_by_id(self, customer_id: str, user_id: str) -> Optional[Customer]:
        customer = self._all().get(customer_id)
        if customer is None or customer.user_id != user_id or customer.is_deleted:
            return None
        return _detached(customer)

    async def find_by_email(self, email: str, user_id: str) -> Optional[Customer]:
        for customer in self._all().values():
            if customer.user_id == user_id and not customer.is_deleted and str(customer.email) == email.lower():
                return _detached(customer)
        return None

    async def list_by_user(self, user_id: str) -> List[Customer]:
        customers = [
            c for c in self._all().values()
            if c.user_id == user_id and not c.is_deleted
        ]
        return [_detached(c) for c in sorted(customers, key=lambda c: str(c.name))]


class FakeInvoiceRepository(InvoiceRepository):

    def __init__(self, uow: "FakeUnitOfWork"):
        self.uow = uow

    def _all(self) -> Dict[str, Invoice]:
        return {**self.uow.store.invoices, **self.uow.pending_invoices}

    async def save(self, invoice: Invoice) -> Invoice:
        self.uow.pending_invoices[invoice.id] = _detached(invoice)
        return invoice

    async def find_by_id(self, invoice_id: str, user_id: str, for_update: bool = False) -> Optional[Invoice]:
        invoice = self._all().get(invoice_id)
        if invoice is None or invoice.user_id != user_id or invoice.is_deleted:
            return None
        return _detached(invoice)

    async def list_by_user(self, user_id: str, status=None, customer_id=None) -> List[Invoice]:
        invoices = [
            inv for inv in self._all().values()
            if inv.user_id == user_id and not inv.is_deleted
        ]
        if status is not None:
            invoices = [inv for inv in invoices if inv.status == InvoiceStatus(status)]
        if customer_id is not None:
            invoices = [inv for inv in invoices if inv.customer_id == customer_id]
        invoices.sort(key=lambda inv: (inv.issue_date, inv.created_at), reverse=True)
        return [_detached(inv) for inv in invoices]

    async def get_last_invoice_number(self, user_id: str) -> Optional[InvoiceNumber]:
        numbers = [inv.invoice_number for inv in self._all().values() if inv.user_id == user_id]
        if not numbers:
            return None
        return max(numbers, key=lambda number: number.sequence)


class FakePaymentRepository(PaymentRepository):

    def __init__(self, uow: "FakeUnitOfWork"):
        self.uow = uow

    def _all(self) -> List[Payment]:
        return self.uow.store.payments + self.uow.pending_payments

    async def save(self, payment: Payment) -> Payment:
        self.uow.pending_payments.append(payment)
        return payment

    async def total_for_invoice(self, invoice_id: str) -> Money:
        # Yield so concurrent use cases interleave between the read and the write
        await asyncio.sleep(0)
        return Money.sum(p.amount for p in self._all() if p.invoice_id == invoice_id)

    async def find_by_id(self, payment_id: str, user_id: str) -> Optional[Payment]:
        return next((p for p in await self.list_by_user(user_id) if p.id == payment_id), None)

    async def list_by_invoice(self, invoice_id: str) -> List[Payment]:
        payments = [p for p in self._all() if p.invoice_id == invoice_id]
        return sorted(payments, key=lambda p: (p.payment_date, p.created_at))

    async def list_by_user(self, user_id: str) -> List[Payment]:
        invoices = {**self.uow.store.invoices, **self.uow.pending_invoices}
        return [
            p for p in self._all()
            if p.invoice_id in invoices and invoices[p.invoice_id].user_id == user_id
        ]


class FakeUnitOfWork(UnitOfWork):
    """In-memory unit of work. Writes are staged until commit."""

    def __init__(self, store: FakeStore):
        self.store = store
        self.pending_customers: Dict[str, Customer] = {}
        self.pending_invoices: Dict[str, Invoice] = {}
        self.pending_payments: List[Payment] = []
        self.customers = FakeCustomerRepository(self)
        self.invoices = FakeInvoiceRepository(self)
        self.payments = FakePaymentRepository(self)
        self.committed = False

    async def commit(self) -> None:
        self.store.customers.update(self.pending_customers)
        self.store.invoices.update(self.pending_invoices)
        self.store.payments.extend(self.pending_payments)
        self.store.commits += 1
        self.committed = True
        self._clear()

    async def rollback(self) -> None:
        self._clear()

    def _clear(self) -> None:
        self.pending_customers = {}
        self.pending_invoices = {}
        self.pending_payments = []


class RecordingHandler(EventHandler):
    """Keeps every event it receives."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    async def handle(self, event: DomainEvent) -> None:
        self.events.append(event)

    @property
    def event_types(self) -> List[str]:
        return [event.event_type for event in self.events]


class Seeder:
    """Writes committed fixtures straight into a FakeStore."""

    def __init__(self, store: FakeStore):
        self.store = store
        self._next_number = 1000

    def customer(self, owner_id: str = OWNER_ID, email: str = "billing@acme.test", name: str = "Acme Corp") -> Customer:
        customer = Customer.create(
            user_id=owner_id,
            name=name,
            email=email,
            address=make_address(),
            phone_number="+1 555 0100",
        )
        customer.pull_events()
        self.store.customers[customer.id] = customer
        return customer

    def invoice(
        self,
        customer: Customer,
        items=(("Consulting", "10", "100.00"),),
        tax_rate="10",
        status: str = "sent",
        issue_date: Optional[date] = None,
        due_date: Optional[date] = None,
    ) -> Invoice:
        today = utc_now().date()
        issue_date = issue_date or today
        invoice = Invoice.create(
            invoice_number=InvoiceNumber.from_sequence(self._next_number),
            user_id=customer.user_id,
            customer_id=customer.id,
            issue_date=issue_date,
            due_date=due_date or issue_date + timedelta(days=30),
            tax_rate=Decimal(tax_rate),
        )
        self._next_number += 1
        for description, quantity, unit_price in items:
            invoice.add_line_item(description, Decimal(quantity), Decimal(unit_price))
        if status in ("sent", "paid"):
            invoice.mark_as_sent()
        if status == "paid":
            invoice.mark_as_paid()
        invoice.pull_events()
        self.store.invoices[invoice.id] = invoice
        return invoice

    def payment(self, invoice: Invoice, amount: str, payment_date: Optional[date] = None) -> Payment:
        payment = Payment.create(
            invoice_id=invoice.id,
            amount=Decimal(amount),
            payment_method="bank_transfer",
            payment_date=payment_date or utc_now().date(),
        )
        self.store.payments.append(payment)
        return payment


def make_address(**overrides) -> Address:
    values = dict(
        street="1 Main St",
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="US",
    )
    values.update(overrides)
    return Address(**values)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def uow_factory(store):
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def seed(store):
    return Seeder(store)


@pytest.fixture
def locks():
    return InvoiceLockRegistry()


@pytest.fixture
def recorder():
    return RecordingHandler()


@pytest.fixture
def dispatcher(recorder):
    dispatcher = EventDispatcher()
    dispatcher.register_global_handler(recorder)
    return dispatcher


@pytest.fixture
def address():
    return make_address()


# SQLAlchemy

@pytest.fixture
def db_engine():
    engine = create_db_engine("sqlite://")
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def sql_uow_factory(session_factory):
    return sqlalchemy_uow_factory(session_factory)


# HTTP API

@pytest.fixture
def client(sql_uow_factory):
    from invoicing.main import create_application

    app = create_application(uow_factory=sql_uow_factory, event_dispatcher=EventDispatcher())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    token = JWTHandler().create_token(OWNER_ID)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    token = JWTHandler().create_token(OTHER_OWNER_ID)
    return {"Authorization": f"Bearer {token}"}
