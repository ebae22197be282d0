"""
Unit tests for payment use cases.
"""

import asyncio

import pytest
from decimal import Decimal

from invoicing.application.dto.payment_dto import (
    RecordPaymentRequestDTO,
    ListPaymentsRequestDTO,
    GetPaymentRequestDTO,
)
from invoicing.application.use_cases.payment_use_cases import (
    RecordPaymentUseCase,
    ListPaymentsUseCase,
    GetPaymentUseCase,
)
from invoicing.domain.models.base import utc_now
from invoicing.domain.models.invoice import InvoiceStatus
from invoicing.domain.models.value_objects import Money


OWNER = "user-1"


def payment_request(invoice_id: str, amount: str, **overrides) -> RecordPaymentRequestDTO:
    values = dict(
        owner_id=OWNER,
        invoice_id=invoice_id,
        amount=Decimal(amount),
        payment_method="bank_transfer",
        payment_date=utc_now().date(),
    )
    values.update(overrides)
    return RecordPaymentRequestDTO(**values)


def ledger_total(store, invoice_id: str) -> Money:
    return Money.sum(p.amount for p in store.payments if p.invoice_id == invoice_id)


class TestRecordPayment:
    """Test cases for RecordPaymentUseCase."""

    @pytest.mark.asyncio
    async def test_partial_then_final_payment(self, uow_factory, locks, dispatcher, recorder, seed, store):
        """Test that the payment clearing the balance marks the invoice paid."""
        invoice = seed.invoice(seed.customer())

        first = await RecordPaymentUseCase(uow_factory, locks, dispatcher).execute(
            payment_request(invoice.id, "400")
        )
        assert first.data.balance == Decimal("700")
        assert first.data.invoice_status == "sent"
        assert store.invoices[invoice.id].status == InvoiceStatus.SENT

        second = await RecordPaymentUseCase(uow_factory, locks, dispatcher).execute(
            payment_request(invoice.id, "700")
        )
        assert second.data.balance == Decimal("0")
        assert second.data.invoice_status == "paid"
        assert second.data.payment.amount == Decimal("700")

        paid = store.invoices[invoice.id]
        assert paid.status == InvoiceStatus.PAID
        assert paid.paid_date is not None
        assert ledger_total(store, invoice.id) == Money("1100")
        assert recorder.event_types == ["PaymentRecorded", "PaymentRecorded", "InvoicePaid"]

    @pytest.mark.asyncio
    async def test_overpayment_is_rejected(self, uow_factory, locks, dispatcher, recorder, seed, store):
        invoice = seed.invoice(seed.customer())
        seed.payment(invoice, "1000")

        result = await RecordPaymentUseCase(uow_factory, locks, dispatcher).execute(
            payment_request(invoice.id, "100.01")
        )

        assert result.error_code == "PAYMENT_EXCEEDS_BALANCE"
        assert ledger_total(store, invoice.id) == Money("1000")
        assert store.invoices[invoice.id].status == InvoiceStatus.SENT
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_draft_invoice_cannot_be_paid(self, uow_factory, locks, seed, store):
        invoice = seed.invoice(seed.customer(), status="draft")

        result = await RecordPaymentUseCase(uow_factory, locks).execute(payment_request(invoice.id, "10"))

        assert result.error_code == "CANNOT_PAY_DRAFT_INVOICE"
        assert store.payments == []

    @pytest.mark.asyncio
    async def test_paid_invoice_has_no_balance_left(self, uow_factory, locks, seed, store):
        invoice = seed.invoice(seed.customer(), status="paid")
        seed.payment(invoice, "1100")

        result = await RecordPaymentUseCase(uow_factory, locks).execute(payment_request(invoice.id, "1"))

        assert result.error_code == "PAYMENT_EXCEEDS_BALANCE"
        assert len(store.payments) == 1

    @pytest.mark.asyncio
    async def test_invalid_payment_input(self, uow_factory, locks, seed, store):
        invoice = seed.invoice(seed.customer())
        use_case = RecordPaymentUseCase(uow_factory, locks)

        zero = await use_case.execute(payment_request(invoice.id, "0"))
        method = await use_case.execute(payment_request(invoice.id, "10", payment_method="barter"))

        assert zero.error_code == "INVALID_PAYMENT_AMOUNT"
        assert method.error_code == "INVALID_PAYMENT_METHOD"
        assert store.payments == []

    @pytest.mark.asyncio
    async def test_unknown_or_foreign_invoice(self, uow_factory, locks, seed):
        invoice = seed.invoice(seed.customer(owner_id="user-2"))
        use_case = RecordPaymentUseCase(uow_factory, locks)

        missing = await use_case.execute(payment_request("missing", "10"))
        foreign = await use_case.execute(payment_request(invoice.id, "10"))

        assert missing.error_code == "INVOICE_NOT_FOUND"
        assert foreign.error_code == "INVOICE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_concurrent_payments_cannot_overdraw(self, uow_factory, locks, seed, store):
        """
        Two payments of 700.00 race on an invoice of 1100.00.
        Exactly one must succeed and the ledger must never exceed the total.
        """
        invoice = seed.invoice(seed.customer())

        results = await asyncio.gather(
            RecordPaymentUseCase(uow_factory, locks).execute(payment_request(invoice.id, "700")),
            RecordPaymentUseCase(uow_factory, locks).execute(payment_request(invoice.id, "700")),
        )

        succeeded = [r for r in results if r.success]
        failed = [r for r in results if not r.success]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert failed[0].error_code == "PAYMENT_EXCEEDS_BALANCE"
        assert ledger_total(store, invoice.id) == Money("700")
        assert store.invoices[invoice.id].status == InvoiceStatus.SENT

    @pytest.mark.asyncio
    async def test_concurrent_payments_that_fit_both_succeed(self, uow_factory, locks, seed, store):
        invoice = seed.invoice(seed.customer())

        results = await asyncio.gather(
            RecordPaymentUseCase(uow_factory, locks).execute(payment_request(invoice.id, "550")),
            RecordPaymentUseCase(uow_factory, locks).execute(payment_request(invoice.id, "550")),
        )

        assert all(r.success for r in results)
        assert sorted(r.data.balance for r in results) == [Decimal("0"), Decimal("550")]
        assert store.invoices[invoice.id].status == InvoiceStatus.PAID


class TestListPayments:
    """Test cases for ListPaymentsUseCase."""

    @pytest.mark.asyncio
    async def test_list_payments_in_date_order(self, uow_factory, seed):
        invoice = seed.invoice(seed.customer())
        today = utc_now().date()
        later = seed.payment(invoice, "200", payment_date=today)
        earlier = seed.payment(invoice, "100", payment_date=today.replace(day=1))

        result = await ListPaymentsUseCase(uow_factory).execute(
            ListPaymentsRequestDTO(owner_id=OWNER, invoice_id=invoice.id)
        )

        if earlier.payment_date == later.payment_date:
            assert {p.id for p in result.data} == {earlier.id, later.id}
        else:
            assert [p.id for p in result.data] == [earlier.id, later.id]
        assert result.data[0].payment_method == "bank_transfer"

    @pytest.mark.asyncio
    async def test_list_payments_of_foreign_invoice(self, uow_factory, seed):
        invoice = seed.invoice(seed.customer(owner_id="user-2"))

        result = await ListPaymentsUseCase(uow_factory).execute(
            ListPaymentsRequestDTO(owner_id=OWNER, invoice_id=invoice.id)
        )

        assert result.error_code == "INVOICE_NOT_FOUND"


class TestGetPayment:
    """Test cases for GetPaymentUseCase."""

    @pytest.mark.asyncio
    async def test_get_own_payment(self, uow_factory, seed):
        invoice = seed.invoice(seed.customer())
        payment = seed.payment(invoice, "250.5")

        result = await GetPaymentUseCase(uow_factory).execute(
            GetPaymentRequestDTO(owner_id=OWNER, payment_id=payment.id)
        )

        assert result.success
        assert result.data.id == payment.id
        assert result.data.invoice_id == invoice.id
        assert result.data.amount == Decimal("250.5")

    @pytest.mark.asyncio
    async def test_payment_of_foreign_invoice_is_not_found(self, uow_factory, seed):
        """Test that another user's payment looks exactly like a missing one."""
        payment = seed.payment(seed.invoice(seed.customer(owner_id="user-2")), "100")

        foreign = await GetPaymentUseCase(uow_factory).execute(
            GetPaymentRequestDTO(owner_id=OWNER, payment_id=payment.id)
        )
        missing = await GetPaymentUseCase(uow_factory).execute(
            GetPaymentRequestDTO(owner_id=OWNER, payment_id="missing")
        )

        assert foreign.error_code == "PAYMENT_NOT_FOUND"
        assert missing.error_code == "PAYMENT_NOT_FOUND"
