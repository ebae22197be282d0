"""
Payment use cases for the application layer.
Recording a payment is the only way an invoice becomes paid.
"""

import logging
from typing import List, Optional

from invoicing.application.locks import InvoiceLockRegistry
from invoicing.application.use_cases.base_use_case import (
    CommandUseCase,
    QueryUseCase,
    UnitOfWorkFactory,
)
from invoicing.application.use_cases.invoice_use_cases import load_invoice
from invoicing.application.dto.payment_dto import (
    RecordPaymentRequestDTO,
    RecordPaymentResponseDTO,
    ListPaymentsRequestDTO,
    GetPaymentRequestDTO,
    PaymentResponseDTO,
)
from invoicing.domain.events.base import EventDispatcher
from invoicing.domain.events.payment_events import PaymentRecorded
from invoicing.domain.models.base import EntityNotFoundError, InvalidStateError
from invoicing.domain.models.payment import Payment
from invoicing.domain.services.billing_service import BillingService


logger = logging.getLogger(__name__)


class RecordPaymentUseCase(CommandUseCase[RecordPaymentRequestDTO, RecordPaymentResponseDTO]):
    """
    Apply a payment to a sent invoice.

    The balance is read from the payment ledger and checked while the invoice
    is locked, so two payments on one invoice can never both pass the check
    against the same balance. The payment and any status change commit
    together or not at all.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        locks: InvoiceLockRegistry,
        dispatcher: Optional[EventDispatcher] = None,
        billing_service: Optional[BillingService] = None,
    ):
        super().__init__(uow_factory, dispatcher)
        self.locks = locks
        self.billing_service = billing_service or BillingService()

    async def _execute_command_logic(self, request: RecordPaymentRequestDTO) -> RecordPaymentResponseDTO:
        async with self.locks.hold(request.invoice_id):
            async with self.uow_factory() as uow:
                invoice = await load_invoice(uow, request.invoice_id, request.owner_id, for_update=True)
                if invoice.is_draft:
                    raise InvalidStateError(
                        "Cannot record a payment for a draft invoice",
                        "CANNOT_PAY_DRAFT_INVOICE",
                    )

                total_paid = await uow.payments.total_for_invoice(invoice.id)
                balance = self.billing_service.calculate_balance(invoice, total_paid)

                payment = Payment.create(
                    invoice_id=invoice.id,
                    amount=request.amount,
                    payment_method=request.payment_method,
                    payment_date=request.payment_date,
                    reference=request.reference,
                    notes=request.notes,
                )
                self.billing_service.validate_payment_amount(payment.amount, balance)

                await uow.payments.save(payment)

                new_balance = balance.subtract(payment.amount)
                if self.billing_service.settles(balance, payment.amount):
                    invoice.mark_as_paid()
                    await uow.invoices.save(invoice)

                await uow.commit()

        logger.info(
            f"Payment {payment.id} of {payment.amount.format()} recorded on invoice "
            f"{invoice.invoice_number}, balance {new_balance.format()}"
        )
        self.events.append(PaymentRecorded(
            payment_id=payment.id,
            invoice_id=invoice.id,
            amount=str(payment.amount),
            payment_method=payment.payment_method.value,
            payment_date=payment.payment_date,
            remaining_balance=str(new_balance),
        ))
        self._collect_events(invoice)

        return RecordPaymentResponseDTO(
            payment=PaymentResponseDTO.from_domain(payment),
            invoice_id=invoice.id,
            balance=new_balance.amount,
            invoice_status=invoice.status,
        )


class ListPaymentsUseCase(QueryUseCase[ListPaymentsRequestDTO, List[PaymentResponseDTO]]):
    """Use case for listing the payments recorded on an invoice."""

    async def _execute_business_logic(self, request: ListPaymentsRequestDTO) -> List[PaymentResponseDTO]:
        async with self.uow_factory() as uow:
            invoice = await load_invoice(uow, request.invoice_id, request.owner_id)
            payments = await uow.payments.list_by_invoice(invoice.id)
        return [PaymentResponseDTO.from_domain(payment) for payment in payments]


class GetPaymentUseCase(QueryUseCase[GetPaymentRequestDTO, PaymentResponseDTO]):
    """Use case for fetching a single payment owned through its invoice."""

    async def _execute_business_logic(self, request: GetPaymentRequestDTO) -> PaymentResponseDTO:
        async with self.uow_factory() as uow:
            payment = await uow.payments.find_by_id(request.payment_id, request.owner_id)
        if payment is None:
            raise EntityNotFoundError("Payment", request.payment_id, "PAYMENT_NOT_FOUND")
        return PaymentResponseDTO.from_domain(payment)
