"""
Payment router.
Payments are recorded and listed under the invoice they settle,
and fetched by id at the top level.
"""

from typing import List
from fastapi import APIRouter, status

from invoicing.infrastructure.auth.dependencies import CurrentUserId
from invoicing.infrastructure.web.dependencies import UowFactory, Dispatcher, InvoiceLocks
from invoicing.application.use_cases.payment_use_cases import (
    RecordPaymentUseCase,
    ListPaymentsUseCase,
    GetPaymentUseCase,
)
from invoicing.application.dto.payment_dto import (
    PaymentCreateBody,
    RecordPaymentRequestDTO,
    ListPaymentsRequestDTO,
    GetPaymentRequestDTO,
    PaymentResponseDTO,
    RecordPaymentResponseDTO,
)


router = APIRouter()
lookup_router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RecordPaymentResponseDTO)
async def record_payment(
    invoice_id: str,
    body: PaymentCreateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """
    Record a payment against a sent invoice.

    - **amount**: Greater than zero and no more than the outstanding balance
    - **payment_method**: cash, check, credit_card or bank_transfer
    - **payment_date**: Not in the future

    The invoice becomes paid when its balance reaches exactly zero.
    """
    request = RecordPaymentRequestDTO(owner_id=user_id, invoice_id=invoice_id, **body.model_dump())
    result = await RecordPaymentUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


@router.get("", response_model=List[PaymentResponseDTO])
async def list_payments(invoice_id: str, user_id: CurrentUserId, uow_factory: UowFactory):
    """List the payments recorded on an invoice, oldest first."""
    request = ListPaymentsRequestDTO(owner_id=user_id, invoice_id=invoice_id)
    result = await ListPaymentsUseCase(uow_factory).execute(request)
    return result.unwrap()


@lookup_router.get("/{payment_id}", response_model=PaymentResponseDTO)
async def get_payment(payment_id: str, user_id: CurrentUserId, uow_factory: UowFactory):
    """Get a payment recorded on one of your invoices."""
    request = GetPaymentRequestDTO(owner_id=user_id, payment_id=payment_id)
    result = await GetPaymentUseCase(uow_factory).execute(request)
    return result.unwrap()
