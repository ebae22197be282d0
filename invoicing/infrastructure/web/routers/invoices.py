"""
Invoice router.
Handles invoices, their line items and status changes.
"""

from typing import List, Optional
from fastapi import APIRouter, Query, status

from invoicing.infrastructure.auth.dependencies import CurrentUserId
from invoicing.infrastructure.web.dependencies import UowFactory, Dispatcher, InvoiceLocks
from invoicing.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    AddLineItemUseCase,
    UpdateLineItemUseCase,
    RemoveLineItemUseCase,
    UpdateInvoiceUseCase,
    MarkInvoiceAsSentUseCase,
    DeleteInvoiceUseCase,
    AttachPdfReferenceUseCase,
    GetInvoiceUseCase,
    ListInvoicesUseCase,
)
from invoicing.application.dto.invoice_dto import (
    InvoiceCreateBody,
    InvoiceUpdateBody,
    LineItemCreateBody,
    LineItemUpdateBody,
    PdfReferenceBody,
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    InvoiceLookupRequestDTO,
    AddLineItemRequestDTO,
    UpdateLineItemRequestDTO,
    RemoveLineItemRequestDTO,
    AttachPdfReferenceRequestDTO,
    ListInvoicesRequestDTO,
    InvoiceResponseDTO,
    LineItemResponseDTO,
)
from invoicing.domain.models.invoice import InvoiceStatus


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def create_invoice(
    body: InvoiceCreateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """
    Create a draft invoice for one of your customers.

    - **customer_id**: Customer being billed
    - **issue_date** / **due_date**: Due date cannot precede the issue date
    - **tax_rate**: Percentage between 0 and 100
    """
    request = CreateInvoiceRequestDTO(owner_id=user_id, **body.model_dump())
    result = await CreateInvoiceUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


@router.get("", response_model=List[InvoiceResponseDTO])
async def list_invoices(
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    status: Optional[InvoiceStatus] = Query(None, description="Filter by status"),
    customer_id: Optional[str] = Query(None, description="Filter by customer"),
):
    """List your invoices with their current balances, newest first."""
    request = ListInvoicesRequestDTO(owner_id=user_id, status=status, customer_id=customer_id)
    result = await ListInvoicesUseCase(uow_factory).execute(request)
    return result.unwrap()


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO)
async def get_invoice(invoice_id: str, user_id: CurrentUserId, uow_factory: UowFactory):
    """Get an invoice with the amount paid and its live balance."""
    request = InvoiceLookupRequestDTO(owner_id=user_id, invoice_id=invoice_id)
    result = await GetInvoiceUseCase(uow_factory).execute(request)
    return result.unwrap()


@router.patch("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: str,
    body: InvoiceUpdateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Update notes, terms, due date or (drafts only) tax rate."""
    request = UpdateInvoiceRequestDTO(
        owner_id=user_id,
        invoice_id=invoice_id,
        **body.model_dump(exclude_unset=True),
    )
    result = await UpdateInvoiceUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Delete a draft invoice."""
    request = InvoiceLookupRequestDTO(owner_id=user_id, invoice_id=invoice_id)
    result = await DeleteInvoiceUseCase(uow_factory, locks, dispatcher).execute(request)
    result.unwrap()


@router.post("/{invoice_id}/send", response_model=InvoiceResponseDTO)
async def send_invoice(
    invoice_id: str,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Mark a draft invoice as sent. It must have at least one line item."""
    request = InvoiceLookupRequestDTO(owner_id=user_id, invoice_id=invoice_id)
    result = await MarkInvoiceAsSentUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


@router.post("/{invoice_id}/pdf-references", response_model=InvoiceResponseDTO)
async def attach_pdf_reference(
    invoice_id: str,
    body: PdfReferenceBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Record the storage key of a rendered PDF."""
    request = AttachPdfReferenceRequestDTO(owner_id=user_id, invoice_id=invoice_id, key=body.key)
    result = await AttachPdfReferenceUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


# Line items

@router.post(
    "/{invoice_id}/line-items",
    status_code=status.HTTP_201_CREATED,
    response_model=LineItemResponseDTO,
)
async def add_line_item(
    invoice_id: str,
    body: LineItemCreateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Add a line item to a draft invoice."""
    request = AddLineItemRequestDTO(owner_id=user_id, invoice_id=invoice_id, **body.model_dump())
    result = await AddLineItemUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


@router.patch("/{invoice_id}/line-items/{line_item_id}", response_model=LineItemResponseDTO)
async def update_line_item(
    invoice_id: str,
    line_item_id: str,
    body: LineItemUpdateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Change a line item on a draft invoice."""
    request = UpdateLineItemRequestDTO(
        owner_id=user_id,
        invoice_id=invoice_id,
        line_item_id=line_item_id,
        **body.model_dump(exclude_unset=True),
    )
    result = await UpdateLineItemUseCase(uow_factory, locks, dispatcher).execute(request)
    return result.unwrap()


@router.delete("/{invoice_id}/line-items/{line_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_line_item(
    invoice_id: str,
    line_item_id: str,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
    locks: InvoiceLocks,
):
    """Remove a line item from a draft invoice."""
    request = RemoveLineItemRequestDTO(owner_id=user_id, invoice_id=invoice_id, line_item_id=line_item_id)
    result = await RemoveLineItemUseCase(uow_factory, locks, dispatcher).execute(request)
    result.unwrap()
