"""
Invoice DTOs for the application layer.
Data Transfer Objects for invoice and line item operations.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from .base_dto import RequestDTO, OwnedRequestDTO, ResponseDTO
from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.models.line_item import LineItem
from invoicing.domain.models.value_objects import Money


# HTTP bodies

class InvoiceCreateBody(RequestDTO):
    """Body of a create-invoice request."""

    customer_id: str = Field(..., description="Customer being billed")
    issue_date: date = Field(..., description="Issue date, not in the future")
    due_date: date = Field(..., description="Due date, on or after the issue date")
    tax_rate: Decimal = Field(default=Decimal("0"), description="Tax percentage, 0 to 100")
    company_info: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None


class InvoiceUpdateBody(RequestDTO):
    """Body of an update-invoice request. Omitted fields are left unchanged."""

    notes: Optional[str] = None
    terms: Optional[str] = None
    due_date: Optional[date] = None
    tax_rate: Optional[Decimal] = None


class LineItemCreateBody(RequestDTO):
    """Body of an add-line-item request."""

    description: str
    quantity: Decimal
    unit_price: Decimal


class LineItemUpdateBody(RequestDTO):
    """Body of an update-line-item request."""

    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None


class PdfReferenceBody(RequestDTO):
    """Body of an attach-PDF request."""

    key: str = Field(..., description="Storage key of the rendered PDF")


# Use case requests

class CreateInvoiceRequestDTO(OwnedRequestDTO, InvoiceCreateBody):
    """DTO for creating a draft invoice."""


class UpdateInvoiceRequestDTO(OwnedRequestDTO, InvoiceUpdateBody):
    """DTO for updating invoice notes, terms, due date or tax rate."""

    invoice_id: str


class InvoiceLookupRequestDTO(OwnedRequestDTO):
    """DTO addressing a single invoice of the owner."""

    invoice_id: str


class AddLineItemRequestDTO(OwnedRequestDTO, LineItemCreateBody):
    """DTO for adding a line item to a draft invoice."""

    invoice_id: str


class UpdateLineItemRequestDTO(OwnedRequestDTO, LineItemUpdateBody):
    """DTO for changing a line item on a draft invoice."""

    invoice_id: str
    line_item_id: str


class RemoveLineItemRequestDTO(OwnedRequestDTO):
    """DTO for removing a line item from a draft invoice."""

    invoice_id: str
    line_item_id: str


class AttachPdfReferenceRequestDTO(OwnedRequestDTO, PdfReferenceBody):
    """DTO for recording a rendered PDF on an invoice."""

    invoice_id: str


class ListInvoicesRequestDTO(OwnedRequestDTO):
    """DTO for listing invoices with optional filters."""

    status: Optional[InvoiceStatus] = None
    customer_id: Optional[str] = None

    @field_validator("customer_id")
    @classmethod
    def blank_customer_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


# Responses

def _amount(money: Optional[Money]) -> Optional[Decimal]:
    return money.amount if money is not None else None


class LineItemResponseDTO(ResponseDTO):
    """DTO for line item responses."""

    invoice_id: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal
    position: int

    @classmethod
    def from_domain(cls, item: LineItem) -> "LineItemResponseDTO":
        return cls(
            id=item.id,
            invoice_id=item.invoice_id,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price.amount,
            amount=item.amount.amount,
            position=item.position,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class InvoiceResponseDTO(ResponseDTO):
    """
    DTO for invoice responses.

    ``amount_paid`` and ``balance`` are only filled in by operations that
    read the payment ledger.
    """

    invoice_number: str
    customer_id: str
    status: InvoiceStatus
    issue_date: date
    due_date: date
    company_info: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    tax_rate: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    amount_paid: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    is_overdue: bool = False
    sent_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    pdf_references: List[str] = Field(default_factory=list)
    line_items: List[LineItemResponseDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls,
        invoice: Invoice,
        amount_paid: Optional[Money] = None,
        balance: Optional[Money] = None,
        today: Optional[date] = None,
    ) -> "InvoiceResponseDTO":
        return cls(
            id=invoice.id,
            invoice_number=str(invoice.invoice_number),
            customer_id=invoice.customer_id,
            status=invoice.status,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            company_info=invoice.company_info,
            notes=invoice.notes,
            terms=invoice.terms,
            tax_rate=invoice.tax_rate,
            subtotal=invoice.subtotal.amount,
            tax_amount=invoice.tax_amount.amount,
            total=invoice.total.amount,
            amount_paid=_amount(amount_paid),
            balance=_amount(balance),
            is_overdue=invoice.is_overdue(today),
            sent_date=invoice.sent_date,
            paid_date=invoice.paid_date,
            pdf_references=list(invoice.pdf_references),
            line_items=[LineItemResponseDTO.from_domain(item) for item in invoice.line_items],
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )
