"""
Payment and dashboard DTOs for the application layer.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from .base_dto import BaseDTO, RequestDTO, OwnedRequestDTO
from invoicing.domain.models.invoice import InvoiceStatus
from invoicing.domain.models.payment import Payment
from invoicing.domain.services.billing_service import DashboardStatistics


class PaymentCreateBody(RequestDTO):
    """Body of a record-payment request."""

    amount: Decimal = Field(..., description="Amount paid, greater than zero")
    # Checked by the domain so unknown methods get INVALID_PAYMENT_METHOD
    payment_method: str = Field(..., description="cash, check, credit_card or bank_transfer")
    payment_date: date = Field(..., description="Date the payment was received")
    reference: Optional[str] = None
    notes: Optional[str] = None


class RecordPaymentRequestDTO(OwnedRequestDTO, PaymentCreateBody):
    """DTO for recording a payment against an invoice."""

    invoice_id: str


class ListPaymentsRequestDTO(OwnedRequestDTO):
    """DTO for listing the payments of one invoice."""

    invoice_id: str


class GetPaymentRequestDTO(OwnedRequestDTO):
    """DTO for fetching one payment."""

    payment_id: str


class PaymentResponseDTO(BaseDTO):
    """DTO for payment responses."""

    id: str
    invoice_id: str
    amount: Decimal
    payment_method: str
    payment_date: date
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentResponseDTO":
        return cls(
            id=payment.id,
            invoice_id=payment.invoice_id,
            amount=payment.amount.amount,
            payment_method=payment.payment_method.value,
            payment_date=payment.payment_date,
            reference=payment.reference,
            notes=payment.notes,
            created_at=payment.created_at,
        )


class RecordPaymentResponseDTO(BaseDTO):
    """Outcome of recording a payment: the payment plus the invoice's new state."""

    payment: PaymentResponseDTO
    invoice_id: str
    balance: Decimal
    invoice_status: InvoiceStatus


class DashboardStatisticsDTO(BaseDTO):
    """Dashboard figures for the authenticated user."""

    total_invoices: int
    total_revenue: Decimal
    total_paid: Decimal
    pending_count: int
    total_pending: Decimal
    total_outstanding: Decimal
    overdue_count: int
    total_overdue: Decimal
    paid_this_month: Decimal

    @classmethod
    def from_domain(cls, stats: DashboardStatistics) -> "DashboardStatisticsDTO":
        return cls(
            total_invoices=stats.total_invoices,
            total_revenue=stats.total_revenue.amount,
            total_paid=stats.total_paid.amount,
            pending_count=stats.pending_count,
            total_pending=stats.total_pending.amount,
            total_outstanding=stats.total_outstanding.amount,
            overdue_count=stats.overdue_count,
            total_overdue=stats.total_overdue.amount,
            paid_this_month=stats.paid_this_month.amount,
        )


class DashboardRequestDTO(OwnedRequestDTO):
    """DTO for computing the owner's dashboard."""

    today: Optional[date] = None
