"""
Invoice domain model.
Aggregate root holding ordered line items, derived totals and the status state machine.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional, List
from enum import Enum
from decimal import Decimal, ROUND_HALF_UP

from invoicing.domain.models.base import (
    AggregateRoot,
    ValidationError,
    InvalidStateError,
    PreconditionFailedError,
    LimitExceededError,
    AlreadyDeletedError,
    EntityNotFoundError,
    utc_now,
)
from invoicing.domain.models.value_objects import Money, InvoiceNumber, Number, to_decimal
from invoicing.domain.models.line_item import LineItem
from invoicing.domain.events.invoice_events import (
    InvoiceCreated,
    LineItemAdded,
    LineItemUpdated,
    LineItemRemoved,
    InvoiceUpdated,
    InvoiceMarkedAsSent,
    InvoicePaid,
    InvoiceDeleted,
)


MAX_LINE_ITEMS = 100
MAX_COMPANY_INFO_LENGTH = 500
MAX_NOTES_LENGTH = 1000
MAX_TERMS_LENGTH = 500
# Same scale as the tax_rate column
TAX_RATE_PLACES = Decimal('0.0001')


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status. Transitions only go forward."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


def _validate_tax_rate(tax_rate: Number) -> Decimal:
    rate = to_decimal(tax_rate, "tax_rate", "INVALID_TAX_RATE")
    rate = rate.quantize(TAX_RATE_PLACES, rounding=ROUND_HALF_UP)
    if rate < 0 or rate > 100:
        raise ValidationError("Tax rate must be between 0 and 100", "tax_rate", "INVALID_TAX_RATE")
    return rate


def _validate_length(value: Optional[str], field_name: str, max_length: int, code: str) -> Optional[str]:
    if value is not None and len(value) > max_length:
        raise ValidationError(
            f"{field_name.replace('_', ' ').capitalize()} cannot exceed {max_length} characters",
            field_name,
            code,
        )
    return value


def _validate_due_date(issue_date: date, due_date: date) -> None:
    if due_date < issue_date:
        raise ValidationError(
            "Due date cannot be before issue date",
            "due_date",
            "DUE_DATE_BEFORE_ISSUE_DATE",
        )


@dataclass(eq=False)
class Invoice(AggregateRoot):
    """
    Invoice aggregate root.

    ``subtotal``, ``tax_amount`` and ``total`` are derived from the line items
    and the tax rate. They are written only by :meth:`_recalculate_totals`,
    which every line item and tax rate mutation goes through.

    Status moves draft -> sent -> paid. Line items may only change while the
    invoice is a draft, and only the payment application process marks an
    invoice as paid.
    """

    invoice_number: InvoiceNumber
    user_id: str
    customer_id: str
    issue_date: date
    due_date: date
    company_info: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    line_items: List[LineItem] = field(default_factory=list)
    tax_rate: Decimal = Decimal('0')
    notes: Optional[str] = None
    terms: Optional[str] = None
    sent_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    pdf_references: List[str] = field(default_factory=list)

    subtotal: Money = field(default_factory=Money.zero, init=False)
    tax_amount: Money = field(default_factory=Money.zero, init=False)
    total: Money = field(default_factory=Money.zero, init=False)

    def __post_init__(self):
        if not isinstance(self.invoice_number, InvoiceNumber):
            self.invoice_number = InvoiceNumber(self.invoice_number)
        self.status = InvoiceStatus(self.status)
        self.tax_rate = _validate_tax_rate(self.tax_rate)
        self.line_items.sort(key=lambda item: item.position)
        self._recalculate_totals()

    @classmethod
    def create(
        cls,
        invoice_number: InvoiceNumber,
        user_id: str,
        customer_id: str,
        issue_date: date,
        due_date: date,
        tax_rate: Number = Decimal('0'),
        company_info: Optional[str] = None,
        notes: Optional[str] = None,
        terms: Optional[str] = None,
    ) -> "Invoice":
        """Create a new draft invoice with no line items."""
        if not user_id:
            raise ValidationError("User ID is required", "user_id", "INVALID_USER_ID")
        if not customer_id:
            raise ValidationError("Customer ID is required", "customer_id", "INVALID_CUSTOMER_ID")

        _validate_length(company_info, "company_info", MAX_COMPANY_INFO_LENGTH, "COMPANY_INFO_TOO_LONG")
        _validate_length(notes, "notes", MAX_NOTES_LENGTH, "NOTES_TOO_LONG")
        _validate_length(terms, "terms", MAX_TERMS_LENGTH, "TERMS_TOO_LONG")

        if issue_date > utc_now().date():
            raise ValidationError("Issue date cannot be in the future", "issue_date", "ISSUE_DATE_IN_FUTURE")
        _validate_due_date(issue_date, due_date)

        invoice = cls(
            invoice_number=invoice_number,
            user_id=user_id,
            customer_id=customer_id,
            issue_date=issue_date,
            due_date=due_date,
            company_info=company_info,
            tax_rate=tax_rate,
            notes=notes,
            terms=terms,
        )
        invoice.add_event(InvoiceCreated(
            invoice_id=invoice.id,
            user_id=user_id,
            customer_id=customer_id,
            invoice_number=str(invoice.invoice_number),
        ))
        return invoice

    @property
    def is_draft(self) -> bool:
        return self.status == InvoiceStatus.DRAFT

    @property
    def is_sent(self) -> bool:
        return self.status == InvoiceStatus.SENT

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """A sent invoice is overdue once its due date has passed."""
        today = today or utc_now().date()
        return self.is_sent and self.due_date < today

    # Line items

    def add_line_item(self, description: str, quantity: Number, unit_price) -> LineItem:
        """Append a new line item to a draft invoice and recompute totals."""
        self._ensure_draft()
        if len(self.line_items) >= MAX_LINE_ITEMS:
            raise LimitExceededError(
                f"Invoice cannot have more than {MAX_LINE_ITEMS} line items",
                "MAX_LINE_ITEMS_EXCEEDED",
            )

        position = max((item.position for item in self.line_items), default=-1) + 1
        line_item = LineItem.create(
            invoice_id=self.id,
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            position=position,
        )
        self.line_items.append(line_item)
        self._recalculate_totals()
        self.mark_as_updated()

        self.add_event(LineItemAdded(
            invoice_id=self.id,
            line_item_id=line_item.id,
            description=line_item.description,
            amount=str(line_item.amount),
            invoice_total=str(self.total),
        ))
        return line_item

    def update_line_item(
        self,
        line_item_id: str,
        description: Optional[str] = None,
        quantity: Optional[Number] = None,
        unit_price=None,
    ) -> LineItem:
        """Change a line item on a draft invoice and recompute totals."""
        self._ensure_draft()
        line_item = self.get_line_item(line_item_id)
        line_item.update(description=description, quantity=quantity, unit_price=unit_price)
        self._recalculate_totals()
        self.mark_as_updated()

        self.add_event(LineItemUpdated(
            invoice_id=self.id,
            line_item_id=line_item.id,
            amount=str(line_item.amount),
            invoice_total=str(self.total),
        ))
        return line_item

    def remove_line_item(self, line_item_id: str) -> None:
        """Remove a line item from a draft invoice and recompute totals."""
        self._ensure_draft()
        line_item = self.get_line_item(line_item_id)
        self.line_items.remove(line_item)
        self._recalculate_totals()
        self.mark_as_updated()

        self.add_event(LineItemRemoved(
            invoice_id=self.id,
            line_item_id=line_item_id,
            invoice_total=str(self.total),
        ))

    def get_line_item(self, line_item_id: str) -> LineItem:
        for item in self.line_items:
            if item.id == line_item_id:
                return item
        raise EntityNotFoundError("LineItem", line_item_id, "LINE_ITEM_NOT_FOUND")

    def change_tax_rate(self, tax_rate: Number) -> None:
        """Set a new tax rate on a draft invoice and recompute totals."""
        self._ensure_draft()
        self.tax_rate = _validate_tax_rate(tax_rate)
        self._recalculate_totals()
        self.mark_as_updated()

    def _recalculate_totals(self) -> None:
        """Recompute subtotal, tax amount and total as one unit."""
        self.subtotal = Money.sum(item.amount for item in self.line_items)
        self.tax_amount = self.subtotal.multiply(self.tax_rate / Decimal(100))
        self.total = self.subtotal.add(self.tax_amount)

    # Status transitions

    def mark_as_sent(self) -> None:
        """Transition draft -> sent. Requires at least one line item."""
        if not self.is_draft:
            raise InvalidStateError(
                f"Cannot mark a {self.status.value} invoice as sent",
                "INVALID_STATE_TRANSITION",
            )
        if not self.line_items:
            raise PreconditionFailedError(
                "Invoice must have at least one line item before it is sent",
                "INVOICE_MUST_HAVE_LINE_ITEMS",
            )

        self.status = InvoiceStatus.SENT
        self.sent_date = utc_now()
        self.mark_as_updated()

        self.add_event(InvoiceMarkedAsSent(
            invoice_id=self.id,
            invoice_number=str(self.invoice_number),
            customer_id=self.customer_id,
            total=str(self.total),
        ))

    def mark_as_paid(self) -> None:
        """Transition sent -> paid. Driven by the payment application process only."""
        if not self.is_sent:
            raise InvalidStateError(
                f"Cannot mark a {self.status.value} invoice as paid",
                "INVALID_STATE_TRANSITION",
            )

        self.status = InvoiceStatus.PAID
        self.paid_date = utc_now()
        self.mark_as_updated()

        self.add_event(InvoicePaid(
            invoice_id=self.id,
            invoice_number=str(self.invoice_number),
            total=str(self.total),
            paid_date=self.paid_date.date(),
        ))

    # Other mutations

    def update(
        self,
        notes: Optional[str] = None,
        terms: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> None:
        """Update notes, terms or due date. Allowed in any status until deleted."""
        if self.is_deleted:
            raise InvalidStateError("Cannot update a deleted invoice", "CANNOT_UPDATE_DELETED_INVOICE")

        _validate_length(notes, "notes", MAX_NOTES_LENGTH, "NOTES_TOO_LONG")
        _validate_length(terms, "terms", MAX_TERMS_LENGTH, "TERMS_TOO_LONG")
        if due_date is not None:
            _validate_due_date(self.issue_date, due_date)

        changed = []
        if notes is not None:
            self.notes = notes
            changed.append("notes")
        if terms is not None:
            self.terms = terms
            changed.append("terms")
        if due_date is not None:
            self.due_date = due_date
            changed.append("due_date")

        self.mark_as_updated()
        if changed:
            self.add_event(InvoiceUpdated(invoice_id=self.id, changed_fields=changed))

    def soft_delete(self) -> None:
        """Soft delete a draft invoice."""
        if not self.is_draft:
            raise InvalidStateError(
                "Only draft invoices can be deleted",
                "CANNOT_DELETE_NON_DRAFT_INVOICE",
            )
        if self.is_deleted:
            raise AlreadyDeletedError("Invoice is already deleted")

        self.deleted_at = utc_now()
        self.mark_as_updated()
        self.add_event(InvoiceDeleted(invoice_id=self.id, invoice_number=str(self.invoice_number)))

    def add_pdf_reference(self, key: str) -> None:
        """Record the storage key of a rendered PDF for this invoice."""
        key = (key or "").strip()
        if not key:
            raise ValidationError("PDF reference is required", "key", "PDF_REFERENCE_REQUIRED")
        if key not in self.pdf_references:
            self.pdf_references.append(key)
            self.mark_as_updated()

    def get_balance(self, total_paid: Money) -> Money:
        """
        Outstanding amount given what has been paid so far.

        Not clamped: a negative result means payments exceed the total, and
        callers must surface it rather than floor it.
        """
        return self.total.subtract(total_paid)

    def _ensure_draft(self) -> None:
        if not self.is_draft:
            raise InvalidStateError(
                f"Cannot modify a {self.status.value} invoice",
                "CANNOT_MODIFY_NON_DRAFT_INVOICE",
            )
