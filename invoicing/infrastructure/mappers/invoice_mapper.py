"""
Invoice mapper for converting between domain entities and database models.
"""

from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.models.line_item import LineItem
from invoicing.domain.models.value_objects import Money, InvoiceNumber
from invoicing.infrastructure.db.models import InvoiceModel, LineItemModel


class InvoiceMapper:
    """Maps between the Invoice aggregate and InvoiceModel / LineItemModel rows."""

    def domain_to_model(self, invoice: Invoice) -> InvoiceModel:
        """Convert a new Invoice aggregate to an InvoiceModel."""
        model = InvoiceModel(id=invoice.id, user_id=invoice.user_id, created_at=invoice.created_at)
        self.apply_to_model(invoice, model)
        return model

    def apply_to_model(self, invoice: Invoice, model: InvoiceModel) -> None:
        """
        Copy the aggregate's state onto an existing row.
        Line items are matched by id: changed rows are updated in place,
        new ones added and missing ones removed through delete-orphan.
        """
        model.customer_id = invoice.customer_id
        model.invoice_number = str(invoice.invoice_number)
        model.status = invoice.status
        model.company_info = invoice.company_info
        model.subtotal = invoice.subtotal.amount
        model.tax_rate = invoice.tax_rate
        model.tax_amount = invoice.tax_amount.amount
        model.total = invoice.total.amount
        model.issue_date = invoice.issue_date
        model.due_date = invoice.due_date
        model.sent_date = invoice.sent_date
        model.paid_date = invoice.paid_date
        model.notes = invoice.notes
        model.terms = invoice.terms
        model.pdf_references = list(invoice.pdf_references)
        model.deleted_at = invoice.deleted_at
        model.updated_at = invoice.updated_at

        existing = {item.id: item for item in model.line_items}
        rows = []
        for item in invoice.line_items:
            row = existing.get(item.id)
            if row is None:
                row = LineItemModel(id=item.id, invoice_id=invoice.id, created_at=item.created_at)
            self._apply_line_item(item, row)
            rows.append(row)
        model.line_items = rows

    def model_to_domain(self, model: InvoiceModel) -> Invoice:
        """Convert an InvoiceModel with its line items to an Invoice aggregate."""
        return Invoice(
            id=model.id,
            invoice_number=InvoiceNumber(model.invoice_number),
            user_id=model.user_id,
            customer_id=model.customer_id,
            issue_date=model.issue_date,
            due_date=model.due_date,
            company_info=model.company_info,
            status=InvoiceStatus(model.status),
            line_items=[self._line_item_model_to_domain(row) for row in model.line_items],
            tax_rate=model.tax_rate,
            notes=model.notes,
            terms=model.terms,
            sent_date=model.sent_date,
            paid_date=model.paid_date,
            pdf_references=list(model.pdf_references or []),
            deleted_at=model.deleted_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply_line_item(self, item: LineItem, row: LineItemModel) -> None:
        row.description = item.description
        row.quantity = item.quantity
        row.unit_price = item.unit_price.amount
        row.amount = item.amount.amount
        row.position = item.position
        row.updated_at = item.updated_at

    def _line_item_model_to_domain(self, row: LineItemModel) -> LineItem:
        """Convert line item model to domain."""
        return LineItem(
            id=row.id,
            invoice_id=row.invoice_id,
            description=row.description,
            quantity=row.quantity,
            unit_price=Money(row.unit_price),
            position=row.position,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
