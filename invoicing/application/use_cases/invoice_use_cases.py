"""
Invoice use cases for the application layer.
Implements invoice creation, line item editing, status changes and queries.
"""

import logging
from abc import abstractmethod
from typing import List, Optional

from invoicing.application.locks import InvoiceLockRegistry
from invoicing.application.use_cases.base_use_case import (
    CommandUseCase,
    QueryUseCase,
    UnitOfWorkFactory,
)
from invoicing.application.dto.invoice_dto import (
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
from invoicing.config import settings
from invoicing.domain.events.base import EventDispatcher
from invoicing.domain.models.base import EntityNotFoundError, ValidationError
from invoicing.domain.models.invoice import Invoice
from invoicing.domain.repositories.unit_of_work import UnitOfWork
from invoicing.domain.services.billing_service import BillingService
from invoicing.domain.services.numbering_service import NumberingService


logger = logging.getLogger(__name__)


async def load_invoice(uow: UnitOfWork, invoice_id: str, owner_id: str, for_update: bool = False) -> Invoice:
    """Fetch an invoice of the owner or raise INVOICE_NOT_FOUND."""
    invoice = await uow.invoices.find_by_id(invoice_id, owner_id, for_update=for_update)
    if invoice is None:
        raise EntityNotFoundError("Invoice", invoice_id, "INVOICE_NOT_FOUND")
    return invoice


class CreateInvoiceUseCase(CommandUseCase[CreateInvoiceRequestDTO, InvoiceResponseDTO]):
    """Use case for creating a draft invoice with the owner's next number."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        locks: InvoiceLockRegistry,
        dispatcher: Optional[EventDispatcher] = None,
        numbering_service: Optional[NumberingService] = None,
    ):
        super().__init__(uow_factory, dispatcher)
        self.locks = locks
        self.numbering_service = numbering_service or NumberingService(settings.invoice_number_start)

    async def _execute_command_logic(self, request: CreateInvoiceRequestDTO) -> InvoiceResponseDTO:
        # Numbers are allocated one at a time per owner
        async with self.locks.hold(f"numbering:{request.owner_id}"):
            async with self.uow_factory() as uow:
                customer = await uow.customers.find_by_id(request.customer_id, request.owner_id)
                if customer is None:
                    raise ValidationError(
                        f"Customer {request.customer_id} does not exist",
                        "customer_id",
                        "INVALID_CUSTOMER_ID",
                    )

                last_number = await uow.invoices.get_last_invoice_number(request.owner_id)
                number = self.numbering_service.next_invoice_number(last_number)

                invoice = Invoice.create(
                    invoice_number=number,
                    user_id=request.owner_id,
                    customer_id=customer.id,
                    issue_date=request.issue_date,
                    due_date=request.due_date,
                    tax_rate=request.tax_rate,
                    company_info=request.company_info,
                    notes=request.notes,
                    terms=request.terms,
                )
                await uow.invoices.save(invoice)
                await uow.commit()

        logger.info(f"Invoice {invoice.invoice_number} created for user {request.owner_id}")
        self._collect_events(invoice)
        return InvoiceResponseDTO.from_domain(invoice)


class InvoiceMutationUseCase(CommandUseCase):
    """
    Base for commands that change one existing invoice.

    The invoice is loaded with a row lock while holding its in-process lock,
    changed by :meth:`_mutate`, saved and committed.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        locks: InvoiceLockRegistry,
        dispatcher: Optional[EventDispatcher] = None,
    ):
        super().__init__(uow_factory, dispatcher)
        self.locks = locks

    async def _execute_command_logic(self, request):
        async with self.locks.hold(request.invoice_id):
            async with self.uow_factory() as uow:
                invoice = await load_invoice(uow, request.invoice_id, request.owner_id, for_update=True)
                result = self._mutate(invoice, request)
                await uow.invoices.save(invoice)
                await uow.commit()

        self._collect_events(invoice)
        return result

    @abstractmethod
    def _mutate(self, invoice: Invoice, request):
        """Apply the change to the loaded invoice and build the response."""
        pass


class AddLineItemUseCase(InvoiceMutationUseCase):
    """Use case for adding a line item to a draft invoice."""

    def _mutate(self, invoice: Invoice, request: AddLineItemRequestDTO) -> LineItemResponseDTO:
        line_item = invoice.add_line_item(
            description=request.description,
            quantity=request.quantity,
            unit_price=request.unit_price,
        )
        return LineItemResponseDTO.from_domain(line_item)


class UpdateLineItemUseCase(InvoiceMutationUseCase):
    """Use case for changing a line item on a draft invoice."""

    def _mutate(self, invoice: Invoice, request: UpdateLineItemRequestDTO) -> LineItemResponseDTO:
        line_item = invoice.update_line_item(
            request.line_item_id,
            description=request.description,
            quantity=request.quantity,
            unit_price=request.unit_price,
        )
        return LineItemResponseDTO.from_domain(line_item)


class RemoveLineItemUseCase(InvoiceMutationUseCase):
    """Use case for removing a line item from a draft invoice."""

    def _mutate(self, invoice: Invoice, request: RemoveLineItemRequestDTO) -> None:
        invoice.remove_line_item(request.line_item_id)


class UpdateInvoiceUseCase(InvoiceMutationUseCase):
    """
    Use case for updating notes, terms, due date and tax rate.
    The tax rate can only change while the invoice is a draft.
    """

    def _mutate(self, invoice: Invoice, request: UpdateInvoiceRequestDTO) -> InvoiceResponseDTO:
        if request.tax_rate is not None:
            invoice.change_tax_rate(request.tax_rate)
        invoice.update(notes=request.notes, terms=request.terms, due_date=request.due_date)
        return InvoiceResponseDTO.from_domain(invoice)


class MarkInvoiceAsSentUseCase(InvoiceMutationUseCase):
    """Use case for sending a draft invoice."""

    def _mutate(self, invoice: Invoice, request: InvoiceLookupRequestDTO) -> InvoiceResponseDTO:
        invoice.mark_as_sent()
        logger.info(f"Invoice {invoice.invoice_number} marked as sent")
        return InvoiceResponseDTO.from_domain(invoice)


class DeleteInvoiceUseCase(InvoiceMutationUseCase):
    """Use case for soft deleting a draft invoice."""

    def _mutate(self, invoice: Invoice, request: InvoiceLookupRequestDTO) -> None:
        invoice.soft_delete()
        logger.info(f"Invoice {invoice.invoice_number} deleted")


class AttachPdfReferenceUseCase(InvoiceMutationUseCase):
    """Use case for recording the storage key of a rendered PDF."""

    def _mutate(self, invoice: Invoice, request: AttachPdfReferenceRequestDTO) -> InvoiceResponseDTO:
        invoice.add_pdf_reference(request.key)
        return InvoiceResponseDTO.from_domain(invoice)


class GetInvoiceUseCase(QueryUseCase[InvoiceLookupRequestDTO, InvoiceResponseDTO]):
    """Use case for reading an invoice with its live balance."""

    def __init__(self, uow_factory: UnitOfWorkFactory, billing_service: Optional[BillingService] = None):
        super().__init__(uow_factory)
        self.billing_service = billing_service or BillingService()

    async def _execute_business_logic(self, request: InvoiceLookupRequestDTO) -> InvoiceResponseDTO:
        async with self.uow_factory() as uow:
            invoice = await load_invoice(uow, request.invoice_id, request.owner_id)
            total_paid = await uow.payments.total_for_invoice(invoice.id)

        balance = self.billing_service.calculate_balance(invoice, total_paid)
        return InvoiceResponseDTO.from_domain(invoice, amount_paid=total_paid, balance=balance)


class ListInvoicesUseCase(QueryUseCase[ListInvoicesRequestDTO, List[InvoiceResponseDTO]]):
    """Use case for listing the owner's invoices with their balances."""

    async def _execute_business_logic(self, request: ListInvoicesRequestDTO) -> List[InvoiceResponseDTO]:
        responses = []
        async with self.uow_factory() as uow:
            invoices = await uow.invoices.list_by_user(
                request.owner_id,
                status=request.status,
                customer_id=request.customer_id,
            )
            for invoice in invoices:
                total_paid = await uow.payments.total_for_invoice(invoice.id)
                balance = invoice.get_balance(total_paid)
                if balance.is_negative():
                    # Reported as is; GetInvoice raises for the same state
                    logger.error(f"Invoice {invoice.id} has a negative balance of {balance}")
                responses.append(
                    InvoiceResponseDTO.from_domain(invoice, amount_paid=total_paid, balance=balance)
                )
        return responses
