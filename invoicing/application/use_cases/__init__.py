"""
Application layer use cases.
Business logic for the invoicing service.
"""

from .base_use_case import BaseUseCase, QueryUseCase, CommandUseCase, UseCaseResult
from .customer_use_cases import (
    CreateCustomerUseCase,
    UpdateCustomerUseCase,
    DeleteCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
)
from .invoice_use_cases import (
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
from .payment_use_cases import RecordPaymentUseCase, ListPaymentsUseCase, GetPaymentUseCase
from .dashboard_use_cases import GetDashboardStatisticsUseCase

__all__ = [
    # Base
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "UseCaseResult",
    # Customers
    "CreateCustomerUseCase",
    "UpdateCustomerUseCase",
    "DeleteCustomerUseCase",
    "GetCustomerUseCase",
    "ListCustomersUseCase",
    # Invoices
    "CreateInvoiceUseCase",
    "AddLineItemUseCase",
    "UpdateLineItemUseCase",
    "RemoveLineItemUseCase",
    "UpdateInvoiceUseCase",
    "MarkInvoiceAsSentUseCase",
    "DeleteInvoiceUseCase",
    "AttachPdfReferenceUseCase",
    "GetInvoiceUseCase",
    "ListInvoicesUseCase",
    # Payments
    "RecordPaymentUseCase",
    "ListPaymentsUseCase",
    "GetPaymentUseCase",
    # Dashboard
    "GetDashboardStatisticsUseCase",
]
