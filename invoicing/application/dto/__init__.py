"""
Data Transfer Objects for the application layer.
"""

from .base_dto import BaseDTO, RequestDTO, OwnedRequestDTO, ResponseDTO
from .customer_dto import (
    AddressDTO,
    CustomerCreateBody,
    CustomerUpdateBody,
    CreateCustomerRequestDTO,
    UpdateCustomerRequestDTO,
    CustomerLookupRequestDTO,
    ListCustomersRequestDTO,
    CustomerResponseDTO,
)
from .invoice_dto import (
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
    LineItemResponseDTO,
    InvoiceResponseDTO,
)
from .payment_dto import (
    PaymentCreateBody,
    RecordPaymentRequestDTO,
    ListPaymentsRequestDTO,
    GetPaymentRequestDTO,
    PaymentResponseDTO,
    RecordPaymentResponseDTO,
    DashboardRequestDTO,
    DashboardStatisticsDTO,
)
