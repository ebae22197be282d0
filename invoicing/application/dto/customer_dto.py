"""
Customer DTOs for the application layer.
Data Transfer Objects for customer-related operations.
"""

from typing import Optional

from pydantic import Field

from .base_dto import BaseDTO, RequestDTO, OwnedRequestDTO, ResponseDTO
from invoicing.domain.models.customer import Customer
from invoicing.domain.models.value_objects import Address


class AddressDTO(BaseDTO):
    """Postal address in requests and responses."""

    street: str = Field(..., description="Street and number")
    city: str = Field(..., description="City")
    state: str = Field(..., description="State/Province")
    postal_code: str = Field(..., description="Postal code")
    country: str = Field(..., description="Country")

    def to_domain(self) -> Address:
        return Address(
            street=self.street,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
            country=self.country,
        )

    @classmethod
    def from_domain(cls, address: Address) -> "AddressDTO":
        return cls(**address.to_dict())


# HTTP bodies

class CustomerCreateBody(RequestDTO):
    """Body of a create-customer request."""

    name: str = Field(..., description="Customer name")
    email: str = Field(..., description="Billing email, unique per user")
    address: AddressDTO
    phone_number: str = Field(..., description="Contact phone number")


class CustomerUpdateBody(RequestDTO):
    """Body of an update-customer request. Omitted fields are left unchanged."""

    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[AddressDTO] = None
    phone_number: Optional[str] = None


# Use case requests

class CreateCustomerRequestDTO(OwnedRequestDTO, CustomerCreateBody):
    """DTO for creating a customer."""


class UpdateCustomerRequestDTO(OwnedRequestDTO, CustomerUpdateBody):
    """DTO for updating a customer."""

    customer_id: str


class CustomerLookupRequestDTO(OwnedRequestDTO):
    """DTO addressing a single customer of the owner."""

    customer_id: str


class ListCustomersRequestDTO(OwnedRequestDTO):
    """DTO for listing the owner's customers."""


# Responses

class CustomerResponseDTO(ResponseDTO):
    """DTO for customer responses."""

    name: str
    email: str
    address: AddressDTO
    phone_number: str

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerResponseDTO":
        return cls(
            id=customer.id,
            name=str(customer.name),
            email=str(customer.email),
            address=AddressDTO.from_domain(customer.address),
            phone_number=str(customer.phone_number),
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )
