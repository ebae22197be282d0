"""
Customer management router.
Handles CRUD operations for customer resources.
"""

from typing import List
from fastapi import APIRouter, status

from invoicing.infrastructure.auth.dependencies import CurrentUserId
from invoicing.infrastructure.web.dependencies import UowFactory, Dispatcher
from invoicing.application.use_cases.customer_use_cases import (
    CreateCustomerUseCase,
    UpdateCustomerUseCase,
    DeleteCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
)
from invoicing.application.dto.customer_dto import (
    CustomerCreateBody,
    CustomerUpdateBody,
    CreateCustomerRequestDTO,
    UpdateCustomerRequestDTO,
    CustomerLookupRequestDTO,
    ListCustomersRequestDTO,
    CustomerResponseDTO,
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CustomerResponseDTO)
async def create_customer(
    body: CustomerCreateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
):
    """
    Create a new customer.

    - **name**: Customer name (required)
    - **email**: Billing email, unique among your customers
    - **address**: Street, city, state, postal code and country
    - **phone_number**: Contact phone number
    """
    request = CreateCustomerRequestDTO(owner_id=user_id, **body.model_dump())
    result = await CreateCustomerUseCase(uow_factory, dispatcher).execute(request)
    return result.unwrap()


@router.get("", response_model=List[CustomerResponseDTO])
async def list_customers(user_id: CurrentUserId, uow_factory: UowFactory):
    """List your customers."""
    result = await ListCustomersUseCase(uow_factory).execute(ListCustomersRequestDTO(owner_id=user_id))
    return result.unwrap()


@router.get("/{customer_id}", response_model=CustomerResponseDTO)
async def get_customer(customer_id: str, user_id: CurrentUserId, uow_factory: UowFactory):
    """Get a customer by ID."""
    request = CustomerLookupRequestDTO(owner_id=user_id, customer_id=customer_id)
    result = await GetCustomerUseCase(uow_factory).execute(request)
    return result.unwrap()


@router.patch("/{customer_id}", response_model=CustomerResponseDTO)
async def update_customer(
    customer_id: str,
    body: CustomerUpdateBody,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
):
    """Update customer details. Fields left out are not changed."""
    request = UpdateCustomerRequestDTO(
        owner_id=user_id,
        customer_id=customer_id,
        **body.model_dump(exclude_unset=True),
    )
    result = await UpdateCustomerUseCase(uow_factory, dispatcher).execute(request)
    return result.unwrap()


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    user_id: CurrentUserId,
    uow_factory: UowFactory,
    dispatcher: Dispatcher,
):
    """Delete a customer. Invoices already issued to them are kept."""
    request = CustomerLookupRequestDTO(owner_id=user_id, customer_id=customer_id)
    result = await DeleteCustomerUseCase(uow_factory, dispatcher).execute(request)
    result.unwrap()
