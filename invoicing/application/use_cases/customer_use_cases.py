"""
Customer use cases for the application layer.
Implements business logic for customer operations.
"""

import logging
from typing import List

from invoicing.application.use_cases.base_use_case import CommandUseCase, QueryUseCase
from invoicing.application.dto.customer_dto import (
    CreateCustomerRequestDTO,
    UpdateCustomerRequestDTO,
    CustomerLookupRequestDTO,
    ListCustomersRequestDTO,
    CustomerResponseDTO,
)
from invoicing.domain.models.base import EntityNotFoundError, EmailAlreadyExistsError
from invoicing.domain.models.customer import Customer
from invoicing.domain.models.value_objects import EmailAddress
from invoicing.domain.repositories.unit_of_work import UnitOfWork


logger = logging.getLogger(__name__)


async def _load_customer(uow: UnitOfWork, customer_id: str, owner_id: str) -> Customer:
    customer = await uow.customers.find_by_id(customer_id, owner_id)
    if customer is None:
        raise EntityNotFoundError("Customer", customer_id, "CUSTOMER_NOT_FOUND")
    return customer


class CreateCustomerUseCase(CommandUseCase[CreateCustomerRequestDTO, CustomerResponseDTO]):
    """Use case for creating a new customer."""

    async def _execute_command_logic(self, request: CreateCustomerRequestDTO) -> CustomerResponseDTO:
        async with self.uow_factory() as uow:
            # Emails are unique among the owner's active customers
            email = EmailAddress(request.email)
            if await uow.customers.find_by_email(str(email), request.owner_id):
                raise EmailAlreadyExistsError(str(email))

            customer = Customer.create(
                user_id=request.owner_id,
                name=request.name,
                email=request.email,
                address=request.address.to_domain(),
                phone_number=request.phone_number,
            )
            await uow.customers.save(customer)
            await uow.commit()

        logger.info(f"Customer {customer.id} created for user {request.owner_id}")
        self._collect_events(customer)
        return CustomerResponseDTO.from_domain(customer)


class UpdateCustomerUseCase(CommandUseCase[UpdateCustomerRequestDTO, CustomerResponseDTO]):
    """Use case for updating customer details."""

    async def _execute_command_logic(self, request: UpdateCustomerRequestDTO) -> CustomerResponseDTO:
        async with self.uow_factory() as uow:
            customer = await _load_customer(uow, request.customer_id, request.owner_id)

            if request.email is not None:
                email = EmailAddress(request.email)
                if email != customer.email:
                    existing = await uow.customers.find_by_email(str(email), request.owner_id)
                    if existing and existing.id != customer.id:
                        raise EmailAlreadyExistsError(str(email))

            customer.update(
                name=request.name,
                email=request.email,
                address=request.address.to_domain() if request.address else None,
                phone_number=request.phone_number,
            )
            await uow.customers.save(customer)
            await uow.commit()

        self._collect_events(customer)
        return CustomerResponseDTO.from_domain(customer)


class DeleteCustomerUseCase(CommandUseCase[CustomerLookupRequestDTO, None]):
    """Use case for soft deleting a customer. Existing invoices keep their customer id."""

    async def _execute_command_logic(self, request: CustomerLookupRequestDTO) -> None:
        async with self.uow_factory() as uow:
            customer = await _load_customer(uow, request.customer_id, request.owner_id)
            customer.soft_delete()
            await uow.customers.save(customer)
            await uow.commit()

        logger.info(f"Customer {customer.id} deleted")
        self._collect_events(customer)


class GetCustomerUseCase(QueryUseCase[CustomerLookupRequestDTO, CustomerResponseDTO]):
    """Use case for getting a customer by ID."""

    async def _execute_business_logic(self, request: CustomerLookupRequestDTO) -> CustomerResponseDTO:
        async with self.uow_factory() as uow:
            customer = await _load_customer(uow, request.customer_id, request.owner_id)
        return CustomerResponseDTO.from_domain(customer)


class ListCustomersUseCase(QueryUseCase[ListCustomersRequestDTO, List[CustomerResponseDTO]]):
    """Use case for listing the owner's customers."""

    async def _execute_business_logic(self, request: ListCustomersRequestDTO) -> List[CustomerResponseDTO]:
        async with self.uow_factory() as uow:
            customers = await uow.customers.list_by_user(request.owner_id)
        return [CustomerResponseDTO.from_domain(customer) for customer in customers]
