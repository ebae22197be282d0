"""
Unit tests for customer use cases.
"""

import pytest

from invoicing.application.dto.customer_dto import (
    AddressDTO,
    CreateCustomerRequestDTO,
    UpdateCustomerRequestDTO,
    CustomerLookupRequestDTO,
    ListCustomersRequestDTO,
)
from invoicing.application.use_cases.customer_use_cases import (
    CreateCustomerUseCase,
    UpdateCustomerUseCase,
    DeleteCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
)


OWNER = "user-1"


def create_request(**overrides) -> CreateCustomerRequestDTO:
    values = dict(
        owner_id=OWNER,
        name="Globex",
        email="Accounts@Globex.test",
        address=AddressDTO(
            street="10 Elm St",
            city="Shelbyville",
            state="IL",
            postal_code="62565",
            country="US",
        ),
        phone_number="555-0199",
    )
    values.update(overrides)
    return CreateCustomerRequestDTO(**values)


class TestCreateCustomer:
    """Test cases for CreateCustomerUseCase."""

    @pytest.mark.asyncio
    async def test_create_customer(self, uow_factory, dispatcher, recorder, store):
        result = await CreateCustomerUseCase(uow_factory, dispatcher).execute(create_request())

        assert result.success
        assert result.data.email == "accounts@globex.test"
        assert result.data.address.city == "Shelbyville"
        assert result.data.id in store.customers
        assert recorder.event_types == ["CustomerCreated"]

    @pytest.mark.asyncio
    async def test_duplicate_email_for_same_owner(self, uow_factory, seed, store):
        """Test that emails are unique per owner, case insensitively."""
        seed.customer(email="accounts@globex.test")

        result = await CreateCustomerUseCase(uow_factory).execute(create_request())

        assert not result.success
        assert result.error_code == "EMAIL_ALREADY_EXISTS"
        assert len(store.customers) == 1

    @pytest.mark.asyncio
    async def test_same_email_for_other_owner(self, uow_factory, seed):
        seed.customer(owner_id="user-2", email="accounts@globex.test")
        result = await CreateCustomerUseCase(uow_factory).execute(create_request())
        assert result.success

    @pytest.mark.asyncio
    async def test_email_of_deleted_customer_can_be_reused(self, uow_factory, seed):
        old = seed.customer(email="accounts@globex.test")
        old.soft_delete()
        result = await CreateCustomerUseCase(uow_factory).execute(create_request())
        assert result.success

    @pytest.mark.asyncio
    async def test_invalid_email(self, uow_factory, store):
        result = await CreateCustomerUseCase(uow_factory).execute(create_request(email="nope"))
        assert result.error_code == "INVALID_EMAIL_FORMAT"
        assert store.customers == {}


class TestUpdateAndDeleteCustomer:
    """Test cases for updating, deleting and reading customers."""

    @pytest.mark.asyncio
    async def test_update_customer(self, uow_factory, seed, store):
        customer = seed.customer()
        request = UpdateCustomerRequestDTO(owner_id=OWNER, customer_id=customer.id, name="Acme Holdings")

        result = await UpdateCustomerUseCase(uow_factory).execute(request)

        assert result.data.name == "Acme Holdings"
        assert str(store.customers[customer.id].name) == "Acme Holdings"

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_not_a_duplicate(self, uow_factory, seed):
        customer = seed.customer(email="billing@acme.test")
        request = UpdateCustomerRequestDTO(owner_id=OWNER, customer_id=customer.id, email="BILLING@acme.test")
        result = await UpdateCustomerUseCase(uow_factory).execute(request)
        assert result.success

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, uow_factory, seed):
        seed.customer(email="taken@acme.test")
        customer = seed.customer(email="mine@acme.test", name="Other")
        request = UpdateCustomerRequestDTO(owner_id=OWNER, customer_id=customer.id, email="taken@acme.test")

        result = await UpdateCustomerUseCase(uow_factory).execute(request)

        assert result.error_code == "EMAIL_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_other_owners_customer_is_not_found(self, uow_factory, seed):
        customer = seed.customer(owner_id="user-2")
        request = CustomerLookupRequestDTO(owner_id=OWNER, customer_id=customer.id)

        result = await GetCustomerUseCase(uow_factory).execute(request)

        assert result.error_code == "CUSTOMER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_customer(self, uow_factory, dispatcher, recorder, seed):
        customer = seed.customer()
        request = CustomerLookupRequestDTO(owner_id=OWNER, customer_id=customer.id)

        result = await DeleteCustomerUseCase(uow_factory, dispatcher).execute(request)
        assert result.success
        assert recorder.event_types == ["CustomerDeleted"]

        again = await DeleteCustomerUseCase(uow_factory, dispatcher).execute(request)
        assert again.error_code == "CUSTOMER_NOT_FOUND"

        listed = await ListCustomersUseCase(uow_factory).execute(ListCustomersRequestDTO(owner_id=OWNER))
        assert listed.data == []

    @pytest.mark.asyncio
    async def test_list_customers_is_per_owner(self, uow_factory, seed):
        seed.customer(name="Zeta", email="z@z.test")
        seed.customer(name="Alpha", email="a@a.test")
        seed.customer(owner_id="user-2", email="x@x.test")

        result = await ListCustomersUseCase(uow_factory).execute(ListCustomersRequestDTO(owner_id=OWNER))

        assert [c.name for c in result.data] == ["Alpha", "Zeta"]
