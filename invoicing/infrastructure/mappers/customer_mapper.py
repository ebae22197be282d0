"""
Customer mapper for converting between domain entities and database models.
"""

from invoicing.domain.models.customer import Customer
from invoicing.domain.models.value_objects import CustomerName, EmailAddress, PhoneNumber, Address
from invoicing.infrastructure.db.models import CustomerModel


class CustomerMapper:
    """Maps between Customer domain entity and CustomerModel database model."""

    def domain_to_model(self, customer: Customer) -> CustomerModel:
        """Convert a new Customer to a CustomerModel."""
        model = CustomerModel(id=customer.id, user_id=customer.user_id, created_at=customer.created_at)
        self.apply_to_model(customer, model)
        return model

    def apply_to_model(self, customer: Customer, model: CustomerModel) -> None:
        """Copy the customer's mutable state onto an existing row."""
        model.name = str(customer.name)
        model.email = str(customer.email)
        model.phone_number = str(customer.phone_number)
        model.street = customer.address.street
        model.city = customer.address.city
        model.state = customer.address.state
        model.postal_code = customer.address.postal_code
        model.country = customer.address.country
        model.deleted_at = customer.deleted_at
        model.updated_at = customer.updated_at

    def model_to_domain(self, model: CustomerModel) -> Customer:
        """Convert CustomerModel to Customer domain entity."""
        return Customer(
            id=model.id,
            user_id=model.user_id,
            name=CustomerName(model.name),
            email=EmailAddress(model.email),
            address=Address(
                street=model.street,
                city=model.city,
                state=model.state,
                postal_code=model.postal_code,
                country=model.country,
            ),
            phone_number=PhoneNumber(model.phone_number),
            deleted_at=model.deleted_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
