"""
Payment mapper for converting between domain entities and database models.
"""

from invoicing.domain.models.payment import Payment, PaymentMethod
from invoicing.domain.models.value_objects import Money
from invoicing.infrastructure.db.models import PaymentModel


class PaymentMapper:
    """Maps between Payment domain entity and PaymentModel database model."""

    def domain_to_model(self, payment: Payment) -> PaymentModel:
        return PaymentModel(
            id=payment.id,
            invoice_id=payment.invoice_id,
            amount=payment.amount.amount,
            payment_method=payment.payment_method,
            payment_date=payment.payment_date,
            reference=payment.reference,
            notes=payment.notes,
            created_at=payment.created_at,
        )

    def model_to_domain(self, model: PaymentModel) -> Payment:
        return Payment(
            id=model.id,
            invoice_id=model.invoice_id,
            amount=Money(model.amount),
            payment_method=PaymentMethod(model.payment_method),
            payment_date=model.payment_date,
            reference=model.reference,
            notes=model.notes,
            created_at=model.created_at,
        )
