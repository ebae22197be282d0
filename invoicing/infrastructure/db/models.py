"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text,
    Numeric, Date, ForeignKey, JSON, Enum as SQLEnum,
    Index, UniqueConstraint, CheckConstraint, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from invoicing.domain.models.invoice import InvoiceStatus
from invoicing.domain.models.payment import PaymentMethod
from invoicing.infrastructure.db.database import Base


# Fixed-point precision matching Money's four fractional digits
MONEY = Numeric(14, 4)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class CustomerModel(Base):
    """Customer table"""
    __tablename__ = 'customers'

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)

    # Address
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)

    # Timestamps
    deleted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    invoices = relationship("InvoiceModel", back_populates="customer")

    __table_args__ = (
        # Email is unique per user among customers that are not deleted
        Index(
            'uq_customers_user_email_active',
            'user_id', 'email',
            unique=True,
            postgresql_where=text('deleted_at IS NULL'),
            sqlite_where=text('deleted_at IS NULL'),
        ),
    )


class InvoiceModel(Base):
    """Invoice table"""
    __tablename__ = 'invoices'

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False)
    customer_id = Column(String(36), ForeignKey('customers.id'), nullable=False)

    # Invoice details
    invoice_number = Column(String(50), nullable=False)
    status = Column(
        SQLEnum(InvoiceStatus, name='invoice_status', values_callable=_enum_values),
        nullable=False,
        default=InvoiceStatus.DRAFT,
    )
    company_info = Column(Text)

    # Derived amounts
    subtotal = Column(MONEY, nullable=False, default=0)
    tax_rate = Column(Numeric(7, 4), nullable=False, default=0)
    tax_amount = Column(MONEY, nullable=False, default=0)
    total = Column(MONEY, nullable=False, default=0)

    # Dates
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    sent_date = Column(DateTime(timezone=True))
    paid_date = Column(DateTime(timezone=True))

    # Content
    notes = Column(Text)
    terms = Column(Text)

    # Rendered document keys
    pdf_references = Column(JSON, nullable=False, default=list)

    # Timestamps
    deleted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    customer = relationship("CustomerModel", back_populates="invoices")
    line_items = relationship(
        "LineItemModel",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="LineItemModel.position",
        lazy="selectin",
    )
    payments = relationship("PaymentModel", back_populates="invoice")

    __table_args__ = (
        UniqueConstraint('user_id', 'invoice_number', name='uq_invoices_user_number'),
        CheckConstraint('tax_rate >= 0 AND tax_rate <= 100', name='ck_invoices_tax_rate'),
        CheckConstraint('due_date >= issue_date', name='ck_invoices_due_after_issue'),
        Index('idx_invoices_user_status', 'user_id', 'status'),
        Index('idx_invoices_customer', 'customer_id'),
    )


class LineItemModel(Base):
    """Invoice line item table"""
    __tablename__ = 'line_items'

    id = Column(String(36), primary_key=True)
    invoice_id = Column(String(36), ForeignKey('invoices.id', ondelete='CASCADE'), nullable=False, index=True)

    description = Column(String(500), nullable=False)
    quantity = Column(Numeric(12, 4), nullable=False)
    unit_price = Column(MONEY, nullable=False)
    amount = Column(MONEY, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    invoice = relationship("InvoiceModel", back_populates="line_items")

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_line_items_quantity_positive'),
        CheckConstraint('unit_price >= 0', name='ck_line_items_unit_price_non_negative'),
    )


class PaymentModel(Base):
    """Payment ledger table. Rows are inserted once and never updated."""
    __tablename__ = 'payments'

    id = Column(String(36), primary_key=True)
    invoice_id = Column(String(36), ForeignKey('invoices.id'), nullable=False, index=True)

    amount = Column(MONEY, nullable=False)
    payment_method = Column(
        SQLEnum(PaymentMethod, name='payment_method', values_callable=_enum_values),
        nullable=False,
    )
    payment_date = Column(Date, nullable=False)
    reference = Column(String(255))
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    invoice = relationship("InvoiceModel", back_populates="payments")

    __table_args__ = (
        CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
        Index('idx_payments_invoice_date', 'invoice_id', 'payment_date'),
    )
