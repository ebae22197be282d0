"""Billing service for balance computation and payment rules.
Handles the arithmetic shared by the payment application process and reporting.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from invoicing.domain.models.base import (
    InvalidAmountError,
    ExceedsBalanceError,
    BalanceInvariantError,
    utc_now,
)
from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.models.payment import Payment
from invoicing.domain.models.value_objects import Money


@dataclass(frozen=True)
class DashboardStatistics:
    """Aggregated billing figures for one user."""

    total_invoices: int
    total_revenue: Money
    total_paid: Money
    pending_count: int
    total_pending: Money
    total_outstanding: Money
    overdue_count: int
    total_overdue: Money
    paid_this_month: Money


class BillingService:
    """
    Domain service for billing calculations and business rules.
    Balances are always derived from the payment ledger, never stored.
    """

    def calculate_balance(self, invoice: Invoice, total_paid: Money) -> Money:
        """
        Outstanding balance of an invoice.

        Raises BalanceInvariantError when recorded payments exceed the
        invoice total, since that can only come from a broken upstream write.
        """
        balance = invoice.get_balance(total_paid)
        if balance.is_negative():
            raise BalanceInvariantError(
                f"Invoice {invoice.id} has payments of {total_paid} exceeding its total of {invoice.total}"
            )
        return balance

    def validate_payment_amount(self, amount: Money, balance: Money) -> None:
        """
        Check a payment against the current balance.
        Paying exactly the balance is allowed; paying more is not.
        """
        if not amount.is_positive():
            raise InvalidAmountError(
                "Payment amount must be greater than zero",
                "amount",
                "INVALID_PAYMENT_AMOUNT",
            )
        if amount > balance:
            raise ExceedsBalanceError(
                f"Payment amount {amount.format()} exceeds invoice balance {balance.format()}"
            )

    def settles(self, balance: Money, amount: Money) -> bool:
        """Whether a payment brings the balance to exactly zero."""
        return balance.subtract(amount).is_zero()

    def calculate_statistics(
        self,
        invoices: Iterable[Invoice],
        paid_by_invoice: Dict[str, Money],
        payments: Iterable[Payment],
        today: Optional[date] = None,
    ) -> DashboardStatistics:
        """
        Aggregate dashboard figures from a user's invoices and payments.

        ``paid_by_invoice`` maps invoice id to the sum of its payments.
        """
        today = today or utc_now().date()
        invoices = list(invoices)
        payments = list(payments)

        sent: List[Invoice] = [inv for inv in invoices if inv.status == InvoiceStatus.SENT]
        overdue = [inv for inv in sent if inv.is_overdue(today)]

        def outstanding(items: Iterable[Invoice]) -> Money:
            total = Money.zero()
            for inv in items:
                balance = inv.get_balance(paid_by_invoice.get(inv.id, Money.zero()))
                if balance.is_positive():
                    total = total.add(balance)
            return total

        month_start = today.replace(day=1)
        this_month = [p.amount for p in payments if month_start <= p.payment_date <= today]

        return DashboardStatistics(
            total_invoices=len(invoices),
            total_revenue=Money.sum(inv.total for inv in invoices),
            total_paid=Money.sum(p.amount for p in payments),
            pending_count=len(sent),
            total_pending=Money.sum(inv.total for inv in sent),
            total_outstanding=outstanding(sent),
            overdue_count=len(overdue),
            total_overdue=outstanding(overdue),
            paid_this_month=Money.sum(this_month),
        )
