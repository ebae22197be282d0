"""
Dashboard use cases for the application layer.
"""

from typing import Optional

from invoicing.application.use_cases.base_use_case import QueryUseCase, UnitOfWorkFactory
from invoicing.application.dto.payment_dto import DashboardRequestDTO, DashboardStatisticsDTO
from invoicing.domain.services.billing_service import BillingService


class GetDashboardStatisticsUseCase(QueryUseCase[DashboardRequestDTO, DashboardStatisticsDTO]):
    """Use case for the owner's billing overview."""

    def __init__(self, uow_factory: UnitOfWorkFactory, billing_service: Optional[BillingService] = None):
        super().__init__(uow_factory)
        self.billing_service = billing_service or BillingService()

    async def _execute_business_logic(self, request: DashboardRequestDTO) -> DashboardStatisticsDTO:
        async with self.uow_factory() as uow:
            invoices = await uow.invoices.list_by_user(request.owner_id)
            paid_by_invoice = {
                invoice.id: await uow.payments.total_for_invoice(invoice.id)
                for invoice in invoices
            }
            payments = await uow.payments.list_by_user(request.owner_id)

        stats = self.billing_service.calculate_statistics(
            invoices,
            paid_by_invoice,
            payments,
            today=request.today,
        )
        return DashboardStatisticsDTO.from_domain(stats)
