"""
Dashboard router.
"""

from fastapi import APIRouter

from invoicing.infrastructure.auth.dependencies import CurrentUserId
from invoicing.infrastructure.web.dependencies import UowFactory
from invoicing.application.use_cases.dashboard_use_cases import GetDashboardStatisticsUseCase
from invoicing.application.dto.payment_dto import DashboardRequestDTO, DashboardStatisticsDTO


router = APIRouter()


@router.get("", response_model=DashboardStatisticsDTO)
async def get_dashboard(user_id: CurrentUserId, uow_factory: UowFactory):
    """Revenue, receivables and overdue figures across your invoices."""
    result = await GetDashboardStatisticsUseCase(uow_factory).execute(DashboardRequestDTO(owner_id=user_id))
    return result.unwrap()
