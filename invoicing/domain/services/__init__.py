"""
Domain services.
"""

from .billing_service import BillingService, DashboardStatistics
from .numbering_service import NumberingService


__all__ = [
    "BillingService",
    "DashboardStatistics",
    "NumberingService",
]
