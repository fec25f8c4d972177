"""Analytics schemas"""
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel


class AnalyticsSummary(CamelModel):
    total_users: int
    total_roles: int
    active_users_7d: int = Field(..., alias="activeUsers7d")
    new_users_7d: int = Field(..., alias="newUsers7d")
    recent_activity_24h: int = Field(..., alias="recentActivity24h")


class AnalyticsResponse(CamelModel):
    summary: AnalyticsSummary
    timestamp: datetime
