"""Dashboard analytics endpoint (superadmin only)"""
from fastapi import APIRouter, Depends

from app.api.deps import get_analytics, require_superadmin
from app.schemas.analytics import AnalyticsResponse, AnalyticsSummary
from app.services.access_gate import AdminContext
from app.services.analytics import AnalyticsAggregator
from app.utils.clock import utcnow

router = APIRouter(prefix="/superadmin/analytics", tags=["analytics"])


@router.get("/summary", response_model=AnalyticsResponse)
def get_summary(
    analytics: AnalyticsAggregator = Depends(get_analytics),
    _: AdminContext = Depends(require_superadmin),
):
    """
    Point-in-time counts:

      - totalUsers / totalRoles
      - activeUsers7d: users who logged in during the last 7 days
      - newUsers7d: users created during the last 7 days
      - recentActivity24h: audit entries from the last 24 hours
    """
    now = utcnow()
    return AnalyticsResponse(
        summary=AnalyticsSummary.model_validate(analytics.summarize(now)),
        timestamp=now,
    )
