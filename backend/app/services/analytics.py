"""Point-in-time usage counts for the dashboard"""
from datetime import datetime, timedelta
from typing import Dict, Optional

from app.stores.accounts import AccountStore
from app.stores.audit import AuditStore
from app.stores.roles import RoleStore
from app.utils.clock import to_naive_utc, utcnow

ACTIVE_WINDOW = timedelta(days=7)
RECENT_ACTIVITY_WINDOW = timedelta(hours=24)


class AnalyticsAggregator:
    """Recomputes every count from the stores on each call. Windows are closed
    intervals ending at ``now``."""

    def __init__(self, accounts: AccountStore, roles: RoleStore, audit: AuditStore):
        self.accounts = accounts
        self.roles = roles
        self.audit = audit

    def summarize(self, now: Optional[datetime] = None) -> Dict[str, int]:
        now = to_naive_utc(now) if now else utcnow()
        week_ago = now - ACTIVE_WINDOW
        day_ago = now - RECENT_ACTIVITY_WINDOW

        return {
            "totalUsers": self.accounts.count(),
            "totalRoles": self.roles.count(),
            "activeUsers7d": self.accounts.count_logged_in_between(week_ago, now),
            "newUsers7d": self.accounts.count_created_between(week_ago, now),
            "recentActivity24h": self.audit.count_between(day_ago, now),
        }
