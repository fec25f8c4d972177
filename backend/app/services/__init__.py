"""Business logic. Services receive their stores at construction."""
from app.services.access_gate import AccessGate, AdminContext
from app.services.admin_service import AdminService
from app.services.analytics import AnalyticsAggregator
from app.services.audit_trail import AuditTrail

__all__ = ["AccessGate", "AdminContext", "AdminService", "AnalyticsAggregator", "AuditTrail"]
