"""Middleware modules for production-ready features"""
from app.middleware.monitoring import (
    MonitoringMiddleware,
    record_audit_entry,
    record_audit_failure,
    record_auth_failure,
)
from app.middleware.rate_limit import limiter

__all__ = [
    "MonitoringMiddleware",
    "record_audit_entry",
    "record_audit_failure",
    "record_auth_failure",
    "limiter",
]
