"""Database models"""
from app.models.account import Account
from app.models.audit_log import AuditAction, AuditLog, AuditTargetType
from app.models.role import SUPERADMIN_ROLE, Membership, Role

__all__ = [
    "Account",
    "AuditAction",
    "AuditLog",
    "AuditTargetType",
    "Membership",
    "Role",
    "SUPERADMIN_ROLE",
]
