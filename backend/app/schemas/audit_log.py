"""Audit log schemas"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.models.audit_log import AuditAction, AuditTargetType
from app.schemas.common import CamelModel, Pagination
from app.schemas.role import MemberSummary


class AuditLogResponse(CamelModel):
    """One audit entry. ``actor`` is null for the system actor or a deleted account."""

    id: int
    actor_id: Optional[int]
    actor: Optional[MemberSummary] = None
    action: AuditAction
    target_type: AuditTargetType
    target_id: Optional[int]
    details: Dict[str, Any]
    timestamp: datetime


class AuditLogListResponse(CamelModel):
    logs: List[AuditLogResponse]
    pagination: Pagination
