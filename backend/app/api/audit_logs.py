"""Audit log query endpoint (superadmin only).

The trail is append-only: there is no POST, PUT or DELETE here. Entries are
written by the administrative service as a side effect of each action.

Filters arrive as raw strings so that an empty value (``action=&startDate=``)
means "no filter" rather than a validation failure.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from app.api.deps import get_audit_trail, require_superadmin
from app.errors import ValidationError
from app.schemas.audit_log import AuditLogListResponse, AuditLogResponse
from app.schemas.common import Pagination
from app.services.access_gate import AdminContext
from app.services.audit_trail import AuditTrail

router = APIRouter(prefix="/superadmin/audit-logs", tags=["audit-logs"])

_datetime_adapter = TypeAdapter(datetime)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_int(name: str, value: Optional[str]) -> Optional[int]:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _parse_datetime(name: str, value: Optional[str]) -> Optional[datetime]:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return _datetime_adapter.validate_python(value)
    except SchemaValidationError:
        raise ValidationError(f"{name} must be an ISO 8601 date or datetime")


@router.get("", response_model=AuditLogListResponse)
def query_audit_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action kind; empty means any"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by acting user"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Inclusive lower bound (ISO 8601)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Inclusive upper bound (ISO 8601)"),
    trail: AuditTrail = Depends(get_audit_trail),
    _: AdminContext = Depends(require_superadmin),
):
    """Query audit entries, newest first. Unknown non-empty actions are a 400."""
    result = trail.query(
        page=page,
        limit=limit,
        action=_blank_to_none(action),
        actor_id=_parse_int("userId", user_id),
        start=_parse_datetime("startDate", start_date),
        end=_parse_datetime("endDate", end_date),
    )
    return AuditLogListResponse(
        logs=[AuditLogResponse.model_validate(entry) for entry in result.entries],
        pagination=Pagination(
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        ),
    )
