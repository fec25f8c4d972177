"""Audit trail: best-effort append and paginated query over audit entries.

Write policy
------------
``append`` is fire-and-forget with error-channel reporting. The administrative
action that triggers an entry has already been committed when ``append`` runs,
and a failure to persist the entry must never undo or block it. Storage errors
are therefore caught here, logged on the ``gatekeeper`` logger with the entry's
contents, counted in ``gatekeeper_audit_write_failures_total`` and swallowed.

Enum validation is not a storage error: an unknown action or target type raises
:class:`~app.errors.ValidationError` before anything is written.
"""
from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional, Union

from app.errors import ValidationError
from app.middleware.monitoring import record_audit_entry, record_audit_failure
from app.models.audit_log import AuditAction, AuditLog, AuditTargetType
from app.stores.audit import AuditStore
from app.utils.clock import to_naive_utc, utcnow
from app.utils.logger import logger
from app.utils.pagination import total_pages


class AuditPage(NamedTuple):
    entries: List[AuditLog]
    total: int
    page: int
    limit: int
    total_pages: int


def coerce_action(value: Union[str, AuditAction]) -> AuditAction:
    try:
        return AuditAction(value)
    except ValueError:
        raise ValidationError(f"Unknown audit action: {value!r}")


def coerce_target_type(value: Union[str, AuditTargetType]) -> AuditTargetType:
    try:
        return AuditTargetType(value)
    except ValueError:
        raise ValidationError(f"Unknown audit target type: {value!r}")


class AuditTrail:
    def __init__(self, store: AuditStore):
        self.store = store

    def append(
        self,
        actor_id: Optional[int],
        action: Union[str, AuditAction],
        target_type: Union[str, AuditTargetType],
        target_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """Record one administrative action. Returns ``None`` if the write failed.

        ``actor_id=None`` records the system actor.
        """
        action = coerce_action(action)
        target_type = coerce_target_type(target_type)

        entry = AuditLog(
            actor_id=actor_id,
            action=action.value,
            target_type=target_type.value,
            target_id=target_id,
            details=details or {},
            timestamp=utcnow(),
        )

        try:
            self.store.add(entry)
        except Exception as exc:
            record_audit_failure(action.value)
            logger.error(
                f"Audit write failed: {action.value} on {target_type.value}",
                extra={
                    "actor_id": actor_id,
                    "action": action.value,
                    "target_type": target_type.value,
                    "target_id": target_id,
                    "error": str(exc),
                },
                exc_info=True,
            )
            return None

        record_audit_entry(action.value, target_type.value)
        logger.info(
            f"Audit logged: {action.value} on {target_type.value} by {actor_id if actor_id is not None else 'system'}",
            extra={
                "actor_id": actor_id,
                "action": action.value,
                "target_type": target_type.value,
                "target_id": target_id,
            },
        )
        return entry

    def query(
        self,
        page: int = 1,
        limit: int = 20,
        action: Optional[Union[str, AuditAction]] = None,
        actor_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AuditPage:
        """Entries matching the filters, newest first"""
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        if action is not None:
            action = coerce_action(action).value

        entries, total = self.store.query(
            page=page,
            limit=limit,
            action=action,
            actor_id=actor_id,
            start=to_naive_utc(start) if start else None,
            end=to_naive_utc(end) if end else None,
        )
        return AuditPage(entries, total, page, limit, total_pages(total, limit))
