"""Audit store: append-only persistence of audit entries.

There is intentionally no update or delete method.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.utils.pagination import paginate


class AuditStore:
    def __init__(self, db: Session):
        self.db = db

    def add(self, entry: AuditLog) -> AuditLog:
        """Insert and commit one entry. Rolls the session back before re-raising."""
        try:
            self.db.add(entry)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return entry

    def query(
        self,
        page: int,
        limit: int,
        action: Optional[str] = None,
        actor_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Tuple[List[AuditLog], int]:
        query = self.db.query(AuditLog)

        if action:
            query = query.filter(AuditLog.action == action)
        if actor_id is not None:
            query = query.filter(AuditLog.actor_id == actor_id)
        if start:
            query = query.filter(AuditLog.timestamp >= start)
        if end:
            query = query.filter(AuditLog.timestamp <= end)

        query = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        return paginate(query, page, limit)

    def count_between(self, start: datetime, end: datetime) -> int:
        return (
            self.db.query(func.count(AuditLog.id))
            .filter(AuditLog.timestamp >= start, AuditLog.timestamp <= end)
            .scalar()
            or 0
        )
