"""Audit log model"""
import enum

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.clock import utcnow


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ASSIGN_ROLE = "ASSIGN_ROLE"
    LOGIN = "LOGIN"


class AuditTargetType(str, enum.Enum):
    USER = "USER"
    ROLE = "ROLE"
    SYSTEM = "SYSTEM"


class AuditLog(Base):
    """AuditLog model - append-only record of administrative actions.

    ``actor_id`` is deliberately not a foreign key: entries outlive the account
    that wrote them. ``NULL`` marks the system actor (bootstrap writes).
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    actor_id = Column(Integer, nullable=True, index=True)
    action = Column(String(20), nullable=False, index=True)
    target_type = Column(String(20), nullable=False)
    target_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=False, default=dict)
    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    actor = relationship(
        "Account",
        primaryjoin="foreign(AuditLog.actor_id) == Account.id",
        viewonly=True,
        lazy="joined",
    )
