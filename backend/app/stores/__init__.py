"""Persistence layer. Each store wraps one request-scoped SQLAlchemy session."""
from app.stores.accounts import AccountStore
from app.stores.audit import AuditStore
from app.stores.roles import RoleStore

__all__ = ["AccountStore", "AuditStore", "RoleStore"]
