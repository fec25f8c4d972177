"""API dependencies: store/service construction and the access-control gate.

Every protected route composes the same chain::

    get_admin_context  ->  require_superadmin  ->  handler

``get_admin_context`` answers 401 for a missing, invalid or expired bearer token
(or one whose account is gone); ``require_superadmin`` answers 403 when the
resolved account does not hold the ``superadmin`` role.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.access_gate import AccessGate, AdminContext
from app.services.admin_service import AdminService
from app.services.analytics import AnalyticsAggregator
from app.services.audit_trail import AuditTrail
from app.stores.accounts import AccountStore
from app.stores.audit import AuditStore
from app.stores.roles import RoleStore

_bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Stores and services (one set per request session)
# ---------------------------------------------------------------------------

def get_account_store(db: Session = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_role_store(db: Session = Depends(get_db)) -> RoleStore:
    return RoleStore(db)


def get_audit_store(db: Session = Depends(get_db)) -> AuditStore:
    return AuditStore(db)


def get_audit_trail(store: AuditStore = Depends(get_audit_store)) -> AuditTrail:
    return AuditTrail(store)


def get_admin_service(
    accounts: AccountStore = Depends(get_account_store),
    roles: RoleStore = Depends(get_role_store),
    audit: AuditTrail = Depends(get_audit_trail),
) -> AdminService:
    return AdminService(accounts, roles, audit)


def get_analytics(
    accounts: AccountStore = Depends(get_account_store),
    roles: RoleStore = Depends(get_role_store),
    audit: AuditStore = Depends(get_audit_store),
) -> AnalyticsAggregator:
    return AnalyticsAggregator(accounts, roles, audit)


def get_access_gate(accounts: AccountStore = Depends(get_account_store)) -> AccessGate:
    return AccessGate(accounts)


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------

def get_admin_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    gate: AccessGate = Depends(get_access_gate),
) -> AdminContext:
    """Resolve the bearer token to the calling account (401 on failure)."""
    token = credentials.credentials if credentials else None
    return gate.authenticate(token)


def require_superadmin(ctx: AdminContext = Depends(get_admin_context)) -> AdminContext:
    """Require an authenticated caller holding the ``superadmin`` role (403 otherwise)."""
    return AccessGate.require_superadmin(ctx)
