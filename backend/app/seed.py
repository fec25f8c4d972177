"""
Seed the database with the default roles and demo accounts. Run from backend/:
  python -m app.seed            # create missing rows, keep existing ones
  python -m app.seed --reset    # drop and recreate every table first

Creates:
  - roles: superadmin, admin, user
  - superadmin@example.com / Test1234!   (superadmin)
  - john@example.com       / password123 (admin)
  - jane@example.com       / password123 (user)

Bootstrap writes are only audited when SEED_AUDIT_ENABLED is true; entries are
then recorded against the system actor (actor_id = NULL).
"""
import argparse
import sys
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app import models  # noqa: F401
from app.config import settings
from app.database import Base, SessionLocal, engine
from app.models.account import Account
from app.models.audit_log import AuditAction, AuditTargetType
from app.models.role import SUPERADMIN_ROLE, Role
from app.services.audit_trail import AuditTrail
from app.stores.accounts import AccountStore
from app.stores.audit import AuditStore
from app.stores.roles import RoleStore
from app.utils.auth import hash_password
from app.utils.logger import logger

DEFAULT_ROLES = {
    SUPERADMIN_ROLE: ["all", "read", "write", "delete", "manage_users", "manage_roles"],
    "admin": ["read", "write", "manage_users"],
    "user": ["read"],
}

DEFAULT_ACCOUNTS = [
    {"name": "Super Admin", "email": "superadmin@example.com", "password": "Test1234!", "role": SUPERADMIN_ROLE},
    {"name": "John Doe", "email": "john@example.com", "password": "password123", "role": "admin"},
    {"name": "Jane Smith", "email": "jane@example.com", "password": "password123", "role": "user"},
]


def seed_database(db: Session, audit_enabled: Optional[bool] = None) -> Dict[str, int]:
    """Create the default roles and accounts that do not exist yet.

    Returns the number of roles and accounts created. Idempotent.
    """
    if audit_enabled is None:
        audit_enabled = settings.SEED_AUDIT_ENABLED

    accounts = AccountStore(db)
    roles = RoleStore(db)
    trail = AuditTrail(AuditStore(db)) if audit_enabled else None

    created = {"roles": 0, "accounts": 0}

    by_name: Dict[str, Role] = {}
    for name, permissions in DEFAULT_ROLES.items():
        role = roles.get_by_name(name)
        if role is None:
            role = roles.add(Role(name=name, permissions=permissions))
            created["roles"] += 1
            if trail:
                trail.append(None, AuditAction.CREATE, AuditTargetType.ROLE, role.id,
                             {"roleName": role.name, "permissions": role.permissions, "seed": True})
        by_name[name] = role

    for seed in DEFAULT_ACCOUNTS:
        if accounts.get_by_email(seed["email"]) is not None:
            continue
        role = by_name[seed["role"]]
        account = accounts.add(
            Account(name=seed["name"], email=seed["email"], password_hash=hash_password(seed["password"])),
            roles=[role],
        )
        created["accounts"] += 1
        if trail:
            trail.append(None, AuditAction.CREATE, AuditTargetType.USER, account.id,
                         {"email": account.email, "assignedRoles": [role.id], "seed": True})

    logger.info(f"Seed complete: {created['roles']} roles, {created['accounts']} accounts created")
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed Gatekeeper with default roles and demo accounts.")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    parser.add_argument("--audit", action="store_true", help="Audit the seed writes (overrides SEED_AUDIT_ENABLED)")
    args = parser.parse_args()

    if args.reset:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = seed_database(db, audit_enabled=True if args.audit else None)
    finally:
        db.close()

    print(f"Created {created['roles']} roles and {created['accounts']} accounts.")
    print("Super Admin login: superadmin@example.com / Test1234!")
    print("Test user login:   john@example.com / password123")
    return 0


if __name__ == "__main__":
    sys.exit(main())
