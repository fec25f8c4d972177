"""Pytest configuration and fixtures"""
import os

# Must be set before app.config is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.database import Base, get_db
from app.main import app
from app.models.account import Account
from app.models.role import SUPERADMIN_ROLE, Role
from app.stores.accounts import AccountStore
from app.stores.roles import RoleStore
from app.utils.auth import hash_password
from app.utils.jwt_utils import create_access_token

# File-backed SQLite so the TestClient thread sees the same data
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SUPERADMIN_EMAIL = "superadmin@example.com"
SUPERADMIN_PASSWORD = "Test1234!"


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def roles(db: Session) -> dict:
    """The three default roles, keyed by name"""
    store = RoleStore(db)
    return {
        SUPERADMIN_ROLE: store.add(Role(name=SUPERADMIN_ROLE, permissions=["all"])),
        "admin": store.add(Role(name="admin", permissions=["read", "write", "manage_users"])),
        "user": store.add(Role(name="user", permissions=["read"])),
    }


def make_account(db: Session, name: str, email: str, password: str = "password123", roles=()) -> Account:
    return AccountStore(db).add(
        Account(name=name, email=email, password_hash=hash_password(password)),
        roles=list(roles),
    )


def bearer(account: Account) -> dict:
    return {"Authorization": f"Bearer {create_access_token(account.id, account.email)}"}


@pytest.fixture
def superadmin(db: Session, roles: dict) -> Account:
    return make_account(db, "Super Admin", SUPERADMIN_EMAIL, SUPERADMIN_PASSWORD, [roles[SUPERADMIN_ROLE]])


@pytest.fixture
def admin_headers(superadmin: Account) -> dict:
    """Superadmin bearer token headers"""
    return bearer(superadmin)


@pytest.fixture
def john(db: Session, roles: dict) -> Account:
    """A regular admin-role account"""
    return make_account(db, "John Doe", "john@example.com", roles=[roles["admin"]])


@pytest.fixture
def user_headers(john: Account) -> dict:
    """Bearer token headers for a non-superadmin account"""
    return bearer(john)


@pytest.fixture
def sample_user_data(roles: dict) -> dict:
    """Sample user payload for tests"""
    return {
        "name": "Test User",
        "email": "test.user@example.com",
        "password": "s3cret-pass",
        "roleIds": [roles["user"].id],
    }
