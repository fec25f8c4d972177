"""Account (user) schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel, Pagination
from app.schemas.role import RoleSummary

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class AccountCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Unique login email")
    password: str = Field(..., min_length=1, max_length=128)
    role_ids: List[int] = Field(default_factory=list, description="Roles to attach on creation")


class AccountUpdate(CamelModel):
    """Partial update; omitted fields are left unchanged.

    ``roleIds`` present (even ``[]``) replaces the whole role set.
    """

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    password: Optional[str] = Field(None, min_length=1, max_length=128)
    role_ids: Optional[List[int]] = None


class AccountResponse(CamelModel):
    id: int
    name: str
    email: str
    roles: List[RoleSummary]
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AccountListResponse(CamelModel):
    users: List[AccountResponse]
    pagination: Pagination


class AssignRoleRequest(CamelModel):
    user_id: int
    role_id: int
