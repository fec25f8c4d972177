"""Role schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class RoleSummary(CamelModel):
    id: int
    name: str
    permissions: List[str]


class MemberSummary(CamelModel):
    id: int
    name: str
    email: str


class RoleCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=50, description="Unique role name")
    permissions: List[str] = Field(default_factory=list, description="Free-form permission tokens")


class RoleUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    permissions: Optional[List[str]] = None


class RoleResponse(RoleSummary):
    created_at: datetime
    updated_at: datetime


class RoleWithMembers(RoleResponse):
    user_count: int
    users: List[MemberSummary]


class RoleListResponse(CamelModel):
    roles: List[RoleWithMembers]
