"""Login schemas"""
from typing import List

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.role import RoleSummary


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class LoginUser(CamelModel):
    id: int
    name: str
    email: str
    roles: List[RoleSummary]


class LoginResponse(CamelModel):
    token: str
    user: LoginUser
