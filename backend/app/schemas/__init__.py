"""Pydantic schemas for request/response validation"""
from app.schemas.account import (
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    AssignRoleRequest,
)
from app.schemas.analytics import AnalyticsResponse, AnalyticsSummary
from app.schemas.audit_log import AuditLogListResponse, AuditLogResponse
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.common import MessageResponse, Pagination
from app.schemas.role import RoleCreate, RoleListResponse, RoleResponse, RoleUpdate, RoleWithMembers

__all__ = [
    "AccountCreate",
    "AccountListResponse",
    "AccountResponse",
    "AccountUpdate",
    "AssignRoleRequest",
    "AnalyticsResponse",
    "AnalyticsSummary",
    "AuditLogListResponse",
    "AuditLogResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "Pagination",
    "RoleCreate",
    "RoleListResponse",
    "RoleResponse",
    "RoleUpdate",
    "RoleWithMembers",
]
