"""Account management endpoints (superadmin only)"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_admin_service, require_superadmin
from app.schemas.account import AccountCreate, AccountListResponse, AccountResponse, AccountUpdate
from app.schemas.common import MessageResponse, Pagination
from app.services.access_gate import AdminContext
from app.services.admin_service import DEFAULT_PAGE_SIZE, AdminService

router = APIRouter(prefix="/superadmin/users", tags=["users"])


@router.get("", response_model=AccountListResponse)
def list_users(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, description="Page size"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or email"),
    role: Optional[str] = Query(None, description="Only users holding this role name"),
    service: AdminService = Depends(get_admin_service),
    _: AdminContext = Depends(require_superadmin),
):
    """
    List users, newest first.

    Query parameters:
    - page / limit: pagination
    - search: substring of name or email
    - role: role name filter
    """
    result = service.list_accounts(page=page, limit=limit, search=search, role_name=role)
    return AccountListResponse(
        users=[AccountResponse.model_validate(account) for account in result.accounts],
        pagination=Pagination(
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        ),
    )


@router.get("/{user_id}", response_model=AccountResponse)
def get_user(
    user_id: int,
    service: AdminService = Depends(get_admin_service),
    _: AdminContext = Depends(require_superadmin),
):
    """Get one user with roles"""
    return service.get_account(user_id)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: AccountCreate,
    service: AdminService = Depends(get_admin_service),
    ctx: AdminContext = Depends(require_superadmin),
):
    """
    Create a user. The password is stored only as a bcrypt hash.
    Unknown ``roleIds`` are ignored.
    """
    return service.create_account(
        ctx.account_id,
        name=data.name,
        email=data.email,
        password=data.password,
        role_ids=data.role_ids,
    )


@router.put("/{user_id}", response_model=AccountResponse)
def update_user(
    user_id: int,
    data: AccountUpdate,
    service: AdminService = Depends(get_admin_service),
    ctx: AdminContext = Depends(require_superadmin),
):
    """
    Partially update a user.

    ``roleIds``, when present, replaces the user's whole role set.
    """
    return service.update_account(
        ctx.account_id,
        user_id,
        name=data.name,
        email=data.email,
        password=data.password,
        role_ids=data.role_ids,
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    service: AdminService = Depends(get_admin_service),
    ctx: AdminContext = Depends(require_superadmin),
):
    """
    Delete a user and their role memberships.

    Refused for the caller's own account and for superadmin accounts.
    """
    service.delete_account(ctx.account_id, user_id)
    return MessageResponse(message="User deleted successfully")
