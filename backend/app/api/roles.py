"""Role management endpoints (superadmin only)"""
from fastapi import APIRouter, Depends, status

from app.api.deps import get_admin_service, require_superadmin
from app.schemas.account import AssignRoleRequest
from app.schemas.common import MessageResponse
from app.schemas.role import (
    MemberSummary,
    RoleCreate,
    RoleListResponse,
    RoleResponse,
    RoleUpdate,
    RoleWithMembers,
)
from app.services.access_gate import AdminContext
from app.services.admin_service import AdminService

router = APIRouter(prefix="/superadmin", tags=["roles"])


@router.get("/roles", response_model=RoleListResponse)
def list_roles(
    service: AdminService = Depends(get_admin_service),
    _: AdminContext = Depends(require_superadmin),
):
    """List all roles alphabetically with their member counts"""
    roles = service.list_roles()
    return RoleListResponse(
        roles=[
            RoleWithMembers(
                id=role.id,
                name=role.name,
                permissions=role.permissions,
                created_at=role.created_at,
                updated_at=role.updated_at,
                user_count=len(role.members),
                users=[MemberSummary.model_validate(member) for member in role.members],
            )
            for role in roles
        ]
    )


@router.post("/roles", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    data: RoleCreate,
    service: AdminService = Depends(get_admin_service),
    ctx: AdminContext = Depends(require_superadmin),
):
    """Create a role. Permissions are stored exactly as given."""
    return service.create_role(ctx.account_id, name=data.name, permissions=data.permissions)


@router.put("/roles/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: int,
    data: RoleUpdate,
    service: AdminService = Depends(get_admin_service),
    ctx: AdminContext = Depends(require_superadmin),
):
    """Rename a role and/or replace its permissions. ``superadmin`` cannot be renamed."""
    return service.update_role(ctx.account_id, role_id, name=data.name, permissions=data.permissions)


@router.post("/assign-role", response_model=MessageResponse)
def assign_role(
    data: AssignRoleRequest,
    service: AdminService = Depends(get_admin_service),
    ctx: AdminContext = Depends(require_superadmin),
):
    """Give a user one more role. Assigning a role the user already holds is rejected."""
    service.assign_role(ctx.account_id, data.user_id, data.role_id)
    return MessageResponse(message="Role assigned successfully")
