"""
User Management Routes Module
=============================

Role and account status changes for users.

Security:
- Route prefix requires MANAGE_ORG_USERS and an organization
- The caller must outrank the target
- Role changes also need the caller to be allowed to grant the role
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.permissions import Permission
from tenantgate.core.dependencies.rbac import require_permission
from tenantgate.db.session import get_db
from tenantgate.schemas import ErrorResponse, RoleChangeRequest, StatusChangeRequest, UserResponse
from tenantgate.services.user_management_service import UserManagementService

router = APIRouter(
    prefix="/api/users/manage",
    tags=["User Management"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)


@router.put(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Change User Role",
)
def change_user_role(
    user_id: str,
    payload: RoleChangeRequest,
    actor: Actor = Depends(require_permission(Permission.PROMOTE_DEMOTE_IN_ORG)),
    db: Session = Depends(get_db),
):
    """Assign a new role to a user the caller manages."""
    return UserManagementService(db, actor).change_role(
        user_id,
        payload.role,
        organization_id=payload.organization_id,
    )


@router.put(
    "/{user_id}/status",
    response_model=UserResponse,
    summary="Change User Status",
)
def change_user_status(
    user_id: str,
    payload: StatusChangeRequest,
    actor: Actor = Depends(require_permission(Permission.MANAGE_ORG_USERS)),
    db: Session = Depends(get_db),
):
    """Suspend or reactivate a user the caller manages."""
    return UserManagementService(db, actor).change_status(user_id, payload.is_active)
