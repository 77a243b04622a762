"""
Business Admin Routes Module
============================

Organization administrator endpoints for user oversight.

Security:
- Route prefix requires ACCESS_BUSINESS_ADMIN_INTERFACE and an organization
- Listing is bounded by the request scope
- Single-user reads check the organization boundary
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.permissions import Permission
from tenantgate.core.access.scope import ScopeFilter
from tenantgate.core.dependencies.auth import get_scope
from tenantgate.core.dependencies.rbac import require_permission
from tenantgate.db.session import get_db
from tenantgate.schemas import ErrorResponse, UserDetailResponse, UserListResponse
from tenantgate.services.user_management_service import UserManagementService

router = APIRouter(
    prefix="/api/business-admin",
    tags=["Business Admin"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List Organization Users",
)
def list_organization_users(
    actor: Actor = Depends(require_permission(Permission.VIEW_ORG_USERS)),
    scope: ScopeFilter = Depends(get_scope),
    db: Session = Depends(get_db),
) -> dict:
    """List users in the caller's organization (all users for platform admins)."""
    users = UserManagementService(db, actor).list_users(scope)
    return {"users": users, "total": len(users)}


@router.get(
    "/users/{user_id}",
    response_model=UserDetailResponse,
    summary="Get Organization User",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
def get_organization_user(
    user_id: str,
    actor: Actor = Depends(require_permission(Permission.VIEW_ORG_USERS)),
    db: Session = Depends(get_db),
) -> dict:
    """Get a user in the caller's organization with a can_manage flag."""
    user, manageable = UserManagementService(db, actor).get_user(user_id)
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "organization_id": user.organization_id,
        "is_active": user.is_active,
        "can_manage": manageable,
    }
