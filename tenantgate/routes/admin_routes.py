"""
Admin Routes Module
===================

Platform administration endpoints.

Security:
- Route prefix is restricted to PLATFORM_ADMIN
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.permissions import Permission
from tenantgate.core.dependencies.rbac import require_permission
from tenantgate.db.session import get_db
from tenantgate.models.organization import Organization
from tenantgate.schemas import ErrorResponse, OrganizationListResponse

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.get(
    "/organizations",
    response_model=OrganizationListResponse,
    summary="List All Organizations",
)
def list_organizations(
    actor: Actor = Depends(require_permission(Permission.MANAGE_ALL_ORGANIZATIONS)),
    db: Session = Depends(get_db),
) -> dict:
    """List every organization on the platform."""
    organizations = db.query(Organization).order_by(Organization.name).all()
    return {"organizations": organizations, "total": len(organizations)}
