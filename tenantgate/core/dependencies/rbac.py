"""
Role-Based Access Control (RBAC) Dependencies Module
=====================================================

Handler-level checks for endpoints that need more than their route
prefix requirement.

Usage:
    @router.put("/{user_id}/role")
    def change_role(actor: Actor = Depends(require_permission(Permission.PROMOTE_DEMOTE_IN_ORG))):
        ...
"""

from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.evaluator import AccessEvaluator
from tenantgate.core.access.permissions import Permission
from tenantgate.core.dependencies.auth import get_current_actor
from tenantgate.core.exceptions import UnknownPermissionError, exception_to_http_exception
from tenantgate.core.logging import get_logger, security_logger
from tenantgate.models.role_enum import Role

# Initialize logger
logger = get_logger(__name__)


def require_permission(
    permission: Permission,
    evaluator: AccessEvaluator | None = None,
) -> Callable:
    """
    Create a dependency that requires the actor's role to hold a permission.

    Args:
        permission: Required permission
        evaluator: Evaluator to consult; the default table when None

    Returns:
        Dependency function
    """
    evaluator = evaluator or AccessEvaluator()

    def permission_checker(
        request: Request,
        actor: Actor = Depends(get_current_actor),
    ) -> Actor:
        try:
            permitted = evaluator.has_permission(actor.role, permission)
        except UnknownPermissionError as e:
            security_logger.log_misconfiguration(
                actor_id=actor.id,
                error=e,
                resource=request.url.path,
            )
            raise exception_to_http_exception(e)

        if not permitted:
            security_logger.log_access_denied(
                actor_id=actor.id,
                reason="insufficient permission",
                resource=request.url.path,
                action=request.method,
                required_permission=permission.value,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions for this action",
            )
        return actor

    return permission_checker


def require_role(*allowed_roles: Role) -> Callable:
    """
    Create a dependency that requires one of the given roles exactly.

    Args:
        *allowed_roles: Roles that are allowed access

    Returns:
        Dependency function
    """
    def role_checker(
        request: Request,
        actor: Actor = Depends(get_current_actor),
    ) -> Actor:
        if actor.role not in allowed_roles:
            security_logger.log_access_denied(
                actor_id=actor.id,
                reason="insufficient role",
                resource=request.url.path,
                action=request.method,
                required_roles=[r.value for r in allowed_roles],
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions for this action",
            )
        return actor

    return role_checker
