"""
Organization Boundary Module
============================

Decides whether an actor and a target live in the same tenant.

PLATFORM_ADMIN bypasses the boundary here and in scope building only;
every other check derives from these functions or from rank comparison.
"""

from typing import Optional

from tenantgate.core.access.actor import Actor, ResourceOwner
from tenantgate.core.access.evaluator import AccessEvaluator
from tenantgate.core.access.hierarchy import TENANT_SCOPED_ROLES
from tenantgate.models.role_enum import Role


def same_tenant(actor: Actor, target_organization_id: Optional[str]) -> bool:
    """
    Check if an actor may act within the target organization.

    Args:
        actor: Current actor
        target_organization_id: Organization owning the target, or None
            for unaffiliated resources

    Returns:
        True for PLATFORM_ADMIN; when the target has no organization, True
        only if the actor has none either; otherwise True iff both match.
    """
    if actor.role == Role.PLATFORM_ADMIN:
        return True

    if target_organization_id is None:
        return actor.organization_id is None

    return actor.organization_id is not None and actor.organization_id == target_organization_id


def requires_organization(actor: Actor) -> bool:
    """
    True when a tenant-scoped role has no organization assignment.

    This is a data-integrity guard, not a normal-path decision.
    """
    return actor.role in TENANT_SCOPED_ROLES and actor.organization_id is None


def validate_organization_context(
    actor: Actor,
    target_organization_id: Optional[str] = None,
) -> bool:
    """
    Check an organization context supplied with a request.

    PLATFORM_ADMIN may use any organization. With a target, the actor's
    organization must match it; without one, the actor must belong to
    some organization.
    """
    if actor.role == Role.PLATFORM_ADMIN:
        return True

    if target_organization_id is not None:
        return actor.organization_id == target_organization_id

    return actor.organization_id is not None


def can_manage_user(
    evaluator: AccessEvaluator,
    manager: Actor,
    target: ResourceOwner,
) -> bool:
    """
    Check if the manager may act upon the target user.

    Requires both the same tenant and a strictly higher rank. A target
    without a known role is never manageable.
    """
    if target.owner_role is None:
        return False
    return (
        same_tenant(manager, target.owner_organization_id)
        and evaluator.can_manage(manager.role, target.owner_role)
    )


def can_access_resource(actor: Actor, owner: ResourceOwner) -> bool:
    """
    Check if an actor may read or modify a resource.

    Args:
        actor: Current actor
        owner: Owner reference of the resource, with the owner's
            organization already resolved

    Returns:
        True if access is allowed
    """
    # Owners can always reach their own resources
    if actor.id == owner.owner_id:
        return True

    if actor.role == Role.PLATFORM_ADMIN:
        return True

    if actor.role == Role.ORG_ADMIN and actor.organization_id is not None:
        return owner.owner_organization_id == actor.organization_id

    # ORG_USER and LEGACY_USER only reach their own resources
    return False
