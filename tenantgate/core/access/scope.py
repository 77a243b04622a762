"""
Scope Filter Module
===================

Decides how much data an actor may see or modify.

The result is a declarative filter, built fresh for each request and
consumed by the data layer. It is never cached: organization membership
can change between requests.
"""

from dataclasses import dataclass
from typing import Union, assert_never

from tenantgate.core.access.actor import Actor
from tenantgate.core.exceptions import MissingOrganizationContextError
from tenantgate.models.role_enum import Role


@dataclass(frozen=True)
class Unrestricted:
    """No filter; every record is visible."""

    kind: str = "unrestricted"


@dataclass(frozen=True)
class OrganizationScoped:
    """Records whose owner belongs to the organization."""

    organization_id: str
    kind: str = "organization"


@dataclass(frozen=True)
class SelfScoped:
    """Records owned by the actor."""

    actor_id: str
    kind: str = "self"


ScopeFilter = Union[Unrestricted, OrganizationScoped, SelfScoped]


def build_scope(actor: Actor) -> ScopeFilter:
    """
    Build the data-access scope for an actor.

    Args:
        actor: Current actor

    Returns:
        Unrestricted for PLATFORM_ADMIN, OrganizationScoped for ORG_ADMIN,
        SelfScoped for ORG_USER and LEGACY_USER

    Raises:
        MissingOrganizationContextError: If an ORG_ADMIN has no
            organization. Narrowing to SelfScoped would hide the broken
            membership, so the request is blocked instead.
    """
    role = actor.role
    if role is Role.PLATFORM_ADMIN:
        return Unrestricted()
    elif role is Role.ORG_ADMIN:
        if actor.organization_id is None:
            raise MissingOrganizationContextError(actor_id=actor.id, role=role.value)
        return OrganizationScoped(organization_id=actor.organization_id)
    elif role is Role.ORG_USER or role is Role.LEGACY_USER:
        return SelfScoped(actor_id=actor.id)
    else:
        assert_never(role)


def describe_scope(scope: ScopeFilter) -> dict:
    """
    Serialize a scope for logs and API responses.

    Usage:
        describe_scope(OrganizationScoped("acme"))
        # {"kind": "organization", "organization_id": "acme"}
    """
    if isinstance(scope, Unrestricted):
        return {"kind": scope.kind}
    if isinstance(scope, OrganizationScoped):
        return {"kind": scope.kind, "organization_id": scope.organization_id}
    if isinstance(scope, SelfScoped):
        return {"kind": scope.kind, "actor_id": scope.actor_id}
    assert_never(scope)
