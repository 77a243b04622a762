"""
Actor Module
============

Immutable identity values the engine reasons about.
"""

from dataclasses import dataclass
from typing import Optional

from tenantgate.models.role_enum import Role


@dataclass(frozen=True)
class Actor:
    """
    The authenticated caller.

    Built once per request from verified session state and never mutated.
    organization_id is absent for unaffiliated legacy users and is not
    needed for PLATFORM_ADMIN, who is implicitly global.
    """

    id: str
    role: Role
    organization_id: Optional[str] = None


@dataclass(frozen=True)
class ResourceOwner:
    """Minimal shape needed to decide whether an actor may touch a resource."""

    owner_id: str
    owner_organization_id: Optional[str] = None
    owner_role: Optional[Role] = None
