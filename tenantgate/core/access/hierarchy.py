"""
Role Hierarchy Module
=====================

A fixed total order over roles, used only for "can-manage" comparisons.
Levels are never meaningful beyond ordering.
"""

from typing import Union

from tenantgate.models.role_enum import Role


# Define role hierarchy (higher index = more authority)
ROLE_HIERARCHY: list[Role] = [
    Role.LEGACY_USER,
    Role.ORG_USER,
    Role.ORG_ADMIN,
    Role.PLATFORM_ADMIN,
]

_ROLE_LEVELS: dict[Role, int] = {role: level for level, role in enumerate(ROLE_HIERARCHY)}

# Roles whose data access is bounded by an organization
TENANT_SCOPED_ROLES: frozenset[Role] = frozenset({Role.ORG_ADMIN, Role.ORG_USER})

def get_role_level(role: Union[Role, str]) -> int:
    """
    Get the hierarchy level for a role.

    Args:
        role: Role (or its stored string value) to get level for

    Returns:
        Integer level (higher = more authority)

    Raises:
        ValueError: If the value is not a role at all
    """
    return _ROLE_LEVELS[Role(role)]


def is_legacy_role(role: Union[Role, str]) -> bool:
    """True for the phased-out role that should be migrated to ORG_USER."""
    return Role(role) == Role.LEGACY_USER
