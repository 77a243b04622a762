"""
Access Evaluator Module
=======================

Pure decision functions over roles:
- has_permission: does a role hold a named permission?
- can_manage: may one role act upon users of another role?
- can_assign_role: may one role grant a specific role label?

can_manage and can_assign_role are separate relations on purpose.
An ORG_ADMIN can manage an ORG_USER or a LEGACY_USER, but may only
ever grant ORG_USER.
"""

from typing import Union

from tenantgate.core.access.hierarchy import get_role_level
from tenantgate.core.access.permissions import (
    DEFAULT_PERMISSION_TABLE,
    Permission,
    PermissionTable,
)
from tenantgate.models.role_enum import Role


# Target role -> roles allowed to grant it. Closed: roles missing here
# cannot be granted by anyone.
ROLE_ASSIGNMENT_POLICY: dict[Role, frozenset[Role]] = {
    Role.PLATFORM_ADMIN: frozenset({Role.PLATFORM_ADMIN}),
    Role.ORG_ADMIN: frozenset({Role.PLATFORM_ADMIN}),
    Role.ORG_USER: frozenset({Role.PLATFORM_ADMIN, Role.ORG_ADMIN}),
    # Being phased out, must not be newly granted by tenant admins
    Role.LEGACY_USER: frozenset({Role.PLATFORM_ADMIN}),
}


class AccessEvaluator:
    """
    Role-level access decisions backed by an injected permission table.

    Usage:
        evaluator = AccessEvaluator()
        evaluator.has_permission(Role.ORG_ADMIN, Permission.VIEW_ORG_USERS)
    """

    def __init__(self, permission_table: PermissionTable = DEFAULT_PERMISSION_TABLE):
        self.permission_table = permission_table

    def has_permission(self, role: Role, permission: Union[Permission, str]) -> bool:
        """
        Check if a role holds a permission.

        Raises:
            UnknownPermissionError: If the permission is not configured
        """
        return role in self.permission_table.holders(permission)

    @staticmethod
    def can_manage(manager_role: Role, target_role: Role) -> bool:
        """
        Check if a role may act upon a user holding another role.

        Strictly greater rank is required, so no role manages its peers
        or itself.
        """
        return get_role_level(manager_role) > get_role_level(target_role)

    @staticmethod
    def can_assign_role(assigner_role: Role, target_role: Union[Role, str]) -> bool:
        """
        Check if a role may grant the target role to someone.

        Unknown target values are refused rather than permitted.
        """
        try:
            target = Role(target_role)
        except ValueError:
            return False
        allowed = ROLE_ASSIGNMENT_POLICY.get(target)
        if allowed is None:
            return False
        return assigner_role in allowed


default_evaluator = AccessEvaluator()


# =====================================
# Convenience Functions
# =====================================

def has_permission(role: Role, permission: Union[Permission, str]) -> bool:
    """Check a permission against the default table."""
    return default_evaluator.has_permission(role, permission)


def can_manage(manager_role: Role, target_role: Role) -> bool:
    """Check the rank-based manage relation."""
    return AccessEvaluator.can_manage(manager_role, target_role)


def can_assign_role(assigner_role: Role, target_role: Union[Role, str]) -> bool:
    """Check the role-grant policy."""
    return AccessEvaluator.can_assign_role(assigner_role, target_role)
