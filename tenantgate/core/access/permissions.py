"""
Permission Table Module
=======================

Static mapping from named permissions to the roles that hold them.

The table is built once at process start and is read-only afterwards,
so concurrent reads need no locking. It is handed to the evaluator
explicitly; tests may build their own table instead of patching globals.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Union

from tenantgate.core.exceptions import (
    AuthorizationConfigurationError,
    UnknownPermissionError,
)
from tenantgate.models.role_enum import Role


class Permission(str, Enum):
    """Named capabilities checked by route requirements and handlers."""

    # Platform-level permissions
    MANAGE_ALL_ORGANIZATIONS = "MANAGE_ALL_ORGANIZATIONS"
    MANAGE_ALL_USERS = "MANAGE_ALL_USERS"
    VIEW_ALL_DATA = "VIEW_ALL_DATA"
    CREATE_ORGANIZATION = "CREATE_ORGANIZATION"
    ASSIGN_ANY_ROLE = "ASSIGN_ANY_ROLE"

    # Organization-level permissions
    MANAGE_ORG_USERS = "MANAGE_ORG_USERS"
    VIEW_ORG_USERS = "VIEW_ORG_USERS"
    PROMOTE_DEMOTE_IN_ORG = "PROMOTE_DEMOTE_IN_ORG"
    CREATE_BUSINESS_USER = "CREATE_BUSINESS_USER"
    VIEW_ORG_ACTIVITY_LOGS = "VIEW_ORG_ACTIVITY_LOGS"

    # Data access permissions
    VIEW_OWN_DATA = "VIEW_OWN_DATA"
    MANAGE_OWN_DATA = "MANAGE_OWN_DATA"
    VIEW_ORG_DATA = "VIEW_ORG_DATA"

    # Interface permissions
    ACCESS_ADMIN_INTERFACE = "ACCESS_ADMIN_INTERFACE"
    ACCESS_BUSINESS_ADMIN_INTERFACE = "ACCESS_BUSINESS_ADMIN_INTERFACE"


_PLATFORM_ONLY = (Role.PLATFORM_ADMIN,)
_ADMINS = (Role.PLATFORM_ADMIN, Role.ORG_ADMIN)
_EVERYONE = (Role.PLATFORM_ADMIN, Role.ORG_ADMIN, Role.ORG_USER, Role.LEGACY_USER)


class PermissionTable:
    """
    Immutable permission -> holders mapping.

    Usage:
        table = PermissionTable({Permission.VIEW_OWN_DATA: [Role.ORG_USER]})
        table.holders(Permission.VIEW_OWN_DATA)
    """

    def __init__(self, entries: Mapping[Permission, Iterable[Role]]):
        """
        Build and validate the table.

        Raises:
            AuthorizationConfigurationError: If an entry is empty or names
                something that is not a role.
        """
        frozen: dict[Permission, frozenset[Role]] = {}
        for permission, roles in entries.items():
            permission = Permission(permission)
            holders = frozenset(roles)
            if not holders:
                raise AuthorizationConfigurationError(
                    f"Permission {permission.value} has no holders",
                    details={"permission": permission.value},
                )
            invalid = [role for role in holders if not isinstance(role, Role)]
            if invalid:
                raise AuthorizationConfigurationError(
                    f"Permission {permission.value} lists unknown roles",
                    details={"permission": permission.value, "roles": [str(r) for r in invalid]},
                )
            frozen[permission] = holders
        self._entries = MappingProxyType(frozen)

    def holders(self, permission: Union[Permission, str]) -> frozenset[Role]:
        """
        Get the set of roles holding a permission.

        Raises:
            UnknownPermissionError: If the name is not a permission or the
                permission is not configured in this table
        """
        try:
            key = Permission(permission)
        except ValueError:
            raise UnknownPermissionError(str(permission)) from None

        try:
            return self._entries[key]
        except KeyError:
            raise UnknownPermissionError(key.value) from None

    def __contains__(self, permission: object) -> bool:
        return permission in self._entries

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def as_mapping(self) -> Mapping[Permission, frozenset[Role]]:
        """Read-only view of the table."""
        return self._entries


DEFAULT_PERMISSION_TABLE = PermissionTable({
    Permission.MANAGE_ALL_ORGANIZATIONS: _PLATFORM_ONLY,
    Permission.MANAGE_ALL_USERS: _PLATFORM_ONLY,
    Permission.VIEW_ALL_DATA: _PLATFORM_ONLY,
    Permission.CREATE_ORGANIZATION: _PLATFORM_ONLY,
    Permission.ASSIGN_ANY_ROLE: _PLATFORM_ONLY,

    Permission.MANAGE_ORG_USERS: _ADMINS,
    Permission.VIEW_ORG_USERS: _ADMINS,
    Permission.PROMOTE_DEMOTE_IN_ORG: _ADMINS,
    Permission.CREATE_BUSINESS_USER: _ADMINS,
    Permission.VIEW_ORG_ACTIVITY_LOGS: _ADMINS,

    Permission.VIEW_OWN_DATA: _EVERYONE,
    Permission.MANAGE_OWN_DATA: _EVERYONE,
    Permission.VIEW_ORG_DATA: _ADMINS,

    Permission.ACCESS_ADMIN_INTERFACE: _PLATFORM_ONLY,
    Permission.ACCESS_BUSINESS_ADMIN_INTERFACE: _ADMINS,
})
