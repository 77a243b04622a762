"""
Route Requirements Module
=========================

Static per-route access declarations, matched by path prefix. A "*"
segment in a prefix stands for any one path segment.

Declared once at startup and never mutated. The first matching prefix
wins, so more specific prefixes must be listed before broader ones.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from tenantgate.core.access.permissions import Permission
from tenantgate.models.role_enum import Role


@dataclass(frozen=True)
class RouteRequirement:
    """
    Access declaration for one route prefix.

    Attributes:
        roles: Acceptable roles, or None for any authenticated role
        permission: Permission the actor's role must hold, or None
        requires_organization: Reject tenant-scoped roles without an
            organization assignment
    """

    roles: Optional[frozenset[Role]] = None
    permission: Optional[Permission] = None
    requires_organization: bool = False


# Authenticated, no further restriction
OPEN_REQUIREMENT = RouteRequirement()

ALL_ROLES: frozenset[Role] = frozenset(Role)


def _matches_prefix(path: str, prefix: str) -> bool:
    """
    Segment-aware prefix match: "/admin" matches "/admin/x" but not
    "/administrators". A "*" segment matches any single path segment.
    """
    if prefix == "/":
        return True
    prefix = prefix.rstrip("/")
    if "*" not in prefix:
        return path == prefix or path.startswith(prefix + "/")

    wanted = prefix.split("/")
    actual = path.split("/")
    if len(actual) < len(wanted):
        return False
    return all(w == "*" or w == a for w, a in zip(wanted, actual))


class RouteRequirementTable:
    """
    Ordered prefix -> requirement table.

    Usage:
        table = RouteRequirementTable([("/api/admin", RouteRequirement(roles=frozenset({Role.PLATFORM_ADMIN})))])
        table.lookup("/api/admin/users")
    """

    def __init__(
        self,
        entries: Iterable[Tuple[str, RouteRequirement]],
        public_paths: Iterable[str] = (),
    ):
        self._entries: tuple[tuple[str, RouteRequirement], ...] = tuple(entries)
        self._public_paths: tuple[str, ...] = tuple(public_paths)

    @property
    def entries(self) -> tuple[tuple[str, RouteRequirement], ...]:
        return self._entries

    def lookup(self, path: str) -> RouteRequirement:
        """
        Get the requirement for a request path.

        Returns:
            The first matching entry's requirement, or OPEN_REQUIREMENT
        """
        for prefix, requirement in self._entries:
            if _matches_prefix(path, prefix):
                return requirement
        return OPEN_REQUIREMENT

    def is_public(self, path: str) -> bool:
        """Check if a path needs no session at all."""
        for public in self._public_paths:
            if public == "/":
                if path == "/":
                    return True
            elif _matches_prefix(path, public):
                return True
        return False


PUBLIC_PATHS: tuple[str, ...] = (
    "/",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/api/auth",
    "/login",
    "/register",
)


DEFAULT_ROUTE_REQUIREMENTS = RouteRequirementTable(
    [
        # Platform admin surface
        ("/admin", RouteRequirement(permission=Permission.ACCESS_ADMIN_INTERFACE)),
        ("/api/admin", RouteRequirement(roles=frozenset({Role.PLATFORM_ADMIN}))),

        # Organization admin API
        (
            "/api/business-admin",
            RouteRequirement(
                permission=Permission.ACCESS_BUSINESS_ADMIN_INTERFACE,
                requires_organization=True,
            ),
        ),
        ("/api/organizations", RouteRequirement(permission=Permission.MANAGE_ALL_ORGANIZATIONS)),
        (
            "/api/users/manage",
            RouteRequirement(
                permission=Permission.MANAGE_ORG_USERS,
                requires_organization=True,
            ),
        ),
        (
            "/api/users/*/manage",
            RouteRequirement(
                permission=Permission.MANAGE_ORG_USERS,
                requires_organization=True,
            ),
        ),

        # General authenticated routes
        ("/dashboard", RouteRequirement(roles=ALL_ROLES)),
        ("/findings", RouteRequirement(roles=ALL_ROLES)),
        ("/reports", RouteRequirement(roles=ALL_ROLES)),
        ("/threat-models", RouteRequirement(roles=ALL_ROLES)),
        ("/api/threat-models", RouteRequirement(roles=ALL_ROLES)),
        ("/api/findings", RouteRequirement(roles=ALL_ROLES)),
        ("/api/reports", RouteRequirement(roles=ALL_ROLES)),
    ],
    public_paths=PUBLIC_PATHS,
)
