"""
Authorization & Multi-Tenant Scoping Engine.

Usage:
    from tenantgate.core.access import Actor, RequestAuthorizer
"""

from .actor import Actor, ResourceOwner
from .authorizer import (
    AuthorizationDecision,
    DecisionOutcome,
    DenialReason,
    RequestAuthorizer,
)
from .boundary import (
    can_access_resource,
    can_manage_user,
    requires_organization,
    same_tenant,
    validate_organization_context,
)
from .evaluator import AccessEvaluator, can_assign_role, can_manage, has_permission
from .hierarchy import ROLE_HIERARCHY, TENANT_SCOPED_ROLES, get_role_level, is_legacy_role
from .permissions import DEFAULT_PERMISSION_TABLE, Permission, PermissionTable
from .requirements import DEFAULT_ROUTE_REQUIREMENTS, RouteRequirement, RouteRequirementTable
from .scope import OrganizationScoped, ScopeFilter, SelfScoped, Unrestricted, build_scope

__all__ = [
    "AccessEvaluator",
    "Actor",
    "AuthorizationDecision",
    "DEFAULT_PERMISSION_TABLE",
    "DEFAULT_ROUTE_REQUIREMENTS",
    "DecisionOutcome",
    "DenialReason",
    "OrganizationScoped",
    "Permission",
    "PermissionTable",
    "ROLE_HIERARCHY",
    "RequestAuthorizer",
    "ResourceOwner",
    "RouteRequirement",
    "RouteRequirementTable",
    "ScopeFilter",
    "SelfScoped",
    "TENANT_SCOPED_ROLES",
    "Unrestricted",
    "build_scope",
    "can_access_resource",
    "can_assign_role",
    "can_manage",
    "can_manage_user",
    "get_role_level",
    "has_permission",
    "is_legacy_role",
    "requires_organization",
    "same_tenant",
    "validate_organization_context",
]
