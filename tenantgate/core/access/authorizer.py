"""
Request Authorizer Module
=========================

Composition root of the authorization engine.

Each request ends in exactly one of three states:
- ALLOWED: carries the scope filter the data layer must apply
- DENIED: carries one of a fixed set of reasons (401/403)
- ERROR: a misconfiguration, surfaced as a generic 500

The authorizer holds no mutable state; every call depends only on the
actor and the route requirement passed in. It never executes queries.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from fastapi import status

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.boundary import requires_organization
from tenantgate.core.access.evaluator import AccessEvaluator
from tenantgate.core.access.requirements import (
    DEFAULT_ROUTE_REQUIREMENTS,
    RouteRequirement,
    RouteRequirementTable,
)
from tenantgate.core.access.scope import ScopeFilter, build_scope, describe_scope
from tenantgate.core.exceptions import AuthorizationConfigurationError
from tenantgate.core.logging import get_logger, security_logger

# Initialize logger
logger = get_logger(__name__)

# Supplied by the authentication layer; returns None when the token
# cannot be verified. Callers own any timeout on this lookup.
ActorResolver = Callable[[Optional[str]], Optional[Actor]]


class DecisionOutcome(str, Enum):
    """Terminal states of an authorization decision."""

    ALLOWED = "allowed"
    DENIED = "denied"
    ERROR = "error"


class DenialReason(str, Enum):
    """Reasons shown to the caller on denial."""

    NO_SESSION = "no session"
    INSUFFICIENT_ROLE = "insufficient role"
    INSUFFICIENT_PERMISSION = "insufficient permission"
    ORGANIZATION_REQUIRED = "organization required"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Result of authorizing one request."""

    outcome: DecisionOutcome
    actor: Optional[Actor] = None
    scope: Optional[ScopeFilter] = None
    reason: Optional[DenialReason] = None
    error: Optional[AuthorizationConfigurationError] = None

    @classmethod
    def allowed(cls, actor: Actor, scope: ScopeFilter) -> "AuthorizationDecision":
        return cls(outcome=DecisionOutcome.ALLOWED, actor=actor, scope=scope)

    @classmethod
    def denied(cls, reason: DenialReason, actor: Optional[Actor] = None) -> "AuthorizationDecision":
        return cls(outcome=DecisionOutcome.DENIED, actor=actor, reason=reason)

    @classmethod
    def failed(
        cls,
        error: AuthorizationConfigurationError,
        actor: Optional[Actor] = None,
    ) -> "AuthorizationDecision":
        return cls(outcome=DecisionOutcome.ERROR, actor=actor, error=error)

    @property
    def is_allowed(self) -> bool:
        return self.outcome is DecisionOutcome.ALLOWED

    @property
    def status_code(self) -> int:
        """HTTP status the web layer should answer with."""
        if self.outcome is DecisionOutcome.ALLOWED:
            return status.HTTP_200_OK
        if self.outcome is DecisionOutcome.ERROR:
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        if self.reason is DenialReason.NO_SESSION:
            return status.HTTP_401_UNAUTHORIZED
        return status.HTTP_403_FORBIDDEN


class RequestAuthorizer:
    """
    Decides allow/deny for a request and derives its scope filter.

    Usage:
        authorizer = RequestAuthorizer(AccessEvaluator(), DEFAULT_ROUTE_REQUIREMENTS)
        decision = authorizer.authorize_path(actor, "/api/business-admin/users")
        if decision.is_allowed:
            query = scoped_query(db, ThreatModel, decision.scope)
    """

    def __init__(
        self,
        evaluator: Optional[AccessEvaluator] = None,
        routes: RouteRequirementTable = DEFAULT_ROUTE_REQUIREMENTS,
        actor_resolver: Optional[ActorResolver] = None,
    ):
        self.evaluator = evaluator or AccessEvaluator()
        self.routes = routes
        self.actor_resolver = actor_resolver

    def authorize(
        self,
        actor: Optional[Actor],
        requirement: RouteRequirement,
        resource: str = "unknown",
    ) -> AuthorizationDecision:
        """
        Evaluate a route requirement for an actor.

        Args:
            actor: Resolved actor, or None when no session could be verified
            requirement: Requirement declared for the route
            resource: Path or resource name, for audit logs only

        Returns:
            AuthorizationDecision in one of the three terminal states
        """
        if actor is None:
            return self._deny(DenialReason.NO_SESSION, None, resource)

        if requirement.roles is not None and actor.role not in requirement.roles:
            return self._deny(DenialReason.INSUFFICIENT_ROLE, actor, resource)

        if requirement.permission is not None:
            try:
                permitted = self.evaluator.has_permission(actor.role, requirement.permission)
            except AuthorizationConfigurationError as e:
                return self._fail(e, actor, resource)
            if not permitted:
                return self._deny(DenialReason.INSUFFICIENT_PERMISSION, actor, resource)

        if requirement.requires_organization and requires_organization(actor):
            return self._deny(DenialReason.ORGANIZATION_REQUIRED, actor, resource)

        try:
            scope = build_scope(actor)
        except AuthorizationConfigurationError as e:
            return self._fail(e, actor, resource)

        logger.debug(
            "request_authorized",
            actor_id=actor.id,
            role=actor.role.value,
            resource=resource,
            scope=describe_scope(scope),
        )
        return AuthorizationDecision.allowed(actor, scope)

    def authorize_path(self, actor: Optional[Actor], path: str) -> AuthorizationDecision:
        """Look up the requirement for a path and evaluate it."""
        return self.authorize(actor, self.routes.lookup(path), resource=path)

    def authorize_token(self, raw_token: Optional[str], path: str) -> AuthorizationDecision:
        """
        Resolve the actor from a raw session token, then authorize the path.

        Raises:
            RuntimeError: If no actor resolver was configured
        """
        if self.actor_resolver is None:
            raise RuntimeError("RequestAuthorizer has no actor resolver configured")
        actor = self.actor_resolver(raw_token) if raw_token else None
        return self.authorize_path(actor, path)

    # --------------------------
    # Internal helpers
    # --------------------------

    @staticmethod
    def _deny(
        reason: DenialReason,
        actor: Optional[Actor],
        resource: str,
    ) -> AuthorizationDecision:
        security_logger.log_access_denied(
            actor_id=actor.id if actor else None,
            reason=reason.value,
            resource=resource,
            role=actor.role.value if actor else None,
        )
        return AuthorizationDecision.denied(reason, actor)

    @staticmethod
    def _fail(
        error: AuthorizationConfigurationError,
        actor: Optional[Actor],
        resource: str,
    ) -> AuthorizationDecision:
        security_logger.log_misconfiguration(
            actor_id=actor.id if actor else None,
            error=error,
            resource=resource,
            details=error.details,
        )
        return AuthorizationDecision.failed(error, actor)
