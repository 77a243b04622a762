"""
Authentication Dependencies Module
==================================

FastAPI dependencies exposing the authorization result the middleware
attached to the request.

Usage:
    @router.get("/threat-models")
    def list_threat_models(scope: ScopeFilter = Depends(get_scope)):
        ...
"""

from fastapi import Request

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.authorizer import AuthorizationDecision
from tenantgate.core.access.scope import ScopeFilter
from tenantgate.core.exceptions import AuthenticationError
from tenantgate.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


def get_decision(request: Request) -> AuthorizationDecision:
    """
    Get the allowed decision for the current request.

    Raises:
        AuthenticationError: If the request was never authorized
    """
    decision = getattr(request.state, "decision", None)
    if decision is None or not decision.is_allowed:
        logger.warning("unauthorized_handler_access", path=request.url.path)
        raise AuthenticationError()
    return decision


def get_current_actor(request: Request) -> Actor:
    """Get the authenticated actor for the current request."""
    return get_decision(request).actor


def get_scope(request: Request) -> ScopeFilter:
    """Get the scope filter the handler must apply to its queries."""
    return get_decision(request).scope
