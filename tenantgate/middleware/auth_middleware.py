"""
Authorization Middleware Module
===============================

Starlette middleware that authorizes every non-public request.

Features:
- Request ID generation for tracing
- Bearer token extraction
- Route requirement lookup and authorization decision
- Scope filter attached to request.state for handlers
- Request timing

Denials answer 401/403 with a fixed reason. Misconfigurations answer a
generic 500 and never reveal which check failed.
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from tenantgate.core.access.authorizer import (
    AuthorizationDecision,
    DecisionOutcome,
    RequestAuthorizer,
)
from tenantgate.core.logging import actor_id_context, get_logger, request_id_context

# Initialize logger
logger = get_logger(__name__)


def extract_bearer_token(request: Request) -> Optional[str]:
    """
    Get the bearer token from the Authorization header.

    Returns:
        Token string, or None if the header is missing or malformed
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """
    Authorization middleware.

    The authorizer is read from app.state.authorizer on every request,
    so it can be replaced at startup or in tests.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Authorize the request and forward it on success.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/route handler

        Returns:
            HTTP response
        """
        request_id = str(uuid.uuid4())
        request_id_context.set(request_id)
        actor_id_context.set(None)

        request.state.request_id = request_id
        request.state.decision = None
        request.state.actor = None
        request.state.scope = None

        start_time = time.perf_counter()
        authorizer: RequestAuthorizer = request.app.state.authorizer
        path = request.url.path

        if authorizer.routes.is_public(path):
            response = await call_next(request)
            return self._finish(request, response, start_time, log=False)

        token = extract_bearer_token(request)
        # Actor resolution may block on the session store
        decision = await run_in_threadpool(authorizer.authorize_token, token, path)

        if decision.outcome is DecisionOutcome.ALLOWED:
            request.state.decision = decision
            request.state.actor = decision.actor
            request.state.scope = decision.scope
            actor_id_context.set(decision.actor.id)
            response = await call_next(request)
        else:
            response = self._reject(decision)

        return self._finish(request, response, start_time)

    @staticmethod
    def _reject(decision: AuthorizationDecision) -> JSONResponse:
        """Build the response for a denied or failed decision."""
        if decision.outcome is DecisionOutcome.ERROR:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "An unexpected error occurred", "details": {}},
            )

        headers = {}
        if decision.status_code == status.HTTP_401_UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"
            message = "Unauthorized"
        else:
            message = "Forbidden"

        return JSONResponse(
            status_code=decision.status_code,
            content={"message": message, "details": {"reason": decision.reason.value}},
            headers=headers,
        )

    def _finish(
        self,
        request: Request,
        response: Response,
        start_time: float,
        log: bool = True,
    ) -> Response:
        process_time = time.perf_counter() - start_time
        response.headers["X-Request-ID"] = request.state.request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        if log:
            self._log_request(request, response, process_time)
        return response

    @staticmethod
    def _log_request(request: Request, response: Response, process_time: float) -> None:
        actor = getattr(request.state, "actor", None)
        log_data = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round(process_time * 1000, 2),
            "actor_id": actor.id if actor else None,
            "organization_id": actor.organization_id if actor else None,
        }

        if response.status_code >= 500:
            logger.error("request_completed_with_error", **log_data)
        elif response.status_code >= 400:
            logger.warning("request_completed_with_client_error", **log_data)
        else:
            logger.info("request_completed", **log_data)
