"""
Main Application Entry Point
============================

Responsibilities:
- Initialize FastAPI application
- Build the request authorizer and its actor resolver
- Configure middleware stack
- Register API routers
- Set up exception handlers
- Provide health check endpoints
"""

from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from tenantgate.core.access.authorizer import RequestAuthorizer
from tenantgate.core.access.evaluator import AccessEvaluator
from tenantgate.core.access.requirements import DEFAULT_ROUTE_REQUIREMENTS
from tenantgate.core.config import settings
from tenantgate.core.exceptions import AuthorizationConfigurationError, TenantGateException
from tenantgate.core.logging import configure_logging, get_logger
from tenantgate.db.session import SessionLocal, check_database_connection
from tenantgate.middleware.auth_middleware import AuthorizationMiddleware
from tenantgate.routes import (
    admin_routes,
    business_admin_routes,
    threat_model_routes,
    user_management_routes,
)
from tenantgate.services.actor_service import DatabaseActorResolver, TokenActorResolver

configure_logging()

# Initialize logger
logger = get_logger(__name__)


def build_authorizer(session_factory: Callable[[], Session] = SessionLocal) -> RequestAuthorizer:
    """
    Build the request authorizer used by the middleware.

    Args:
        session_factory: Session factory for re-reading actor records

    Returns:
        RequestAuthorizer with the default permission and route tables
    """
    token_resolver = TokenActorResolver(settings)
    if settings.REFRESH_ACTOR_FROM_DATABASE:
        resolver = DatabaseActorResolver(session_factory, token_resolver)
    else:
        resolver = token_resolver
    return RequestAuthorizer(
        evaluator=AccessEvaluator(),
        routes=DEFAULT_ROUTE_REQUIREMENTS,
        actor_resolver=resolver,
    )


# =====================================
# Application Lifespan Handler
# =====================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    logger.info(
        "application_starting",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )
    try:
        yield
    finally:
        logger.info("application_shutdown_complete")


# =====================================
# FastAPI App Initialization
# =====================================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    TenantGate - Authorization & Multi-Tenant Scoping

    Roles (in order of increasing authority):
    * `USER`: Legacy unaffiliated user, own data only
    * `BUSINESS_USER`: Organization member, own data only
    * `BUSINESS_ADMIN`: Organization administrator, organization data
    * `ADMIN`: Platform administrator, all data
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

app.state.authorizer = build_authorizer()

app.add_middleware(AuthorizationMiddleware)


# =====================================
# Exception Handlers
# =====================================

@app.exception_handler(TenantGateException)
async def tenantgate_exception_handler(request: Request, exc: TenantGateException):
    """
    Convert custom exceptions to HTTP responses.

    Misconfiguration errors are logged with full context and answered
    with a generic 500.
    """
    if isinstance(exc, AuthorizationConfigurationError):
        logger.error(
            "authorization_configuration_error",
            exception_type=type(exc).__name__,
            message=exc.message,
            details=exc.details,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected error occurred", "details": {}},
        )

    logger.warning(
        "tenantgate_exception",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.message,
            "details": exc.details,
        },
    )


# =====================================
# Register Routers
# =====================================

app.include_router(admin_routes.router)
app.include_router(business_admin_routes.router)
app.include_router(user_management_routes.router)
app.include_router(threat_model_routes.router)


# =====================================
# Health Check Endpoints
# =====================================

@app.get("/", tags=["Health"], summary="Basic Health Check")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health", tags=["Health"], summary="Detailed Health Check")
def detailed_health_check():
    """Health status including database connectivity."""
    db_healthy = check_database_connection()
    return {
        "status": "healthy" if db_healthy else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "checks": {
            "database": "healthy" if db_healthy else "unhealthy",
        },
    }
