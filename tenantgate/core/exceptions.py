"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Two families matter to the authorization engine:
- Denials (401/403): expected policy outcomes, safe to show the caller.
- Misconfigurations (500): programming or data-integrity errors that
  must fail closed and never be reported as a policy denial.

Usage:
    raise AuthorizationError("Insufficient permissions")
    raise MissingOrganizationContextError(actor_id="u-1", role="BUSINESS_ADMIN")
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class TenantGateException(Exception):
    """
    Base exception class for TenantGate.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ==========================
# Authentication Exceptions
# ==========================

class AuthenticationError(TenantGateException):
    """Raised when no verifiable session is present."""

    def __init__(
        self,
        message: str = "Could not validate credentials",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


# ==========================
# Authorization Exceptions
# ==========================

class AuthorizationError(TenantGateException):
    """Raised when an actor lacks the required role or permission."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class TenantIsolationError(AuthorizationError):
    """Raised when tenant isolation is violated."""

    def __init__(self):
        super().__init__(
            message="Access denied: resource belongs to different organization"
        )


class RoleAssignmentError(AuthorizationError):
    """Raised when an actor may not grant the requested role."""

    def __init__(self, requested_role: str):
        super().__init__(
            message="You are not allowed to assign this role",
            details={"requested_role": requested_role},
        )


# ==========================
# Misconfiguration Exceptions
# ==========================

class AuthorizationConfigurationError(TenantGateException):
    """
    Raised for programming or data-integrity errors in authorization.

    Always maps to a generic 500; the message is for logs only.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class UnknownPermissionError(AuthorizationConfigurationError):
    """Raised when route code names a permission missing from the table."""

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(
            message=f"Unknown permission: {permission}",
            details={"permission": permission},
        )


class MissingOrganizationContextError(AuthorizationConfigurationError):
    """Raised when a tenant-scoped role reaches scope building without an organization."""

    def __init__(self, actor_id: str, role: str):
        self.actor_id = actor_id
        self.role = role
        super().__init__(
            message=f"Actor {actor_id} with role {role} has no organization",
            details={"actor_id": actor_id, "role": role},
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(TenantGateException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="User", identifier=identifier)


class ValidationError(TenantGateException):
    """Raised when a request is well-formed but not acceptable."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


# ==========================
# Helper Functions
# ==========================

def exception_to_http_exception(exc: TenantGateException) -> HTTPException:
    """
    Convert a TenantGateException to FastAPI HTTPException.

    Misconfiguration errors are collapsed to a generic message so internal
    state never reaches the caller.
    """
    if isinstance(exc, AuthorizationConfigurationError):
        return HTTPException(
            status_code=exc.status_code,
            detail={"message": "An unexpected error occurred", "details": {}},
        )
    return HTTPException(
        status_code=exc.status_code,
        detail={
            "message": exc.message,
            "details": exc.details,
        }
    )
