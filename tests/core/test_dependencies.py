"""
Handler Dependency Unit Tests
=============================

Tests for require_permission, require_role and the exception
conversion they rely on.
"""

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.evaluator import AccessEvaluator
from tenantgate.core.access.permissions import Permission, PermissionTable
from tenantgate.core.dependencies.auth import get_decision
from tenantgate.core.dependencies.rbac import require_permission, require_role
from tenantgate.core.exceptions import (
    AuthenticationError,
    MissingOrganizationContextError,
    RoleAssignmentError,
    exception_to_http_exception,
)
from tenantgate.models.role_enum import Role


pytestmark = pytest.mark.rbac


def _request(path: str = "/api/users/manage/u/role") -> Request:
    return Request({
        "type": "http",
        "method": "PUT",
        "path": path,
        "query_string": b"",
        "headers": [],
    })


ORG_ADMIN = Actor(id="a", role=Role.ORG_ADMIN, organization_id="acme")
ORG_USER = Actor(id="u", role=Role.ORG_USER, organization_id="acme")


class TestRequirePermission:
    """Tests for the permission dependency."""

    def test_holder_passes_through(self):
        # Arrange
        checker = require_permission(Permission.PROMOTE_DEMOTE_IN_ORG)

        # Act
        actor = checker(_request(), ORG_ADMIN)

        # Assert
        assert actor is ORG_ADMIN

    def test_non_holder_gets_403(self):
        # Arrange
        checker = require_permission(Permission.PROMOTE_DEMOTE_IN_ORG)

        # Act & Assert
        with pytest.raises(HTTPException) as exc_info:
            checker(_request(), ORG_USER)

        assert exc_info.value.status_code == 403

    def test_unknown_permission_gets_generic_500(self):
        # Arrange
        evaluator = AccessEvaluator(PermissionTable({Permission.VIEW_OWN_DATA: [Role.ORG_USER]}))
        checker = require_permission(Permission.PROMOTE_DEMOTE_IN_ORG, evaluator)

        # Act & Assert
        with pytest.raises(HTTPException) as exc_info:
            checker(_request(), ORG_ADMIN)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == {"message": "An unexpected error occurred", "details": {}}


class TestRequireRole:
    """Tests for the exact-role dependency."""

    def test_listed_role_passes(self):
        assert require_role(Role.ORG_ADMIN, Role.PLATFORM_ADMIN)(_request(), ORG_ADMIN) is ORG_ADMIN

    def test_unlisted_role_gets_403(self):
        # Act & Assert
        with pytest.raises(HTTPException) as exc_info:
            require_role(Role.PLATFORM_ADMIN)(_request(), ORG_ADMIN)

        assert exc_info.value.status_code == 403


class TestExceptionConversion:
    """Tests for exception_to_http_exception."""

    def test_denial_keeps_message(self):
        # Act
        http_exc = exception_to_http_exception(RoleAssignmentError("BUSINESS_ADMIN"))

        # Assert
        assert http_exc.status_code == 403
        assert http_exc.detail["details"] == {"requested_role": "BUSINESS_ADMIN"}

    def test_misconfiguration_hides_internal_state(self):
        # Act
        http_exc = exception_to_http_exception(MissingOrganizationContextError("orphan", "BUSINESS_ADMIN"))

        # Assert
        assert http_exc.status_code == 500
        assert "orphan" not in str(http_exc.detail)


class TestGetDecision:
    """Tests for reading the middleware's decision in handlers."""

    def test_unauthorized_request_rejected(self):
        # Act & Assert
        with pytest.raises(AuthenticationError) as exc_info:
            get_decision(_request())

        assert exc_info.value.status_code == 401
