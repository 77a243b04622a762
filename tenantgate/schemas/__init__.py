"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from tenantgate.schemas import UserResponse, ErrorResponse
"""

from tenantgate.schemas.common import ErrorResponse, ScopeResponse
from tenantgate.schemas.organization import OrganizationListResponse, OrganizationResponse
from tenantgate.schemas.threat_model import ThreatModelListResponse, ThreatModelResponse
from tenantgate.schemas.user import (
    RoleChangeRequest,
    StatusChangeRequest,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "OrganizationListResponse",
    "OrganizationResponse",
    "RoleChangeRequest",
    "ScopeResponse",
    "StatusChangeRequest",
    "ThreatModelListResponse",
    "ThreatModelResponse",
    "UserDetailResponse",
    "UserListResponse",
    "UserResponse",
]
