"""
User Schemas Module
===================

Pydantic models for user-management request/response validation.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tenantgate.models.role_enum import Role


class UserResponse(BaseModel):
    """User response schema."""

    id: str = Field(..., description="User id")
    email: str = Field(..., description="User email address")
    role: Role = Field(..., description="User role")
    organization_id: Optional[str] = Field(default=None, description="Organization id")
    is_active: bool = Field(default=True, description="Account active status")

    model_config = ConfigDict(from_attributes=True)


class UserDetailResponse(UserResponse):
    """User response including whether the caller may manage this user."""

    can_manage: bool = Field(..., description="Caller outranks this user within the tenant")


class UserListResponse(BaseModel):
    """List of users visible to the caller."""

    users: List[UserResponse]
    total: int


class RoleChangeRequest(BaseModel):
    """Request to change a user's role."""

    role: Role = Field(..., description="Role to assign")
    organization_id: Optional[str] = Field(
        default=None,
        description="Organization to place the user in (tenant roles only)",
    )


class StatusChangeRequest(BaseModel):
    """Request to suspend or reactivate a user."""

    is_active: bool = Field(..., description="False suspends the account")
