"""
Common Schemas Module
=====================

Shared response shapes.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(
        ...,
        description="Error message"
    )
    details: Optional[dict] = Field(
        default=None,
        description="Additional error details"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Forbidden",
                "details": {"reason": "insufficient permission"},
            }
        }
    )


class ScopeResponse(BaseModel):
    """Data-access scope attached to the request."""

    kind: str = Field(..., description="unrestricted, organization or self")
    organization_id: Optional[str] = Field(default=None)
    actor_id: Optional[str] = Field(default=None)
