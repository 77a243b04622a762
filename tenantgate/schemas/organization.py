"""
Organization Schemas Module
===========================
"""

from typing import List

from pydantic import BaseModel, ConfigDict


class OrganizationResponse(BaseModel):
    """Organization response schema."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class OrganizationListResponse(BaseModel):
    """List of organizations."""

    organizations: List[OrganizationResponse]
    total: int
