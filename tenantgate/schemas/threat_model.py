"""
Threat Model Schemas Module
===========================
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from tenantgate.schemas.common import ScopeResponse


class ThreatModelResponse(BaseModel):
    """Threat model response schema."""

    id: str
    title: str
    user_id: str = Field(..., description="Owning user")

    model_config = ConfigDict(from_attributes=True)


class ThreatModelListResponse(BaseModel):
    """Scoped list of threat models."""

    threat_models: List[ThreatModelResponse]
    total: int
    scope: ScopeResponse
