"""
Threat Model Routes Module
==========================

Scoped read endpoints for threat models.

Security:
- Route prefix requires any authenticated role
- Every query goes through the request's scope filter
- Rows outside the scope are reported as not found
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenantgate.core.access.scope import ScopeFilter, describe_scope
from tenantgate.core.dependencies.auth import get_scope
from tenantgate.core.exceptions import NotFoundError
from tenantgate.core.tenant.scoped_query import ScopedQuery
from tenantgate.db.session import get_db
from tenantgate.models.threat_model import ThreatModel
from tenantgate.schemas import ErrorResponse, ThreatModelListResponse, ThreatModelResponse

router = APIRouter(
    prefix="/api/threat-models",
    tags=["Threat Models"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.get(
    "",
    response_model=ThreatModelListResponse,
    summary="List Threat Models",
)
def list_threat_models(
    scope: ScopeFilter = Depends(get_scope),
    db: Session = Depends(get_db),
) -> dict:
    """List the threat models the caller's scope reaches."""
    threat_models = (
        ScopedQuery(db, ThreatModel, scope)
        .filter_by_scope()
        .order_by(ThreatModel.created_at.desc())
        .all()
    )
    return {
        "threat_models": threat_models,
        "total": len(threat_models),
        "scope": describe_scope(scope),
    }


@router.get(
    "/{threat_model_id}",
    response_model=ThreatModelResponse,
    summary="Get Threat Model",
    responses={404: {"model": ErrorResponse, "description": "Not found"}},
)
def get_threat_model(
    threat_model_id: str,
    scope: ScopeFilter = Depends(get_scope),
    db: Session = Depends(get_db),
) -> ThreatModel:
    """Get one threat model within the caller's scope."""
    threat_model = ScopedQuery(db, ThreatModel, scope).get_by_id(threat_model_id)
    if threat_model is None:
        raise NotFoundError(resource="Threat model", identifier=threat_model_id)
    return threat_model
