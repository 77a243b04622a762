"""
Scoped Query Utilities Module
=============================

Applies a scope filter to SQLAlchemy queries.

Translation:
- Unrestricted -> no filter
- OrganizationScoped(X) -> rows whose owner's organization is X
- SelfScoped(id) -> rows whose owner is id

Models are owned through a user column (user_id by default). The User
model is its own owner, so it is filtered on its own columns.
"""

from typing import Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from tenantgate.core.access.scope import (
    OrganizationScoped,
    ScopeFilter,
    SelfScoped,
    Unrestricted,
)
from tenantgate.core.logging import get_logger
from tenantgate.models.user import User

# Initialize logger
logger = get_logger(__name__)

# Generic type for owned models
T = TypeVar("T")


class ScopedQuery:
    """
    Helper class for scope-filtered database queries.

    Usage:
        scoped = ScopedQuery(db, ThreatModel, decision.scope)
        threat_models = scoped.filter_by_scope().all()
    """

    def __init__(
        self,
        db: Session,
        model: Type[T],
        scope: ScopeFilter,
        owner_column: str = "user_id",
    ):
        """
        Initialize scoped query helper.

        Args:
            db: Database session
            model: SQLAlchemy model class
            scope: Scope filter from the authorizer
            owner_column: Column on the model naming the owning user
        """
        self.db = db
        self.model = model
        self.scope = scope
        self.owner_column = owner_column
        self._base_query = db.query(model)

    def filter_by_scope(self) -> Query:
        """
        Get query filtered by the scope.

        Returns:
            Filtered SQLAlchemy query

        Raises:
            TypeError: If the scope is not a known scope filter
        """
        scope = self.scope
        if isinstance(scope, Unrestricted):
            return self._base_query

        if self.model is User:
            if isinstance(scope, OrganizationScoped):
                return self._base_query.filter(User.organization_id == scope.organization_id)
            if isinstance(scope, SelfScoped):
                return self._base_query.filter(User.id == scope.actor_id)
        else:
            owner = getattr(self.model, self.owner_column)
            if isinstance(scope, OrganizationScoped):
                return (
                    self._base_query
                    .join(User, owner == User.id)
                    .filter(User.organization_id == scope.organization_id)
                )
            if isinstance(scope, SelfScoped):
                return self._base_query.filter(owner == scope.actor_id)

        # Fail closed on anything that is not a scope filter
        raise TypeError(f"Unsupported scope filter: {scope!r}")

    def get_by_id(self, resource_id: str) -> Optional[T]:
        """
        Get a resource by ID within the scope.

        Rows outside the scope are reported as missing, so callers answer
        404 and never confirm that another tenant's row exists.

        Args:
            resource_id: Resource primary key

        Returns:
            Resource instance or None
        """
        resource = self.filter_by_scope().filter(self.model.id == resource_id).first()
        if resource is None:
            logger.debug(
                "scoped_lookup_miss",
                model=self.model.__tablename__,
                resource_id=resource_id,
                scope=self.scope.kind,
            )
        return resource


# =====================================
# Convenience Functions
# =====================================

def scoped_query(db: Session, model: Type[T], scope: ScopeFilter) -> Query:
    """
    Get a scope-filtered query for a model.

    Usage:
        threat_models = scoped_query(db, ThreatModel, scope).all()
    """
    return ScopedQuery(db, model, scope).filter_by_scope()


def accessible_user_ids(db: Session, scope: ScopeFilter) -> list[str]:
    """
    Get the ids of all users whose data the scope reaches.

    Args:
        db: Database session
        scope: Scope filter from the authorizer

    Returns:
        List of user ids
    """
    if isinstance(scope, SelfScoped):
        return [scope.actor_id]
    rows = ScopedQuery(db, User, scope).filter_by_scope().with_entities(User.id).all()
    return [row[0] for row in rows]
