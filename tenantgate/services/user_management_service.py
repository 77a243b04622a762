"""
User Management Service Module
==============================

Tenant-aware user administration on top of the access engine.

Every operation checks, in order:
- the target exists
- the target is in the caller's tenant
- the caller outranks the target (can_manage)
- for role changes, the caller may grant the new role (can_assign_role)
  and a tenant role ends up with an organization

can_manage and can_assign_role are checked separately: an ORG_ADMIN
outranks a LEGACY_USER but may still only grant ORG_USER.
"""

from typing import Optional

from sqlalchemy.orm import Session

from tenantgate.core.access.actor import Actor, ResourceOwner
from tenantgate.core.access.boundary import can_manage_user, same_tenant
from tenantgate.core.access.evaluator import AccessEvaluator
from tenantgate.core.access.hierarchy import TENANT_SCOPED_ROLES
from tenantgate.core.access.scope import ScopeFilter
from tenantgate.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    RoleAssignmentError,
    TenantIsolationError,
    UserNotFoundError,
    ValidationError,
)
from tenantgate.core.logging import get_logger, security_logger
from tenantgate.core.tenant.scoped_query import ScopedQuery
from tenantgate.models.organization import Organization
from tenantgate.models.role_enum import Role
from tenantgate.models.user import User
from tenantgate.services.actor_service import OwnerDirectory

# Initialize logger
logger = get_logger(__name__)


class UserManagementService:
    """
    User administration bound to one request's actor.

    Usage:
        service = UserManagementService(db, actor)
        user = service.change_role(target_id, Role.ORG_USER)
        user = service.change_status(target_id, is_active=False)
    """

    def __init__(
        self,
        db: Session,
        actor: Actor,
        evaluator: Optional[AccessEvaluator] = None,
    ):
        self.db = db
        self.actor = actor
        self.evaluator = evaluator or AccessEvaluator()
        self.owners = OwnerDirectory(db)

    def list_users(self, scope: ScopeFilter) -> list[User]:
        """List users the scope reaches."""
        return (
            ScopedQuery(self.db, User, scope)
            .filter_by_scope()
            .order_by(User.email)
            .all()
        )

    def get_user(self, user_id: str) -> tuple[User, bool]:
        """
        Get a user in the caller's tenant.

        Returns:
            The user and whether the caller may manage them

        Raises:
            UserNotFoundError: If no such user exists
            TenantIsolationError: If the user is in another tenant
        """
        user, owner = self._load_target(user_id)
        return user, can_manage_user(self.evaluator, self.actor, owner)

    def change_role(
        self,
        user_id: str,
        new_role: Role,
        organization_id: Optional[str] = None,
    ) -> User:
        """
        Change a user's role.

        Args:
            user_id: Target user id
            new_role: Role to assign
            organization_id: Organization to move the user into; only
                honoured for tenant roles

        Returns:
            Updated user

        Raises:
            ValidationError: If the caller targets themselves, or a tenant
                role would be left without an organization
            UserNotFoundError: If no such user exists
            TenantIsolationError: If the user is in another tenant
            RoleAssignmentError: If the caller may not grant new_role
            AuthorizationError: If the caller does not outrank the user
            NotFoundError: If organization_id names no organization
        """
        if user_id == self.actor.id:
            raise ValidationError("Cannot change your own role")

        user, owner = self._load_target(user_id)

        if not self.evaluator.can_assign_role(self.actor.role, new_role):
            security_logger.log_role_assignment_denied(
                actor_id=self.actor.id,
                assigner_role=self.actor.role.value,
                target_user_id=user_id,
                requested_role=new_role.value,
            )
            raise RoleAssignmentError(new_role.value)

        self._require_manage(owner, action="change_role")

        target_organization_id = user.organization_id
        if organization_id is not None and new_role in TENANT_SCOPED_ROLES:
            if not same_tenant(self.actor, organization_id):
                raise TenantIsolationError()
            if self.db.get(Organization, organization_id) is None:
                raise NotFoundError(resource="Organization", identifier=organization_id)
            target_organization_id = organization_id

        if new_role in TENANT_SCOPED_ROLES and target_organization_id is None:
            raise ValidationError(
                "Organization roles require an organization",
                details={"role": new_role.value},
            )

        user.organization_id = target_organization_id

        old_role = user.role
        user.role = new_role.value
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            "user_role_changed",
            actor_id=self.actor.id,
            target_user_id=user.id,
            old_role=old_role,
            new_role=new_role.value,
            organization_id=user.organization_id,
        )
        return user

    def change_status(self, user_id: str, is_active: bool) -> User:
        """
        Suspend or reactivate a user.

        A suspended user's sessions resolve to no actor from the next
        request on.

        Raises:
            ValidationError: If the caller targets themselves
            UserNotFoundError: If no such user exists
            TenantIsolationError: If the user is in another tenant
            AuthorizationError: If the caller does not outrank the user
        """
        if user_id == self.actor.id:
            raise ValidationError("Cannot change your own account status")

        user, owner = self._load_target(user_id)
        self._require_manage(owner, action="change_status")

        user.is_active = is_active
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            "user_status_changed",
            actor_id=self.actor.id,
            target_user_id=user.id,
            is_active=is_active,
        )
        return user

    def _require_manage(self, owner: ResourceOwner, action: str) -> None:
        if not can_manage_user(self.evaluator, self.actor, owner):
            security_logger.log_access_denied(
                actor_id=self.actor.id,
                reason="cannot manage equal or higher role",
                resource=f"users/{owner.owner_id}",
                action=action,
            )
            raise AuthorizationError("Cannot manage user with equal or higher role")

    def _load_target(self, user_id: str) -> tuple[User, ResourceOwner]:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(identifier=user_id)

        owner = self.owners.lookup(user_id)
        if not same_tenant(self.actor, owner.owner_organization_id):
            security_logger.log_tenant_isolation_violation(
                actor_id=self.actor.id,
                actor_organization=self.actor.organization_id,
                target_organization=owner.owner_organization_id,
                resource=f"users/{user_id}",
            )
            raise TenantIsolationError()

        return user, owner
