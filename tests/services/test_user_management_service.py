"""
User Management Service Unit Tests
==================================

Tests for tenant-aware user administration covering:
- Reading users across the organization boundary
- Role changes under the manage and assignment policies
- Moving users between organizations
- Suspending and reactivating users
"""

import pytest
from sqlalchemy.orm import Session

from tenantgate.core.access.actor import Actor
from tenantgate.core.access.scope import OrganizationScoped, Unrestricted
from tenantgate.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    RoleAssignmentError,
    TenantIsolationError,
    UserNotFoundError,
    ValidationError,
)
from tenantgate.models.organization import Organization
from tenantgate.models.role_enum import Role
from tenantgate.models.user import User
from tenantgate.services.user_management_service import UserManagementService


pytestmark = pytest.mark.unit


def _actor(user: User) -> Actor:
    return Actor(id=user.id, role=Role(user.role), organization_id=user.organization_id)


class TestReadUsers:
    """Tests for list_users and get_user."""

    def test_list_users_bounded_by_scope(
        self,
        db_session: Session,
        acme_admin: User,
        acme_user: User,
        globex_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act
        users = service.list_users(OrganizationScoped("acme"))

        # Assert
        assert {u.id for u in users} == {"acme-admin", "acme-user"}

    def test_platform_admin_lists_everyone(
        self,
        db_session: Session,
        platform_admin: User,
        acme_user: User,
        globex_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act
        users = service.list_users(Unrestricted())

        # Assert
        assert {u.id for u in users} == {"platform-admin", "acme-user", "globex-user"}

    def test_get_user_in_tenant_reports_manageability(
        self,
        db_session: Session,
        acme_admin: User,
        acme_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act
        user, manageable = service.get_user(acme_user.id)
        me, self_manageable = service.get_user(acme_admin.id)

        # Assert
        assert user.id == "acme-user"
        assert manageable is True
        assert me.id == "acme-admin"
        assert self_manageable is False

    def test_get_user_across_tenants_blocked(
        self,
        db_session: Session,
        acme_admin: User,
        globex_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(TenantIsolationError):
            service.get_user(globex_user.id)

    def test_get_missing_user(self, db_session: Session, acme_admin: User):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(UserNotFoundError):
            service.get_user("ghost")


class TestChangeRole:
    """Tests for change_role."""

    def test_org_admin_migrates_legacy_user(
        self,
        db_session: Session,
        acme_admin: User,
        acme_legacy_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act
        user = service.change_role(acme_legacy_user.id, Role.ORG_USER)

        # Assert
        assert user.role == "BUSINESS_USER"
        assert user.organization_id == "acme"

    def test_org_admin_cannot_grant_org_admin(
        self,
        db_session: Session,
        acme_admin: User,
        acme_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(RoleAssignmentError) as exc_info:
            service.change_role(acme_user.id, Role.ORG_ADMIN)

        assert exc_info.value.details == {"requested_role": "BUSINESS_ADMIN"}
        db_session.refresh(acme_user)
        assert acme_user.role == "BUSINESS_USER"

    def test_org_admin_cannot_grant_legacy_role(
        self,
        db_session: Session,
        acme_admin: User,
        acme_user: User,
    ):
        """Test that outranking a role does not allow granting it."""
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(RoleAssignmentError):
            service.change_role(acme_user.id, Role.LEGACY_USER)

    def test_org_admin_cannot_demote_peer(
        self,
        db_session: Session,
        acme: Organization,
        acme_admin: User,
    ):
        # Arrange
        peer = User(id="acme-admin-2", email="acme-admin-2@example.com", role="BUSINESS_ADMIN", organization_id=acme.id)
        db_session.add(peer)
        db_session.commit()
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(AuthorizationError) as exc_info:
            service.change_role(peer.id, Role.ORG_USER)

        assert not isinstance(exc_info.value, (RoleAssignmentError, TenantIsolationError))

    def test_org_admin_cannot_reach_other_tenant(
        self,
        db_session: Session,
        acme_admin: User,
        globex_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(TenantIsolationError):
            service.change_role(globex_user.id, Role.ORG_USER)

    def test_cannot_change_own_role(self, db_session: Session, platform_admin: User):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act & Assert
        with pytest.raises(ValidationError):
            service.change_role(platform_admin.id, Role.LEGACY_USER)

    def test_missing_target(self, db_session: Session, platform_admin: User):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act & Assert
        with pytest.raises(UserNotFoundError):
            service.change_role("ghost", Role.ORG_USER)

    def test_platform_admin_promotes_to_org_admin(
        self,
        db_session: Session,
        platform_admin: User,
        globex_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act
        user = service.change_role(globex_user.id, Role.ORG_ADMIN)

        # Assert
        assert user.role == "BUSINESS_ADMIN"

    def test_platform_admin_moves_legacy_user_into_organization(
        self,
        db_session: Session,
        platform_admin: User,
        legacy_user: User,
        acme: Organization,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act
        user = service.change_role(legacy_user.id, Role.ORG_USER, organization_id="acme")

        # Assert
        assert user.role == "BUSINESS_USER"
        assert user.organization_id == "acme"

    def test_organization_ignored_for_global_roles(
        self,
        db_session: Session,
        platform_admin: User,
        acme_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act
        user = service.change_role(acme_user.id, Role.LEGACY_USER, organization_id="nowhere")

        # Assert
        assert user.role == "USER"
        assert user.organization_id == "acme"

    def test_unknown_organization(
        self,
        db_session: Session,
        platform_admin: User,
        legacy_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act & Assert
        with pytest.raises(NotFoundError):
            service.change_role(legacy_user.id, Role.ORG_USER, organization_id="nowhere")

    def test_org_admin_cannot_move_user_to_other_organization(
        self,
        db_session: Session,
        acme_admin: User,
        acme_legacy_user: User,
        globex: Organization,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(TenantIsolationError):
            service.change_role(acme_legacy_user.id, Role.ORG_USER, organization_id="globex")

    def test_tenant_role_requires_organization(
        self,
        db_session: Session,
        platform_admin: User,
        legacy_user: User,
    ):
        """Test that an unaffiliated user cannot be given an organization role alone."""
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            service.change_role(legacy_user.id, Role.ORG_ADMIN)

        assert exc_info.value.status_code == 400
        db_session.refresh(legacy_user)
        assert legacy_user.role == "USER"
        assert legacy_user.organization_id is None

    def test_target_with_unknown_stored_role_is_not_manageable(
        self,
        db_session: Session,
        acme_admin: User,
        acme_user: User,
    ):
        # Arrange
        acme_user.role = "SUPERUSER"
        db_session.commit()
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(AuthorizationError):
            service.change_role(acme_user.id, Role.ORG_USER)


class TestChangeStatus:
    """Tests for suspending and reactivating users."""

    def test_org_admin_suspends_org_user(
        self,
        db_session: Session,
        acme_admin: User,
        acme_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act
        user = service.change_status(acme_user.id, is_active=False)

        # Assert
        assert user.is_active is False

    def test_org_admin_reactivates_org_user(
        self,
        db_session: Session,
        acme_admin: User,
        inactive_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act
        user = service.change_status(inactive_user.id, is_active=True)

        # Assert
        assert user.is_active is True

    def test_org_admin_cannot_suspend_peer(
        self,
        db_session: Session,
        acme: Organization,
        acme_admin: User,
    ):
        # Arrange
        peer = User(id="acme-admin-2", email="acme-admin-2@example.com", role="BUSINESS_ADMIN", organization_id=acme.id)
        db_session.add(peer)
        db_session.commit()
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(AuthorizationError):
            service.change_status(peer.id, is_active=False)

        db_session.refresh(peer)
        assert peer.is_active is True

    def test_org_admin_cannot_suspend_other_tenant(
        self,
        db_session: Session,
        acme_admin: User,
        globex_user: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(TenantIsolationError):
            service.change_status(globex_user.id, is_active=False)

    def test_cannot_change_own_status(self, db_session: Session, acme_admin: User):
        # Arrange
        service = UserManagementService(db_session, _actor(acme_admin))

        # Act & Assert
        with pytest.raises(ValidationError):
            service.change_status(acme_admin.id, is_active=False)

    def test_platform_admin_suspends_org_admin(
        self,
        db_session: Session,
        platform_admin: User,
        globex_admin: User,
    ):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act
        user = service.change_status(globex_admin.id, is_active=False)

        # Assert
        assert user.is_active is False

    def test_missing_target(self, db_session: Session, platform_admin: User):
        # Arrange
        service = UserManagementService(db_session, _actor(platform_admin))

        # Act & Assert
        with pytest.raises(UserNotFoundError):
            service.change_status("ghost", is_active=False)
