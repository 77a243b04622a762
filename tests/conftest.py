"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for testing
- TestClient wired to the test database
- Organizations and one user per role
- Signed session tokens and auth headers
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set testing environment before importing application modules
os.environ["TENANTGATE_ENVIRONMENT"] = "testing"
os.environ["TENANTGATE_SECRET_KEY"] = "test-secret-key-for-testing-only-min-32-chars"
os.environ["TENANTGATE_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TENANTGATE_LOG_FORMAT"] = "console"
os.environ["TENANTGATE_REFRESH_ACTOR_FROM_DATABASE"] = "true"

from tenantgate.core.config import settings
from tenantgate.db.base import Base
from tenantgate.db.session import get_db
from tenantgate.main import app as main_app, build_authorizer
from tenantgate.models import Organization, Role, ThreatModel, User


# =====================================
# Database Configuration
# =====================================

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before each test and drops them after.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a TestClient bound to the test database.

    Both the route session dependency and the authorizer's actor
    resolver use the test engine.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    original_authorizer = main_app.state.authorizer
    main_app.dependency_overrides[get_db] = override_get_db
    main_app.state.authorizer = build_authorizer(TestingSessionLocal)

    with TestClient(main_app) as test_client:
        yield test_client

    main_app.dependency_overrides.clear()
    main_app.state.authorizer = original_authorizer


# =====================================
# Organization Fixtures
# =====================================

def _add_organization(db: Session, org_id: str, name: str) -> Organization:
    org = Organization(id=org_id, name=name)
    db.add(org)
    db.commit()
    db.refresh(org)
    return org


@pytest.fixture
def acme(db_session: Session) -> Organization:
    """Primary tenant."""
    return _add_organization(db_session, "acme", "Acme Corp")


@pytest.fixture
def globex(db_session: Session) -> Organization:
    """Second tenant for cross-tenant testing."""
    return _add_organization(db_session, "globex", "Globex Inc")


# =====================================
# User Fixtures
# =====================================

def _add_user(
    db: Session,
    user_id: str,
    role: Role,
    organization: Optional[Organization] = None,
    is_active: bool = True,
) -> User:
    user = User(
        id=user_id,
        email=f"{user_id}@example.com",
        role=role.value,
        organization_id=organization.id if organization else None,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def platform_admin(db_session: Session) -> User:
    """PLATFORM_ADMIN without an organization."""
    return _add_user(db_session, "platform-admin", Role.PLATFORM_ADMIN)


@pytest.fixture
def acme_admin(db_session: Session, acme: Organization) -> User:
    """ORG_ADMIN of acme."""
    return _add_user(db_session, "acme-admin", Role.ORG_ADMIN, acme)


@pytest.fixture
def acme_user(db_session: Session, acme: Organization) -> User:
    """ORG_USER of acme."""
    return _add_user(db_session, "acme-user", Role.ORG_USER, acme)


@pytest.fixture
def acme_legacy_user(db_session: Session, acme: Organization) -> User:
    """LEGACY_USER that belongs to acme."""
    return _add_user(db_session, "acme-legacy", Role.LEGACY_USER, acme)


@pytest.fixture
def globex_admin(db_session: Session, globex: Organization) -> User:
    """ORG_ADMIN of globex."""
    return _add_user(db_session, "globex-admin", Role.ORG_ADMIN, globex)


@pytest.fixture
def globex_user(db_session: Session, globex: Organization) -> User:
    """ORG_USER of globex."""
    return _add_user(db_session, "globex-user", Role.ORG_USER, globex)


@pytest.fixture
def legacy_user(db_session: Session) -> User:
    """Unaffiliated LEGACY_USER."""
    return _add_user(db_session, "legacy-user", Role.LEGACY_USER)


@pytest.fixture
def orphan_org_admin(db_session: Session) -> User:
    """ORG_ADMIN that lost its organization (data-integrity anomaly)."""
    return _add_user(db_session, "orphan-admin", Role.ORG_ADMIN)


@pytest.fixture
def inactive_user(db_session: Session, acme: Organization) -> User:
    """Deactivated ORG_USER of acme."""
    return _add_user(db_session, "inactive-user", Role.ORG_USER, acme, is_active=False)


# =====================================
# Resource Fixtures
# =====================================

@pytest.fixture
def threat_models(
    db_session: Session,
    acme_admin: User,
    acme_user: User,
    globex_user: User,
    legacy_user: User,
) -> dict:
    """One threat model per owner, keyed by owner id."""
    models = {}
    for owner in (acme_admin, acme_user, globex_user, legacy_user):
        tm = ThreatModel(id=f"tm-{owner.id}", title=f"Threat model of {owner.id}", user_id=owner.id)
        db_session.add(tm)
        models[owner.id] = tm
    db_session.commit()
    return models


# =====================================
# Token Fixtures
# =====================================

def make_token(
    user_id: str,
    role: str,
    organization_id: Optional[str] = None,
    expires_in: timedelta = timedelta(minutes=15),
    secret: Optional[str] = None,
) -> str:
    """Sign a session token the way the authentication layer does."""
    claims = {
        "sub": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if organization_id is not None:
        claims["organization_id"] = organization_id
    return jwt.encode(claims, secret or settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_headers_for(user: User) -> dict:
    """Authorization header for a stored user."""
    token = make_token(user.id, user.role, user.organization_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def platform_admin_headers(platform_admin: User) -> dict:
    return auth_headers_for(platform_admin)


@pytest.fixture
def acme_admin_headers(acme_admin: User) -> dict:
    return auth_headers_for(acme_admin)


@pytest.fixture
def acme_user_headers(acme_user: User) -> dict:
    return auth_headers_for(acme_user)


@pytest.fixture
def globex_admin_headers(globex_admin: User) -> dict:
    return auth_headers_for(globex_admin)


@pytest.fixture
def legacy_user_headers(legacy_user: User) -> dict:
    return auth_headers_for(legacy_user)


@pytest.fixture
def orphan_org_admin_headers(orphan_org_admin: User) -> dict:
    return auth_headers_for(orphan_org_admin)


@pytest.fixture
def token_factory():
    """Factory signing arbitrary session tokens."""
    return make_token


@pytest.fixture
def session_factory():
    """Session factory bound to the test engine."""
    return TestingSessionLocal
