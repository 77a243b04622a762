"""
Actor Resolution Service Module
===============================

Turns a raw session token into an Actor.

Resolution is the only blocking step before authorization. Any failure
(bad signature, expiry, unknown role, missing or inactive user) yields
None, which the authorizer reports as "no session".

Token issuance is handled by the authentication layer and is not part
of this service.
"""

from typing import Any, Callable, Dict, Optional

from jose import jwt, JWTError
from sqlalchemy.orm import Session

from tenantgate.core.access.actor import Actor, ResourceOwner
from tenantgate.core.config import Settings, get_settings
from tenantgate.core.logging import get_logger
from tenantgate.models.role_enum import Role
from tenantgate.models.user import User

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Token Resolution
# ==========================

class TokenActorResolver:
    """
    Resolve an actor from the claims of a signed session token.

    Expected claims: sub (user id), role (stored role value) and an
    optional organization_id (organizationId is accepted too).

    Usage:
        resolver = TokenActorResolver()
        actor = resolver("eyJhbGciOi...")
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a token.

        Args:
            token: Encoded JWT

        Returns:
            Claims dictionary, or None if the token cannot be verified
        """
        options = {"verify_aud": self.settings.TOKEN_AUDIENCE is not None}
        try:
            return jwt.decode(
                token,
                self.settings.SECRET_KEY,
                algorithms=[self.settings.ALGORITHM],
                audience=self.settings.TOKEN_AUDIENCE,
                options=options,
            )
        except JWTError as e:
            logger.info("session_token_rejected", reason=str(e))
            return None

    def __call__(self, token: Optional[str]) -> Optional[Actor]:
        if not token:
            return None

        claims = self.decode(token)
        if claims is None:
            return None

        subject = claims.get("sub")
        raw_role = claims.get("role")
        if not subject or not raw_role:
            logger.info("session_token_incomplete", has_sub=bool(subject), has_role=bool(raw_role))
            return None

        try:
            role = Role(raw_role)
        except ValueError:
            logger.warning("session_token_unknown_role", role=raw_role)
            return None

        organization_id = claims.get("organization_id", claims.get("organizationId"))
        return Actor(
            id=str(subject),
            role=role,
            organization_id=str(organization_id) if organization_id else None,
        )


# ==========================
# Database Refresh
# ==========================

class DatabaseActorResolver:
    """
    Resolve an actor from the current user record.

    The token only identifies the user; role and organization are re-read
    on every request so membership changes take effect immediately.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        token_resolver: Optional[TokenActorResolver] = None,
    ):
        self.session_factory = session_factory
        self.token_resolver = token_resolver or TokenActorResolver()

    def __call__(self, token: Optional[str]) -> Optional[Actor]:
        claimed = self.token_resolver(token)
        if claimed is None:
            return None

        db = self.session_factory()
        try:
            user = db.get(User, claimed.id)
            if user is None or not user.is_active:
                logger.info("session_user_unavailable", actor_id=claimed.id)
                return None
            try:
                return actor_from_user(user)
            except ValueError:
                logger.warning("session_token_unknown_role", actor_id=user.id, role=user.role)
                return None
        finally:
            db.close()


def actor_from_user(user: User) -> Actor:
    """
    Build an actor from a user row.

    Raises:
        ValueError: If the stored role is not a valid role
    """
    return Actor(
        id=user.id,
        role=user.role_enum,
        organization_id=user.organization_id,
    )


# ==========================
# Owner Lookup
# ==========================

class OwnerDirectory:
    """
    Resolves resource owner references from the user table.

    Usage:
        owner = OwnerDirectory(db).lookup(threat_model.user_id)
        if owner and can_access_resource(actor, owner):
            ...
    """

    def __init__(self, db: Session):
        self.db = db

    def lookup(self, owner_id: str) -> Optional[ResourceOwner]:
        """
        Get the owner reference for a user id.

        Returns:
            ResourceOwner, or None if no such user exists. A stored role
            that is not a valid role leaves owner_role unset.
        """
        user = self.db.get(User, owner_id)
        if user is None:
            return None
        try:
            owner_role = user.role_enum
        except ValueError:
            logger.warning("owner_unknown_role", owner_id=user.id, role=user.role)
            owner_role = None
        return ResourceOwner(
            owner_id=user.id,
            owner_organization_id=user.organization_id,
            owner_role=owner_role,
        )
