"""
User Model
==========

Identity record read by actor resolution and owner lookups.

organization_id is nullable: legacy users and platform admins may have
no organization. Whether a missing organization is acceptable is decided
by the authorization engine, not by the schema.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from tenantgate.db.base import Base
from tenantgate.models.role_enum import Role

if TYPE_CHECKING:
    from tenantgate.models.organization import Organization
    from tenantgate.models.threat_model import ThreatModel


class User(Base):
    """
    User entity.

    Attributes:
        id: String primary key (UUID by default)
        organization_id: Owning organization, if any
        email: Unique email address
        role: Stored role value
        is_active: Soft delete flag; inactive users have no session
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    organization_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    organization: Mapped[Optional["Organization"]] = relationship(
        "Organization",
        back_populates="users",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=Role.ORG_USER.value,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    threat_models: Mapped[List["ThreatModel"]] = relationship(
        "ThreatModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def role_enum(self) -> Role:
        """Stored role as a Role member."""
        return Role(self.role)
