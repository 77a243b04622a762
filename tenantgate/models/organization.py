"""
Organization Model
==================

Represents a tenant in the multi-tenant architecture.

Each organization:
- Is isolated from other organizations
- Owns users, and through them their resources
- Acts as a security boundary
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from tenantgate.db.base import Base

if TYPE_CHECKING:
    from tenantgate.models.user import User


class Organization(Base):
    """
    Organization Entity (Tenant Root).

    Attributes:
        id: String primary key (UUID by default)
        name: Unique organization name
        created_at: Creation timestamp
        users: Members of the organization
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="organization",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name})>"
