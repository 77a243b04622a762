"""
Threat Model Model
==================

A user-owned resource. Its tenant is the owner's organization, so
organization scoping joins through the owning user.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from tenantgate.db.base import Base

if TYPE_CHECKING:
    from tenantgate.models.user import User


class ThreatModel(Base):
    """Threat model owned by a single user."""

    __tablename__ = "threat_models"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="threat_models")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ThreatModel(id={self.id}, title={self.title})>"
