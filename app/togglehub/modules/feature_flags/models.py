from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.togglehub.models import Base
from app.togglehub.utils import isoformat, utcnow

FLAG_TYPES = ("boolean", "json", "string", "number")

REVISION_DRAFT = "draft"
REVISION_LIVE = "live"


class FeatureFlag(Base):
    __tablename__ = "feature_flags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # one of FLAG_TYPES
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    # Insertion order; at most one entry has status "live".
    revisions: Mapped[list["FeatureFlagRevision"]] = relationship(
        "FeatureFlagRevision",
        back_populates="feature_flag",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="FeatureFlagRevision.id",
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "organization_id": self.organization_id,
            "user_id": self.user_id,
            "version": self.version,
            "revisions": [r.to_dict() for r in self.revisions],
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "deleted_at": isoformat(self.deleted_at),
        }


class FeatureFlagRevision(Base):
    __tablename__ = "feature_flag_revisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    feature_flag_id: Mapped[int] = mapped_column(
        ForeignKey("feature_flags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    # draft -> live -> draft (only via approval)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=REVISION_DRAFT)
    default_value: Mapped[str] = mapped_column(String, nullable=False, default="")
    rules: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)

    feature_flag: Mapped[FeatureFlag] = relationship("FeatureFlag", back_populates="revisions")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "status": self.status,
            "default_value": self.default_value,
            "rules": list(self.rules or []),
            "created_at": isoformat(self.created_at),
        }
