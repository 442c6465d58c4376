# backend/app/models/site_feature.py

import uuid
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, UUIDPrimaryKey


class SiteFeature(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "site_features"
    __table_args__ = (
        UniqueConstraint("site_id", "feature", name="uq_site_features_site_feature"),
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
    )
    # SiteFeatureName value
    feature: Mapped[str] = mapped_column(String(50), nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    display_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # opaque per-feature settings, interpreted by the owning resource service
    config: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
