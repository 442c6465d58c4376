# backend/app/models/invite.py
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, UUIDPrimaryKey


class Invite(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "invites"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="USER")
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)

    invited_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


# At most one unconsumed invite per email, enforced by the database.
Index(
    "uq_invites_unused_email",
    func.lower(Invite.email),
    unique=True,
    postgresql_where=Invite.is_used.is_(False),
    sqlite_where=Invite.is_used.is_(False),
)
