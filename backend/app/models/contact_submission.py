# backend/app/models/contact_submission.py

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, UUIDPrimaryKey


class ContactSubmission(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "contact_submissions"

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("contact_forms.id", ondelete="CASCADE"),
        nullable=False,
    )

    ip_address: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    # the only mutable parts of a submission
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ContactSubmissionData(UUIDPrimaryKey, Base):
    __tablename__ = "contact_submission_data"

    submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("contact_submissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # nulled when the form is redesigned; name and label are kept as a snapshot
    field_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("contact_form_fields.id", ondelete="SET NULL"),
        nullable=True,
    )
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_label: Mapped[str] = mapped_column(String(200), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
