# backend/app/models/contact_form.py

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, UUIDPrimaryKey


class ContactForm(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "contact_forms"

    # one form per site
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="Contact Form")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ContactFormField(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "contact_form_fields"

    contact_form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("contact_forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_label: Mapped[str] = mapped_column(String(200), nullable=False)
    # TEXT | EMAIL | PHONE | TEXTAREA | SELECT | CHECKBOX | RADIO | NUMBER | URL
    field_type: Mapped[str] = mapped_column(String(20), nullable=False, default="TEXT")
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    placeholder: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    help_text: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    # JSON-encoded list of choices for SELECT / RADIO
    options: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
