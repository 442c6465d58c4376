from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import APIModel, Pagination


class ContactFieldType(str, enum.Enum):
    TEXT = "TEXT"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    TEXTAREA = "TEXTAREA"
    SELECT = "SELECT"
    CHECKBOX = "CHECKBOX"
    RADIO = "RADIO"
    NUMBER = "NUMBER"
    URL = "URL"


# -----------------------------
# Form definition
# -----------------------------
class ContactFormFieldIn(APIModel):
    field_name: str = Field(..., min_length=1, max_length=100)
    field_label: str = Field(..., min_length=1, max_length=200)
    field_type: ContactFieldType = ContactFieldType.TEXT
    is_required: bool = False
    placeholder: Optional[str] = Field(None, max_length=300)
    help_text: Optional[str] = Field(None, max_length=500)
    options: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: bool = True


class ContactFormIn(APIModel):
    name: str = Field("Contact Form", min_length=1, max_length=200)
    description: Optional[str] = None
    is_active: bool = True
    fields: List[ContactFormFieldIn] = []

    @field_validator("fields")
    @classmethod
    def _unique_names(cls, v: List[ContactFormFieldIn]) -> List[ContactFormFieldIn]:
        names = [f.field_name for f in v]
        if len(names) != len(set(names)):
            raise ValueError("field names must be unique within a form")
        return v


class ContactFormFieldOut(APIModel):
    id: UUID
    field_name: str
    field_label: str
    field_type: str
    is_required: bool
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    options: Optional[str] = None
    sort_order: int
    is_active: bool


class ContactFormOut(APIModel):
    id: UUID
    site_id: UUID
    name: str
    description: Optional[str] = None
    is_active: bool
    fields: List[ContactFormFieldOut] = []
    created_at: datetime
    updated_at: datetime


class ContactFormEnvelope(APIModel):
    contact_form: Optional[ContactFormOut] = None


# -----------------------------
# Submissions
# -----------------------------
class ContactSubmissionIn(APIModel):
    data: Dict[str, Any] = {}


class ContactSubmissionValue(APIModel):
    field_id: Optional[UUID] = None
    field_name: str
    field_label: str
    value: str


class ContactSubmissionOut(APIModel):
    id: UUID
    site_id: UUID
    contact_form_id: UUID
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    is_read: bool
    is_archived: bool
    created_at: datetime
    data: List[ContactSubmissionValue] = []


class ContactSubmissionList(APIModel):
    submissions: List[ContactSubmissionOut]
    pagination: Pagination


class ContactSubmissionUpdate(APIModel):
    is_read: Optional[bool] = None
    is_archived: Optional[bool] = None


class ContactSubmissionCreated(APIModel):
    success: bool = True
    message: str = "Contact form submitted successfully"
    submission_id: UUID


class PublicContactFormOut(APIModel):
    id: UUID
    name: str
    description: Optional[str] = None
    fields: List[ContactFormFieldOut] = []


# -----------------------------
# Cross-site inbox
# -----------------------------
class InboxSiteOut(APIModel):
    id: UUID
    name: str
    domain: Optional[str] = None
    submission_count: int = 0


class InboxSubmissionOut(ContactSubmissionOut):
    site_name: str


class ContactInboxOut(APIModel):
    submissions: List[InboxSubmissionOut]
    sites: List[InboxSiteOut]
    pagination: Pagination
