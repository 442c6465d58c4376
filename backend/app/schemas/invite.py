from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, field_validator

from app.core.roles import UserRole
from app.schemas.base import APIModel


class InviteCreate(APIModel):
    email: EmailStr
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.strip().lower()


class InviteUpdate(APIModel):
    role: UserRole


class InviterOut(APIModel):
    id: UUID
    name: Optional[str] = None
    email: str


class InviteOut(APIModel):
    id: UUID
    email: str
    role: str
    token: str
    expires_at: datetime
    is_used: bool
    used_at: Optional[datetime] = None
    created_at: datetime
    invited_by: Optional[InviterOut] = None
