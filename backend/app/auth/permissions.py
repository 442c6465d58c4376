from __future__ import annotations

from typing import Optional

from app.core.roles import UserRole

SITE_CREATOR_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUPERADMIN.value})


def _normalize_role(role: str | None) -> str:
    return (role or "").strip().upper()


def is_superadmin(role: str | None) -> bool:
    return _normalize_role(role) == UserRole.SUPERADMIN.value


def can_create_sites(role: str | None) -> bool:
    return _normalize_role(role) in SITE_CREATOR_ROLES


def can_access_site(*, role: Optional[str], is_member: bool) -> bool:
    """
    SUPERADMIN reaches every site; everybody else needs a membership row.
    Total over (role x membership), unknown roles behave like USER.
    """
    if is_superadmin(role):
        return True
    return bool(is_member)
