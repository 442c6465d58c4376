from __future__ import annotations

from fastapi import Depends

from app.api.v1.auth import get_current_user
from app.auth.permissions import can_create_sites, is_superadmin
from app.core.errors import Forbidden
from app.models.user import User


async def require_superadmin(user: User = Depends(get_current_user)) -> User:
    if not is_superadmin(user.role):
        raise Forbidden("Insufficient role: SUPERADMIN required")
    return user


async def require_site_creator(user: User = Depends(get_current_user)) -> User:
    if not can_create_sites(user.role):
        raise Forbidden("Insufficient role: ADMIN or SUPERADMIN required")
    return user
