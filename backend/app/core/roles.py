# app/core/roles.py

import enum


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"              # may create sites
    SUPERADMIN = "SUPERADMIN"    # every site, every admin-only operation
