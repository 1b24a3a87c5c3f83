"""Decorators package."""

from .permissions import (
    require_admin,
    require_category_permission,
    require_permission,
    require_role,
    require_user_management,
)

__all__ = [
    "require_permission",
    "require_role",
    "require_admin",
    "require_user_management",
    "require_category_permission",
]
