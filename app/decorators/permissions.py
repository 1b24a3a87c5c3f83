"""Permission decorators for route protection."""

import functools
from collections.abc import Callable

from app.constants.roles import Role
from app.models.user import User
from app.policies.base_policy import Action
from app.policies.guards import require, require_role as _require_role


def _find_current_user(kwargs: dict) -> User | None:
    for value in kwargs.values():
        if isinstance(value, User):
            return value
    return None


def require_permission(
    action: Action,
    resource_type: str,
    resource_id_param: str | None = None,
):
    """
    Decorator for requiring specific permissions on routes.

    Args:
        action: The action to check (READ, CREATE, UPDATE, DELETE, MANAGE)
        resource_type: Type of resource being accessed
        resource_id_param: Name of parameter that contains resource ID (optional)

    Usage:
        @require_permission(Action.CREATE, "category")
        async def create_category(data: CategoryCreate, current_user: User = Depends(get_current_active_user)):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            resource_id = None
            if resource_id_param and resource_id_param in kwargs:
                resource_id = kwargs[resource_id_param]

            # Perform permission check
            require(
                _find_current_user(kwargs),
                action,
                resource_type,
                resource_id=resource_id,
            )

            # Call the original function
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_role(role: Role):
    """
    Decorator for requiring a minimum forum role.

    Usage:
        @require_role(Role.ADMIN)
        async def get_stats(current_user: User = Depends(get_current_active_user)):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            _require_role(_find_current_user(kwargs), role)
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_admin(func: Callable) -> Callable:
    """Shortcut decorator for admin-only routes."""
    return require_role(Role.ADMIN)(func)


def require_user_management(action: Action = Action.MANAGE, resource_id_param: str | None = None):
    """Shortcut decorator for user administration permissions."""
    return require_permission(action, "user", resource_id_param)


def require_category_permission(action: Action, resource_id_param: str | None = None):
    """Shortcut decorator for category permissions."""
    return require_permission(action, "category", resource_id_param)
