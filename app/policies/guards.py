"""Guard helpers for authorization checks."""

import logging
from typing import Any

from app.constants.roles import Role
from app.utils.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    AuthorizationError,
    InsufficientPermissionsError,
    LastAdminError,
)

from .authorization_policy import (
    AdminAction,
    CategoryPolicy,
    ContentPolicy,
    UserPolicy,
    guard_last_admin,
    has_role,
)
from .base_policy import Action, BasePolicy, PolicyContext, PolicyResult, Principal

logger = logging.getLogger(__name__)

# Policy registry
POLICY_REGISTRY: dict[str, type[BasePolicy]] = {
    "post": ContentPolicy,
    "reply": ContentPolicy,
    "category": CategoryPolicy,
    "user": UserPolicy,
}


def _as_principal(actor: Any) -> Principal | None:
    if actor is None or isinstance(actor, Principal):
        return actor
    return Principal.from_user(actor)


def check(
    actor: Any,
    action: Action,
    resource_type: str,
    resource: Any | None = None,
    resource_id: Any | None = None,
    **kwargs,
) -> PolicyResult:
    """Evaluate the registered policy for resource_type."""
    context = PolicyContext(
        principal=_as_principal(actor),
        resource=resource,
        resource_id=resource_id,
        extra_data=kwargs,
    )

    policy_class = POLICY_REGISTRY.get(resource_type)
    if policy_class is None:
        raise KeyError(f"No policy registered for resource type '{resource_type}'")

    return policy_class().check(action, context)


def can(
    actor: Any,
    action: Action,
    resource_type: str,
    resource: Any | None = None,
    resource_id: Any | None = None,
    **kwargs,
) -> bool:
    """
    Check if actor can perform action on resource.

    Usage:
        can(user, Action.UPDATE, "post", resource=post)
        can(principal, Action.PIN, "post")
    """
    return check(actor, action, resource_type, resource, resource_id, **kwargs).allowed


def require(
    actor: Any,
    action: Action,
    resource_type: str,
    resource: Any | None = None,
    resource_id: Any | None = None,
    **kwargs,
) -> None:
    """
    Require that actor can perform action on resource.
    Raises AuthenticationError without an actor, AuthorizationError when denied.

    Usage:
        require(user, Action.DELETE, "post", resource=post)
        require(user, Action.REPLY, "post", is_locked=post.is_locked)
    """
    if actor is None:
        raise AuthenticationError()

    result = check(actor, action, resource_type, resource, resource_id, **kwargs)

    if not result.allowed:
        logger.info(
            "Authorization denied",
            extra={
                "user_id": getattr(actor, "id", None),
                "action": action.value,
                "resource_type": resource_type,
                "reason": result.reason,
            },
        )
        raise AuthorizationError(result.reason or "Access denied")


def require_role(actor: Any, required_role: Role) -> None:
    """
    Require that actor holds required_role or higher.

    Usage:
        require_role(user, Role.ADMIN)
    """
    principal = _as_principal(actor)
    if principal is None:
        raise AuthenticationError()

    if not has_role(principal.role, required_role):
        if required_role == Role.ADMIN:
            raise AuthorizationError("Admin access required")
        raise InsufficientPermissionsError()


def require_active_user(user: Any) -> None:
    """
    Require that user is active and can login.

    Usage:
        require_active_user(user)
    """
    if not user.can_login:
        raise AccountInactiveError()


def require_not_last_admin(
    action: AdminAction, target_is_admin: bool, active_admin_count: int
) -> None:
    """
    Raise LastAdminError when the action would leave no active admin.

    Usage:
        require_not_last_admin(AdminAction.DELETE, target.is_admin, admin_count)
    """
    result = guard_last_admin(action, target_is_admin, active_admin_count)
    if not result.allowed:
        logger.warning(
            "Last admin guard triggered",
            extra={"action": AdminAction(action).value, "active_admin_count": active_admin_count},
        )
        raise LastAdminError(result.reason)


def register_policy(resource_type: str, policy_class: type[BasePolicy]) -> None:
    """
    Register a custom policy for a resource type.

    Usage:
        register_policy("poll", PollPolicy)
    """
    POLICY_REGISTRY[resource_type] = policy_class
