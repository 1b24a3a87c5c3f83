"""Authorization and social graph policies."""

from .authorization_policy import (
    AdminAction,
    CategoryPolicy,
    ContentPolicy,
    UserPolicy,
    can_edit_or_delete,
    can_manage_users,
    can_moderate,
    can_mutate_category,
    can_pin_or_lock,
    can_reply,
    capabilities,
    guard_last_admin,
    has_role,
    require_admin_action,
)
from .base_policy import Action, BasePolicy, PolicyContext, PolicyResult, Principal
from .guards import can, check, register_policy, require, require_role

__all__ = [
    "Action",
    "AdminAction",
    "BasePolicy",
    "PolicyContext",
    "PolicyResult",
    "Principal",
    "ContentPolicy",
    "CategoryPolicy",
    "UserPolicy",
    "has_role",
    "can_moderate",
    "can_edit_or_delete",
    "can_manage_users",
    "require_admin_action",
    "can_pin_or_lock",
    "can_mutate_category",
    "can_reply",
    "guard_last_admin",
    "capabilities",
    "can",
    "check",
    "require",
    "require_role",
    "register_policy",
]
