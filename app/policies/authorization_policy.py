"""Role-based authorization rules for forum content and administration.

Every function here is a pure decision over its arguments. Callers load the
principal and the resource facts, ask for a decision, and map a denial to a
transport-level error themselves:

* no principal -> 401
* principal lacks role or ownership -> 403
* last-admin guard -> 400

Contributors get moderation capability globally, but no edit or delete rights
over other users' content; only authors and admins may edit or delete.
"""

from enum import Enum
from typing import Hashable

from app.constants.roles import Role, role_rank

from .base_policy import Action, BasePolicy, PolicyContext, PolicyResult, Principal


class AdminAction(str, Enum):
    """Admin actions that can shrink the set of active admins."""

    DEMOTE = "demote"
    DEACTIVATE = "deactivate"
    DELETE = "delete"


LAST_ADMIN_REASONS = {
    AdminAction.DEMOTE: "Cannot demote the last admin",
    AdminAction.DEACTIVATE: "Cannot deactivate the last active admin",
    AdminAction.DELETE: "Cannot delete the last admin",
}


def has_role(actual_role: Role | str, required_role: Role | str) -> bool:
    """Check if actual_role is required_role or higher."""
    return role_rank(actual_role) >= role_rank(required_role)


def can_moderate(principal: Principal) -> bool:
    """Contributors and admins may moderate any content."""
    return has_role(principal.role, Role.CONTRIBUTOR)


def can_edit_or_delete(principal: Principal, resource_author_id: Hashable) -> bool:
    """Authors may edit or delete their own content, admins anything."""
    return principal.id == resource_author_id or has_role(principal.role, Role.ADMIN)


def can_manage_users(principal: Principal) -> bool:
    return has_role(principal.role, Role.ADMIN)


def require_admin_action(principal: Principal) -> bool:
    return has_role(principal.role, Role.ADMIN)


def can_pin_or_lock(principal: Principal) -> bool:
    """Pinning and locking are admin-only, unlike general moderation."""
    return has_role(principal.role, Role.ADMIN)


def can_mutate_category(principal: Principal) -> bool:
    return has_role(principal.role, Role.ADMIN)


def can_reply(post_is_locked: bool) -> bool:
    """A locked post takes no new replies, whatever the role."""
    return not post_is_locked


def guard_last_admin(
    action: AdminAction | str, target_is_admin: bool, active_admin_count: int
) -> PolicyResult:
    """Deny an admin action that would leave no active admin."""
    action = AdminAction(action)
    if target_is_admin and active_admin_count <= 1:
        return PolicyResult.deny(LAST_ADMIN_REASONS[action])
    return PolicyResult.allow()


def capabilities(principal: Principal) -> dict[str, bool]:
    """Summarize what the principal may do, for clients rendering controls."""
    return {
        "can_moderate": can_moderate(principal),
        "can_manage_users": can_manage_users(principal),
        "can_pin_or_lock": can_pin_or_lock(principal),
        "can_mutate_category": can_mutate_category(principal),
    }


class ContentPolicy(BasePolicy):
    """Authorization for posts and replies."""

    resource_type = "post"

    def check(self, action: Action, context: PolicyContext) -> PolicyResult:
        """Check content authorization."""

        # Always require authentication
        auth_check = self._require_authentication(context)
        if auth_check is not None:
            return auth_check

        principal = context.principal

        if action in (Action.READ, Action.CREATE):
            return PolicyResult.allow("Authenticated access")

        if action == Action.REPLY:
            if not can_reply(bool(context.get_extra("is_locked", False))):
                return PolicyResult.deny("This post is closed. No new replies are allowed.")
            return PolicyResult.allow()

        if action == Action.UPDATE:
            if not can_edit_or_delete(principal, context.resource_author_id):
                return PolicyResult.deny(f"You can only edit your own {self._noun(context)}")
            return PolicyResult.allow()

        if action == Action.DELETE:
            if not can_edit_or_delete(principal, context.resource_author_id):
                return PolicyResult.deny(f"You can only delete your own {self._noun(context)}")
            return PolicyResult.allow()

        if action in (Action.PIN, Action.LOCK):
            if not can_pin_or_lock(principal):
                return PolicyResult.deny("Admin access required")
            return PolicyResult.allow()

        if action == Action.MODERATE:
            if not can_moderate(principal):
                return PolicyResult.deny("Insufficient permissions to moderate content")
            return PolicyResult.allow()

        return self._unsupported(action)

    def _noun(self, context: PolicyContext) -> str:
        return context.get_extra("noun", "posts")


class CategoryPolicy(BasePolicy):
    """Authorization for category management."""

    resource_type = "category"

    def check(self, action: Action, context: PolicyContext) -> PolicyResult:
        """Check category authorization."""

        auth_check = self._require_authentication(context)
        if auth_check is not None:
            return auth_check

        # The public listing is the only category read open to everyone
        if action == Action.READ and context.get_extra("public_listing", False):
            return PolicyResult.allow("Public category listing")

        if action in (Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE):
            if not can_mutate_category(context.principal):
                return PolicyResult.deny("Admin access required")
            return PolicyResult.allow()

        return self._unsupported(action)


class UserPolicy(BasePolicy):
    """Authorization for user administration."""

    resource_type = "user"

    def check(self, action: Action, context: PolicyContext) -> PolicyResult:
        """Check user management authorization."""

        auth_check = self._require_authentication(context)
        if auth_check is not None:
            return auth_check

        principal = context.principal

        # Users can always read and update their own profile
        if action in (Action.READ, Action.UPDATE) and context.resource_id == principal.id:
            return PolicyResult.allow("Self access")

        if action in (Action.READ, Action.UPDATE, Action.DELETE, Action.MANAGE):
            if not can_manage_users(principal):
                return PolicyResult.deny("Admin access required for user management")
            return PolicyResult.allow()

        return self._unsupported(action)
