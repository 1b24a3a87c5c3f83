"""Constants package."""

from .roles import ALL_ROLES, ROLE_HIERARCHY, Role, role_rank
from .social import FriendRequestStatus, FriendshipState

__all__ = [
    "Role",
    "ROLE_HIERARCHY",
    "ALL_ROLES",
    "role_rank",
    "FriendRequestStatus",
    "FriendshipState",
]
