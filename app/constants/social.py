"""Social graph status and state constants."""

from enum import Enum


class FriendRequestStatus(str, Enum):
    """Stored status of a directed friend request record."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class FriendshipState(str, Enum):
    """Friend relationship between two users, as seen by one of them."""

    NONE = "NONE"
    PENDING_OUTBOUND = "PENDING_OUTBOUND"  # Viewer sent the pending request
    PENDING_INBOUND = "PENDING_INBOUND"  # Viewer received the pending request
    FRIENDS = "FRIENDS"
    DECLINED = "DECLINED"
