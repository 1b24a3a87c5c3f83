"""Friend request and follow rules.

The friend relationship between two users is one of the FriendshipState
values, always seen from one side of the pair. Storage facts are gathered by
the caller into a RelationshipSnapshot and turned into a state with
derive_state(); the transition functions then decide on that state alone.

A declined request does not block a new one. The caller removes the stale
declined record of the pair before storing the new pending request.
"""

from dataclasses import dataclass
from typing import Any, Hashable, Optional

from app.constants.social import FriendRequestStatus, FriendshipState

from .base_policy import PolicyResult

# Rejection reasons, returned verbatim to clients
SELF_FRIEND_REQUEST = "Cannot send friend request to yourself"
ALREADY_FRIENDS = "Already friends with this user"
FRIEND_REQUEST_EXISTS = "Friend request already exists"
FRIEND_REQUEST_NOT_FOUND = "Friend request not found"
FRIENDSHIP_NOT_FOUND = "Friendship not found"
SELF_FOLLOW = "Cannot follow yourself"
ALREADY_FOLLOWING = "Already following this user"
NOT_FOLLOWING = "Not following this user"

# Rejections that mean the referenced relationship does not exist
NOT_FOUND_REASONS = frozenset({FRIEND_REQUEST_NOT_FOUND, FRIENDSHIP_NOT_FOUND})


@dataclass
class SocialDecision(PolicyResult):
    """Policy result carrying the friendship state after the transition."""

    state: Optional[FriendshipState] = None

    @classmethod
    def transition(cls, state: FriendshipState) -> "SocialDecision":
        return cls(allowed=True, state=state)

    @property
    def is_not_found(self) -> bool:
        return not self.allowed and self.reason in NOT_FOUND_REASONS


@dataclass(frozen=True)
class RelationshipSnapshot:
    """Friend relationship facts for an unordered pair of users."""

    accepted_exists: bool = False
    pending_sender_id: Optional[Hashable] = None
    declined_exists: bool = False

    @classmethod
    def from_requests(cls, requests) -> "RelationshipSnapshot":
        """Build a snapshot from the stored requests between two users."""
        accepted_exists = False
        pending_sender_id = None
        declined_exists = False

        for request in requests:
            status = FriendRequestStatus(request.status)
            if status == FriendRequestStatus.ACCEPTED:
                accepted_exists = True
            elif status == FriendRequestStatus.PENDING:
                pending_sender_id = request.sender_id
            else:
                declined_exists = True

        return cls(
            accepted_exists=accepted_exists,
            pending_sender_id=pending_sender_id,
            declined_exists=declined_exists,
        )


def derive_state(viewer_id: Hashable, snapshot: RelationshipSnapshot) -> FriendshipState:
    """Friendship state as seen by viewer_id."""
    if snapshot.accepted_exists:
        return FriendshipState.FRIENDS

    if snapshot.pending_sender_id is not None:
        if snapshot.pending_sender_id == viewer_id:
            return FriendshipState.PENDING_OUTBOUND
        return FriendshipState.PENDING_INBOUND

    if snapshot.declined_exists:
        return FriendshipState.DECLINED

    return FriendshipState.NONE


def send_friend_request(
    sender_id: Hashable, receiver_id: Hashable, state: FriendshipState
) -> SocialDecision:
    """Decide whether sender_id may send a friend request to receiver_id.

    On success the resulting state is PENDING_OUTBOUND from the sender's side
    (and PENDING_INBOUND from the receiver's).
    """
    if sender_id == receiver_id:
        return SocialDecision.deny(SELF_FRIEND_REQUEST)

    if state == FriendshipState.FRIENDS:
        return SocialDecision.deny(ALREADY_FRIENDS)

    if state in (FriendshipState.PENDING_OUTBOUND, FriendshipState.PENDING_INBOUND):
        return SocialDecision.deny(FRIEND_REQUEST_EXISTS)

    return SocialDecision.transition(FriendshipState.PENDING_OUTBOUND)


def _answerable_by(caller_id: Hashable, request: Optional[Any]) -> bool:
    """Only the receiver of a pending request may answer it."""
    if request is None:
        return False

    return (
        request.receiver_id == caller_id
        and FriendRequestStatus(request.status) == FriendRequestStatus.PENDING
    )


def accept_friend_request(caller_id: Hashable, request: Optional[Any]) -> SocialDecision:
    if not _answerable_by(caller_id, request):
        return SocialDecision.deny(FRIEND_REQUEST_NOT_FOUND)

    return SocialDecision.transition(FriendshipState.FRIENDS)


def decline_friend_request(caller_id: Hashable, request: Optional[Any]) -> SocialDecision:
    """Declining keeps the record, marked DECLINED."""
    if not _answerable_by(caller_id, request):
        return SocialDecision.deny(FRIEND_REQUEST_NOT_FOUND)

    return SocialDecision.transition(FriendshipState.DECLINED)


def remove_friend(
    user_id: Hashable, friend_id: Hashable, state: FriendshipState
) -> SocialDecision:
    """Removing a friend deletes the accepted record, so NONE follows."""
    if user_id == friend_id or state != FriendshipState.FRIENDS:
        return SocialDecision.deny(FRIENDSHIP_NOT_FOUND)

    return SocialDecision.transition(FriendshipState.NONE)


def follow(follower_id: Hashable, following_id: Hashable, already_following: bool) -> PolicyResult:
    if follower_id == following_id:
        return PolicyResult.deny(SELF_FOLLOW)

    if already_following:
        return PolicyResult.deny(ALREADY_FOLLOWING)

    return PolicyResult.allow()


def unfollow(follower_id: Hashable, following_id: Hashable, is_following: bool) -> PolicyResult:
    if not is_following:
        return PolicyResult.deny(NOT_FOLLOWING)

    return PolicyResult.allow()
