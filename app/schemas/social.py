"""Social graph schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.constants.social import FriendshipState

from .common import BaseResponse
from .user import SocialUser


class FriendRequestResponse(BaseModel):
    """Incoming friend request with its sender."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_id: int
    receiver_id: int
    status: str
    sender: SocialUser
    created_at: datetime


class PendingRequestInfo(BaseModel):
    id: int
    is_sent_by_me: bool


class SocialProfile(SocialUser):
    """Another user's profile as seen by the caller."""

    created_at: datetime
    posts_count: int
    followers_count: int
    following_count: int
    is_following: bool
    is_friend: bool
    pending_request: PendingRequestInfo | None = None
    relationship: FriendshipState


class FriendListResponse(BaseResponse):
    friends: list[SocialUser]


class FollowingListResponse(BaseResponse):
    following: list[SocialUser]


class FollowersListResponse(BaseResponse):
    followers: list[SocialUser]


class FriendRequestListResponse(BaseResponse):
    requests: list[FriendRequestResponse]


class FriendRequestSentResponse(BaseResponse):
    request_id: int
    relationship: FriendshipState


class RelationshipChangeResponse(BaseResponse):
    relationship: FriendshipState


class UserSearchResponse(BaseResponse):
    users: list[SocialUser]


class SocialProfileResponse(BaseResponse):
    user: SocialProfile
