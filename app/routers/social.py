"""Friend, follow and user discovery routes."""

from fastapi import APIRouter, Depends, Query, status

from app.dependencies.auth import get_current_active_user
from app.dependencies.services import get_social_service, get_user_service
from app.models.user import User
from app.schemas.common import BaseResponse
from app.schemas.social import (
    FollowersListResponse,
    FollowingListResponse,
    FriendListResponse,
    FriendRequestListResponse,
    FriendRequestResponse,
    FriendRequestSentResponse,
    RelationshipChangeResponse,
    SocialProfile,
    SocialProfileResponse,
    UserSearchResponse,
)
from app.schemas.user import SocialUser
from app.services.social_service import SocialService
from app.services.user_service import UserService

router = APIRouter()


@router.get("/friends", response_model=FriendListResponse)
async def list_friends(
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    friends = await social_service.list_friends(current_user)
    return FriendListResponse(
        success=True, friends=[SocialUser.model_validate(u) for u in friends]
    )


@router.get("/following", response_model=FollowingListResponse)
async def list_following(
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    following = await social_service.list_following(current_user)
    return FollowingListResponse(
        success=True, following=[SocialUser.model_validate(u) for u in following]
    )


@router.get("/followers", response_model=FollowersListResponse)
async def list_followers(
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    followers = await social_service.list_followers(current_user)
    return FollowersListResponse(
        success=True, followers=[SocialUser.model_validate(u) for u in followers]
    )


@router.post("/follow/{user_id}", response_model=BaseResponse)
async def follow_user(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    await social_service.follow(current_user, user_id)
    return BaseResponse(success=True, message="User followed successfully")


@router.delete("/follow/{user_id}", response_model=BaseResponse)
async def unfollow_user(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    await social_service.unfollow(current_user, user_id)
    return BaseResponse(success=True, message="User unfollowed successfully")


@router.post(
    "/friend-request/{user_id}",
    response_model=FriendRequestSentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_friend_request(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    request, relationship = await social_service.send_friend_request(current_user, user_id)
    return FriendRequestSentResponse(
        success=True,
        message="Friend request sent successfully",
        request_id=request.id,
        relationship=relationship,
    )


@router.get("/friend-requests", response_model=FriendRequestListResponse)
async def list_friend_requests(
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    """Pending requests the caller has received."""
    requests = await social_service.list_incoming_requests(current_user)
    return FriendRequestListResponse(
        success=True,
        requests=[FriendRequestResponse.model_validate(r) for r in requests],
    )


@router.put("/friend-request/{request_id}/accept", response_model=RelationshipChangeResponse)
async def accept_friend_request(
    request_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    relationship = await social_service.accept_friend_request(current_user, request_id)
    return RelationshipChangeResponse(
        success=True, message="Friend request accepted", relationship=relationship
    )


@router.put("/friend-request/{request_id}/decline", response_model=RelationshipChangeResponse)
async def decline_friend_request(
    request_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    relationship = await social_service.decline_friend_request(current_user, request_id)
    return RelationshipChangeResponse(
        success=True, message="Friend request declined", relationship=relationship
    )


@router.delete("/friend/{user_id}", response_model=RelationshipChangeResponse)
async def remove_friend(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    relationship = await social_service.remove_friend(current_user, user_id)
    return RelationshipChangeResponse(
        success=True, message="Friend removed successfully", relationship=relationship
    )


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    q: str | None = Query(None, description="Username or name fragment"),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
):
    """Find active users to follow or befriend."""
    users = await user_service.search_users(q, limit=limit)
    return UserSearchResponse(success=True, users=[SocialUser.model_validate(u) for u in users])


@router.get("/user/{user_id}", response_model=SocialProfileResponse)
async def get_user_profile(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    social_service: SocialService = Depends(get_social_service),
):
    """Another user's profile and the caller's relationship to them."""
    profile = await social_service.get_profile(current_user, user_id)
    return SocialProfileResponse(success=True, user=SocialProfile(**profile))
