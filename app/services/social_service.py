"""Friend and follow service.

Loads relationship facts from storage, asks the social policy for a
decision and applies the resulting mutation.
"""

import logging

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.constants.social import FriendRequestStatus, FriendshipState
from app.models.post import Post
from app.models.social import FriendRequest, UserFollow
from app.models.user import User
from app.policies import social_policy
from app.policies.social_policy import RelationshipSnapshot, SocialDecision, derive_state
from app.utils.exceptions import PolicyRejectedError, RelationshipNotFoundError
from app.utils.transaction_manager import transaction_scope

from .user_service import UserService

logger = logging.getLogger(__name__)


def _raise_for(decision) -> None:
    """Translate a social policy rejection into an API error."""
    if decision.allowed:
        return

    if isinstance(decision, SocialDecision) and decision.is_not_found:
        raise RelationshipNotFoundError(decision.reason)

    raise PolicyRejectedError(decision.reason)


def _between(user_a: int, user_b: int):
    """Friend request records of the pair, in both directions."""
    return or_(
        and_(FriendRequest.sender_id == user_a, FriendRequest.receiver_id == user_b),
        and_(FriendRequest.sender_id == user_b, FriendRequest.receiver_id == user_a),
    )


class SocialService:
    """Service for friend requests, friendships and follows."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def _requests_between(self, user_a: int, user_b: int) -> list[FriendRequest]:
        result = await self.db.execute(select(FriendRequest).where(_between(user_a, user_b)))
        return list(result.scalars().all())

    async def get_relationship(self, viewer_id: int, other_id: int) -> FriendshipState:
        """Friendship state between two users, as seen by viewer_id."""
        snapshot = RelationshipSnapshot.from_requests(
            await self._requests_between(viewer_id, other_id)
        )
        return derive_state(viewer_id, snapshot)

    async def _is_following(self, follower_id: int, following_id: int) -> UserFollow | None:
        result = await self.db.execute(
            select(UserFollow).where(
                UserFollow.follower_id == follower_id,
                UserFollow.following_id == following_id,
            )
        )
        return result.scalar_one_or_none()

    # Lists

    async def list_friends(self, user: User) -> list[User]:
        """Users with an accepted friend request to or from user."""
        result = await self.db.execute(
            select(FriendRequest)
            .where(
                or_(FriendRequest.sender_id == user.id, FriendRequest.receiver_id == user.id),
                FriendRequest.status == FriendRequestStatus.ACCEPTED.value,
            )
            .options(selectinload(FriendRequest.sender), selectinload(FriendRequest.receiver))
            .order_by(FriendRequest.updated_at.desc())
        )
        return [
            request.receiver if request.sender_id == user.id else request.sender
            for request in result.scalars().all()
        ]

    async def list_following(self, user: User) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(UserFollow, UserFollow.following_id == User.id)
            .where(UserFollow.follower_id == user.id)
            .order_by(UserFollow.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_followers(self, user: User) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(UserFollow, UserFollow.follower_id == User.id)
            .where(UserFollow.following_id == user.id)
            .order_by(UserFollow.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_incoming_requests(self, user: User) -> list[FriendRequest]:
        """Pending requests user has received."""
        result = await self.db.execute(
            select(FriendRequest)
            .where(
                FriendRequest.receiver_id == user.id,
                FriendRequest.status == FriendRequestStatus.PENDING.value,
            )
            .options(selectinload(FriendRequest.sender))
            .order_by(FriendRequest.created_at.desc())
        )
        return list(result.scalars().all())

    # Follows

    async def follow(self, user: User, target_id: int) -> None:
        if user.id != target_id:
            await self.user_service.get_user_by_id(target_id)

        existing = await self._is_following(user.id, target_id)
        _raise_for(social_policy.follow(user.id, target_id, existing is not None))

        async with transaction_scope(self.db):
            self.db.add(UserFollow(follower_id=user.id, following_id=target_id))

        logger.info("User followed", extra={"follower_id": user.id, "following_id": target_id})

    async def unfollow(self, user: User, target_id: int) -> None:
        existing = await self._is_following(user.id, target_id)
        _raise_for(social_policy.unfollow(user.id, target_id, existing is not None))

        async with transaction_scope(self.db):
            await self.db.delete(existing)

        logger.info("User unfollowed", extra={"follower_id": user.id, "following_id": target_id})

    # Friend requests

    async def send_friend_request(
        self, user: User, receiver_id: int
    ) -> tuple[FriendRequest, FriendshipState]:
        """Send a friend request, replacing any declined record of the pair."""
        if user.id != receiver_id:
            await self.user_service.get_user_by_id(receiver_id)

        requests = await self._requests_between(user.id, receiver_id)
        state = derive_state(user.id, RelationshipSnapshot.from_requests(requests))

        decision = social_policy.send_friend_request(user.id, receiver_id, state)
        _raise_for(decision)

        stale = [r for r in requests if r.status == FriendRequestStatus.DECLINED.value]
        request = FriendRequest(
            sender_id=user.id,
            receiver_id=receiver_id,
            status=FriendRequestStatus.PENDING.value,
        )

        async with transaction_scope(self.db) as tx:
            # Deletes must reach the database before the insert hits the unique pair
            for record in stale:
                await self.db.delete(record)
            await tx.flush()

            self.db.add(request)
            await tx.flush()

        logger.info(
            "Friend request sent",
            extra={"request_id": request.id, "sender_id": user.id, "receiver_id": receiver_id},
        )
        return request, decision.state

    async def _answer_request(self, user: User, request_id: int, accept: bool) -> FriendshipState:
        request = await self.db.get(FriendRequest, request_id)

        if accept:
            decision = social_policy.accept_friend_request(user.id, request)
            new_status = FriendRequestStatus.ACCEPTED
        else:
            decision = social_policy.decline_friend_request(user.id, request)
            new_status = FriendRequestStatus.DECLINED
        _raise_for(decision)

        async with transaction_scope(self.db):
            request.status = new_status.value

        logger.info(
            "Friend request answered",
            extra={"request_id": request.id, "status": new_status.value, "receiver_id": user.id},
        )
        return decision.state

    async def accept_friend_request(self, user: User, request_id: int) -> FriendshipState:
        return await self._answer_request(user, request_id, accept=True)

    async def decline_friend_request(self, user: User, request_id: int) -> FriendshipState:
        return await self._answer_request(user, request_id, accept=False)

    async def remove_friend(self, user: User, friend_id: int) -> FriendshipState:
        """Delete the accepted record so a fresh request can be sent later."""
        state = await self.get_relationship(user.id, friend_id)

        decision = social_policy.remove_friend(user.id, friend_id, state)
        _raise_for(decision)

        async with transaction_scope(self.db):
            await self.db.execute(
                delete(FriendRequest)
                .where(
                    _between(user.id, friend_id),
                    FriendRequest.status == FriendRequestStatus.ACCEPTED.value,
                )
                .execution_options(synchronize_session=False)
            )

        logger.info("Friend removed", extra={"user_id": user.id, "friend_id": friend_id})
        return decision.state

    # Profiles

    async def get_profile(self, viewer: User, user_id: int) -> dict:
        """Public profile of user_id with the viewer's relationship to them."""
        target = await self.user_service.get_user_by_id(user_id)

        posts_count = await self._count(Post.id, Post.author_id == target.id)
        followers_count = await self._count(UserFollow.id, UserFollow.following_id == target.id)
        following_count = await self._count(UserFollow.id, UserFollow.follower_id == target.id)

        requests = await self._requests_between(viewer.id, target.id)
        snapshot = RelationshipSnapshot.from_requests(requests)
        pending = next(
            (r for r in requests if r.status == FriendRequestStatus.PENDING.value), None
        )

        return {
            "id": target.id,
            "username": target.username,
            "first_name": target.first_name,
            "last_name": target.last_name,
            "avatar_url": target.avatar_url,
            "bio": target.bio,
            "created_at": target.created_at,
            "posts_count": posts_count,
            "followers_count": followers_count,
            "following_count": following_count,
            "is_following": await self._is_following(viewer.id, target.id) is not None,
            "is_friend": snapshot.accepted_exists,
            "pending_request": (
                {"id": pending.id, "is_sent_by_me": pending.sender_id == viewer.id}
                if pending
                else None
            ),
            "relationship": derive_state(viewer.id, snapshot),
        }

    async def _count(self, column, condition) -> int:
        result = await self.db.execute(select(func.count(column)).where(condition))
        return result.scalar_one()
