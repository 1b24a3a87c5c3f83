"""User administration and forum statistics service."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.constants.roles import Role
from app.models.post import Like, Post, Reply
from app.models.user import User
from app.policies.authorization_policy import AdminAction
from app.policies.guards import require_not_last_admin
from app.schemas.user import UserSummary
from app.utils.transaction_manager import transaction_scope
from app.utils.validators import contains_pattern

from .user_service import UserService

logger = logging.getLogger(__name__)


def _posts_count():
    return (
        select(func.count(Post.id)).where(Post.author_id == User.id).correlate(User).scalar_subquery()
    )


def _replies_count():
    return (
        select(func.count(Reply.id))
        .where(Reply.author_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


class AdminService:
    """Service for admin-only user management. Callers check admin rights first."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def list_users(
        self,
        page: int = 1,
        limit: int = 20,
        role: str | None = None,
        search: str | None = None,
    ) -> tuple[list[tuple[User, int, int]], int]:
        """List users with post and reply counts, newest first."""
        filters = []

        if role and role in Role.__members__:
            filters.append(User.role == role)

        if search:
            pattern = contains_pattern(search)
            filters.append(
                or_(
                    User.username.ilike(pattern, escape="\\"),
                    User.email.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                )
            )

        total = (await self.db.execute(select(func.count(User.id)).where(*filters))).scalar_one()

        result = await self.db.execute(
            select(User, _posts_count().label("posts_count"), _replies_count().label("replies_count"))
            .where(*filters)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return [(user, posts, replies) for user, posts, replies in result.all()], total

    async def get_user_detail(self, user_id: int) -> dict:
        """User with counts and the ten most recent posts and replies."""
        user = await self.user_service.get_user_by_id(user_id)

        likes_sq = (
            select(func.count(Like.id)).where(Like.post_id == Post.id).correlate(Post).scalar_subquery()
        )
        replies_sq = (
            select(func.count(Reply.id))
            .where(Reply.post_id == Post.id)
            .correlate(Post)
            .scalar_subquery()
        )
        posts_result = await self.db.execute(
            select(Post, likes_sq, replies_sq)
            .where(Post.author_id == user.id)
            .options(selectinload(Post.category))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(10)
        )
        recent_posts = [
            {
                "id": post.id,
                "title": post.title,
                "category": post.category.name,
                "created_at": post.created_at,
                "likes_count": likes,
                "replies_count": replies,
            }
            for post, likes, replies in posts_result.all()
        ]

        replies_result = await self.db.execute(
            select(Reply)
            .where(Reply.author_id == user.id)
            .options(selectinload(Reply.post))
            .order_by(Reply.created_at.desc(), Reply.id.desc())
            .limit(10)
        )
        recent_replies = [
            {
                "id": reply.id,
                "content": reply.content,
                "post_id": reply.post_id,
                "post_title": reply.post.title,
                "created_at": reply.created_at,
            }
            for reply in replies_result.scalars().all()
        ]

        return {
            **self._user_fields(user),
            "updated_at": user.updated_at,
            "posts_count": await self._count(Post.id, Post.author_id == user.id),
            "replies_count": await self._count(Reply.id, Reply.author_id == user.id),
            "likes_count": await self._count(Like.id, Like.user_id == user.id),
            "recent_posts": recent_posts,
            "recent_replies": recent_replies,
        }

    @staticmethod
    def _target_counts_as_active_admin(user: User) -> bool:
        # Only active admins belong to the set the last-admin guard protects
        return user.is_admin and user.is_active

    async def update_role(self, actor: User, user_id: int, role: Role) -> User:
        """Change a user's role, never demoting the last active admin."""
        target = await self.user_service.get_user_by_id(user_id)
        role = Role(role)

        if role != Role.ADMIN:
            require_not_last_admin(
                AdminAction.DEMOTE,
                self._target_counts_as_active_admin(target),
                await self.user_service.count_active_admins(),
            )

        previous = Role(target.role)
        async with transaction_scope(self.db):
            target.role = role.value

        logger.info(
            "User role changed",
            extra={
                "admin_id": actor.id,
                "target_user_id": target.id,
                "old_role": previous.value,
                "new_role": role.value,
            },
        )
        return target

    async def update_status(self, actor: User, user_id: int, is_active: bool) -> User:
        """Activate or deactivate a user, never deactivating the last active admin."""
        target = await self.user_service.get_user_by_id(user_id)

        if not is_active:
            require_not_last_admin(
                AdminAction.DEACTIVATE,
                self._target_counts_as_active_admin(target),
                await self.user_service.count_active_admins(),
            )

        async with transaction_scope(self.db):
            target.is_active = is_active

        logger.info(
            "User status changed",
            extra={"admin_id": actor.id, "target_user_id": target.id, "is_active": is_active},
        )
        return target

    async def delete_user(self, actor: User, user_id: int) -> None:
        """Delete a user and, by cascade, their content and relationships."""
        target = await self.user_service.get_user_by_id(user_id)

        require_not_last_admin(
            AdminAction.DELETE,
            self._target_counts_as_active_admin(target),
            await self.user_service.count_active_admins(),
        )

        async with transaction_scope(self.db):
            await self.db.delete(target)

        logger.info("User deleted", extra={"admin_id": actor.id, "target_user_id": user_id})

    async def get_stats(self) -> dict:
        """Forum totals and the five most recent posts."""
        total_users = await self._count(User.id)
        active_users = await self._count(User.id, User.is_active.is_(True))

        by_role = {role.value: 0 for role in Role}
        role_rows = await self.db.execute(select(User.role, func.count(User.id)).group_by(User.role))
        for role, count in role_rows.all():
            by_role[role] = count

        recent = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(5)
        )

        return {
            "users": {
                "total": total_users,
                "active": active_users,
                "inactive": total_users - active_users,
                "by_role": by_role,
            },
            "content": {
                "posts": await self._count(Post.id),
                "replies": await self._count(Reply.id),
                "likes": await self._count(Like.id),
            },
            "recent_activity": [
                {
                    "id": post.id,
                    "title": post.title,
                    "created_at": post.created_at,
                    "author": UserSummary.model_validate(post.author),
                }
                for post in recent.scalars().all()
            ],
        }

    @staticmethod
    def _user_fields(user: User) -> dict:
        return {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "avatar_url": user.avatar_url,
            "bio": user.bio,
            "role": user.role,
            "is_active": user.is_active,
            "is_verified": user.is_verified,
            "created_at": user.created_at,
            "last_login_at": user.last_login_at,
        }

    async def _count(self, column, *conditions) -> int:
        result = await self.db.execute(select(func.count(column)).where(*conditions))
        return result.scalar_one()
