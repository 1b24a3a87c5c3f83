"""Post, reply and like service."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config.settings import settings
from app.models.category import Category
from app.models.post import Like, Post, Reply
from app.models.user import User
from app.policies.base_policy import Action
from app.policies.guards import check, require
from app.utils.exceptions import (
    PostLockedError,
    PostNotFoundError,
    ReplyNotFoundError,
    ValidationError,
)
from app.utils.transaction_manager import transaction_scope
from app.utils.validators import contains_pattern

logger = logging.getLogger(__name__)

PostWithCounts = tuple[Post, int, int]


def _likes_count():
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def _replies_count():
    return (
        select(func.count(Reply.id))
        .where(Reply.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


class PostService:
    """Service for forum posts and their replies and likes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        search: str | None = None,
        pinned: bool | None = None,
        sort: str = "recent",
    ) -> tuple[list[PostWithCounts], int]:
        """List posts with pagination, filtering and sorting."""
        filters = []

        if category and category != "all":
            filters.append(Category.name == category)

        if pinned:
            filters.append(Post.is_pinned.is_(True))

        if search:
            pattern = contains_pattern(search)
            filters.append(
                or_(
                    Post.title.ilike(pattern, escape="\\"),
                    Post.content.ilike(pattern, escape="\\"),
                    Post.tags.ilike(contains_pattern(f'"{search}"'), escape="\\"),
                    User.username.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                )
            )

        count_query = (
            select(func.count(Post.id))
            .select_from(Post)
            .join(Post.category)
            .join(Post.author)
            .where(*filters)
        )
        total = (await self.db.execute(count_query)).scalar_one()

        likes_count = _likes_count()
        replies_count = _replies_count()

        query = (
            select(Post, likes_count.label("likes_count"), replies_count.label("replies_count"))
            .join(Post.category)
            .join(Post.author)
            .where(*filters)
            .options(selectinload(Post.author), selectinload(Post.category))
        )

        if sort == "hot":
            query = query.order_by(likes_count.desc(), Post.created_at.desc(), Post.id.desc())
        else:
            query = query.order_by(Post.created_at.desc(), Post.id.desc())

        query = query.offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)

        return [(post, likes, replies) for post, likes, replies in result.all()], total

    async def get_post(self, post_id: int, with_replies: bool = False) -> Post:
        """Get a post with author and category loaded."""
        options = [selectinload(Post.author), selectinload(Post.category)]
        if with_replies:
            options.append(selectinload(Post.replies).selectinload(Reply.author))

        result = await self.db.execute(select(Post).where(Post.id == post_id).options(*options))
        post = result.scalar_one_or_none()
        if not post:
            raise PostNotFoundError()
        return post

    async def get_counts(self, post_id: int) -> tuple[int, int]:
        """Get like and reply counts of a post."""
        likes = await self.db.execute(select(func.count(Like.id)).where(Like.post_id == post_id))
        replies = await self.db.execute(
            select(func.count(Reply.id)).where(Reply.post_id == post_id)
        )
        return likes.scalar_one(), replies.scalar_one()

    async def get_post_detail(self, post_id: int) -> PostWithCounts:
        """Get a post with its replies and counts."""
        post = await self.get_post(post_id, with_replies=True)
        likes, replies = await self.get_counts(post_id)
        return post, likes, replies

    async def _resolve_category(self, name: str | None) -> Category:
        """Find a category by name, falling back to the default category."""
        if name:
            category = await self._category_by_name(name)
            if not category:
                raise ValidationError("Invalid category specified")
            return category

        category = await self._category_by_name(settings.DEFAULT_CATEGORY_NAME)
        if not category:
            raise ValidationError("No default category found. Please contact an administrator.")
        return category

    async def _category_by_name(self, name: str) -> Category | None:
        result = await self.db.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def create_post(
        self,
        author: User,
        title: str,
        content: str,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> PostWithCounts:
        """Create a post in the named category."""
        require(author, Action.CREATE, "post")
        category_record = await self._resolve_category(category)

        post = Post(
            title=title.strip(),
            content=content.strip(),
            author_id=author.id,
            category_id=category_record.id,
        )
        post.tags_list = tags or []

        async with transaction_scope(self.db) as tx:
            self.db.add(post)
            await tx.flush()

        await self.db.refresh(post, ["author", "category"])
        logger.info("Post created", extra={"post_id": post.id, "author_id": author.id})
        return post, 0, 0

    async def update_post(
        self,
        actor: User,
        post_id: int,
        title: str | None = None,
        content: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> PostWithCounts:
        """Update a post; only the author or an admin may do so."""
        post = await self.get_post(post_id)
        require(actor, Action.UPDATE, "post", resource=post)

        new_category = None
        if category and category != post.category.name:
            new_category = await self._resolve_category(category)

        async with transaction_scope(self.db):
            if title:
                post.title = title.strip()
            if content:
                post.content = content.strip()
            if tags is not None:
                post.tags_list = tags
            if new_category is not None:
                post.category = new_category

        self._audit_foreign_content(actor, post.author_id, "Post updated", post_id=post.id)
        likes, replies = await self.get_counts(post.id)
        return post, likes, replies

    async def delete_post(self, actor: User, post_id: int) -> None:
        """Delete a post with its replies and likes."""
        post = await self.get_post(post_id)
        require(actor, Action.DELETE, "post", resource=post)

        async with transaction_scope(self.db):
            await self.db.delete(post)

        self._audit_foreign_content(actor, post.author_id, "Post deleted", post_id=post_id)

    async def create_reply(self, author: User, post_id: int, content: str) -> Reply:
        """Reply to a post unless it is locked."""
        post = await self.get_post(post_id)

        result = check(author, Action.REPLY, "post", resource=post, is_locked=post.is_locked)
        if not result.allowed:
            raise PostLockedError(result.reason)

        reply = Reply(post_id=post.id, author_id=author.id, content=content.strip())

        async with transaction_scope(self.db) as tx:
            self.db.add(reply)
            await tx.flush()

        await self.db.refresh(reply, ["author"])
        return reply

    async def _get_reply(self, post_id: int, reply_id: int) -> Reply:
        result = await self.db.execute(
            select(Reply)
            .where(Reply.id == reply_id, Reply.post_id == post_id)
            .options(selectinload(Reply.author))
        )
        reply = result.scalar_one_or_none()
        if not reply:
            raise ReplyNotFoundError()
        return reply

    async def update_reply(self, actor: User, post_id: int, reply_id: int, content: str) -> Reply:
        """Edit a reply; only the author or an admin may do so."""
        reply = await self._get_reply(post_id, reply_id)
        require(actor, Action.UPDATE, "reply", resource=reply, noun="replies")

        async with transaction_scope(self.db):
            reply.content = content.strip()

        self._audit_foreign_content(actor, reply.author_id, "Reply updated", reply_id=reply.id)
        return reply

    async def delete_reply(self, actor: User, post_id: int, reply_id: int) -> None:
        reply = await self._get_reply(post_id, reply_id)
        require(actor, Action.DELETE, "reply", resource=reply, noun="replies")

        async with transaction_scope(self.db):
            await self.db.delete(reply)

        self._audit_foreign_content(actor, reply.author_id, "Reply deleted", reply_id=reply_id)

    async def toggle_like(self, user: User, post_id: int) -> tuple[bool, int]:
        """Like the post, or remove the like if it exists. Returns (liked, likes_count)."""
        post = await self.get_post(post_id)

        result = await self.db.execute(
            select(Like).where(Like.user_id == user.id, Like.post_id == post.id)
        )
        existing = result.scalar_one_or_none()

        async with transaction_scope(self.db):
            if existing:
                await self.db.delete(existing)
            else:
                self.db.add(Like(user_id=user.id, post_id=post.id))

        likes, _ = await self.get_counts(post.id)
        return existing is None, likes

    async def set_pinned(self, actor: User, post_id: int, is_pinned: bool) -> PostWithCounts:
        """Pin or unpin a post (admin only)."""
        require(actor, Action.PIN, "post")
        post = await self.get_post(post_id)

        async with transaction_scope(self.db):
            post.is_pinned = is_pinned

        logger.info(
            "Post pin status changed",
            extra={"post_id": post.id, "is_pinned": is_pinned, "moderator_id": actor.id},
        )
        likes, replies = await self.get_counts(post.id)
        return post, likes, replies

    async def set_locked(self, actor: User, post_id: int, is_locked: bool) -> PostWithCounts:
        """Lock or unlock a post for new replies (admin only)."""
        require(actor, Action.LOCK, "post")
        post = await self.get_post(post_id)

        async with transaction_scope(self.db):
            post.is_locked = is_locked

        logger.info(
            "Post lock status changed",
            extra={"post_id": post.id, "is_locked": is_locked, "moderator_id": actor.id},
        )
        likes, replies = await self.get_counts(post.id)
        return post, likes, replies

    def _audit_foreign_content(self, actor: User, author_id: int, event: str, **extra) -> None:
        # Only edits of someone else's content are moderation events
        if actor.id != author_id:
            logger.info(event, extra={"moderator_id": actor.id, "author_id": author_id, **extra})
