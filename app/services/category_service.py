"""Category management service."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.category import Category
from app.models.post import Post
from app.utils.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    ValidationError,
)
from app.utils.transaction_manager import transaction_scope
from app.utils.validators import validate_hex_color, validate_slug

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category CRUD. Callers check admin rights first."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_public_categories(self) -> list[Category]:
        """Active, public categories ordered for display."""
        result = await self.db.execute(
            select(Category)
            .where(Category.is_active.is_(True), Category.is_public.is_(True))
            .order_by(Category.sort_order, Category.name)
        )
        return list(result.scalars().all())

    async def list_categories(self) -> list[Category]:
        """All categories, refreshing each cached post count."""
        counts = dict(
            (
                await self.db.execute(
                    select(Post.category_id, func.count(Post.id)).group_by(Post.category_id)
                )
            ).all()
        )

        result = await self.db.execute(select(Category).order_by(Category.sort_order, Category.name))
        categories = list(result.scalars().all())

        async with transaction_scope(self.db):
            for category in categories:
                live_count = counts.get(category.id, 0)
                if category.post_count != live_count:
                    category.post_count = live_count

        return categories

    async def ensure_default_category(self) -> Category:
        """Create the fallback category new posts land in, if missing."""
        result = await self.db.execute(
            select(Category).where(Category.name == settings.DEFAULT_CATEGORY_NAME)
        )
        category = result.scalar_one_or_none()
        if category:
            return category

        return await self.create_category(
            name=settings.DEFAULT_CATEGORY_NAME,
            slug="general-discussion",
            description="General discussion about anything",
        )

    async def get_category(self, category_id: int) -> Category:
        category = await self.db.get(Category, category_id)
        if not category:
            raise CategoryNotFoundError()
        return category

    async def _find_duplicate(
        self, name: str | None, slug: str | None, exclude_id: int | None = None
    ) -> Category | None:
        conditions = []
        if name:
            conditions.append(Category.name == name)
        if slug:
            conditions.append(Category.slug == slug)
        if not conditions:
            return None

        query = select(Category).where(or_(*conditions))
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)

        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def create_category(
        self,
        name: str,
        slug: str,
        description: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        is_active: bool = True,
        sort_order: int = 0,
        allowed_roles: list[str] | None = None,
        is_public: bool = True,
        requires_approval: bool = False,
    ) -> Category:
        """Create a category with unique name and slug."""
        if not name or not slug:
            raise ValidationError("Name and slug are required")

        validate_slug(slug)
        validate_hex_color(color)

        if await self._find_duplicate(name, slug):
            raise CategoryAlreadyExistsError()

        category = Category(
            name=name,
            slug=slug,
            description=description or None,
            icon=icon or None,
            color=color or settings.DEFAULT_CATEGORY_COLOR,
            is_active=is_active,
            sort_order=sort_order or 0,
            is_public=is_public,
            requires_approval=requires_approval,
            post_count=0,
        )
        if allowed_roles is not None:
            category.allowed_roles_list = [str(getattr(r, "value", r)) for r in allowed_roles]

        async with transaction_scope(self.db) as tx:
            self.db.add(category)
            await tx.flush()

        logger.info("Category created", extra={"category_id": category.id, "slug": slug})
        return category

    async def update_category(self, category_id: int, **fields) -> Category:
        """Apply a partial update; None values are left unchanged."""
        category = await self.get_category(category_id)

        name, slug = fields.get("name"), fields.get("slug")
        if name or slug:
            if slug:
                validate_slug(slug)
            if await self._find_duplicate(name, slug, exclude_id=category.id):
                raise CategoryAlreadyExistsError(
                    "Another category with this name or slug already exists"
                )

        if fields.get("color"):
            validate_hex_color(fields["color"])

        async with transaction_scope(self.db):
            for field, value in fields.items():
                if value is None:
                    continue
                if field == "allowed_roles":
                    category.allowed_roles_list = [str(getattr(r, "value", r)) for r in value]
                elif hasattr(category, field):
                    setattr(category, field, value)

        logger.info("Category updated", extra={"category_id": category.id})
        return category

    async def delete_category(self, category_id: int) -> None:
        """Delete a category that has no posts."""
        category = await self.get_category(category_id)

        result = await self.db.execute(
            select(func.count(Post.id)).where(Post.category_id == category.id)
        )
        if result.scalar_one() > 0:
            raise ValidationError(
                "Cannot delete category with existing posts. "
                "Please move or delete the posts first."
            )

        async with transaction_scope(self.db):
            await self.db.delete(category)

        logger.info("Category deleted", extra={"category_id": category_id})
