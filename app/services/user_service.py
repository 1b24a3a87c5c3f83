"""User management service."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.roles import Role
from app.models.user import User
from app.utils.exceptions import AuthenticationError, UserNotFoundError
from app.utils.security import hash_password, verify_password
from app.utils.transaction_manager import transaction_scope
from app.utils.validators import contains_pattern, validate_password, validate_search_query

logger = logging.getLogger(__name__)


class UserService:
    """Service for user lookup and self-service profile operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: int) -> User:
        """Get user by ID."""
        user = await self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> User | None:
        """Get user by username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def update_profile(self, user: User, **fields) -> User:
        """Update profile fields; None values are left unchanged."""
        async with transaction_scope(self.db):
            for field, value in fields.items():
                if value is not None and hasattr(user, field):
                    setattr(user, field, value)

        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """Change password after verifying the current one."""
        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect", error_code="INVALID_PASSWORD")

        validate_password(new_password)

        async with transaction_scope(self.db):
            user.password_hash = hash_password(new_password)

        logger.info("Password changed", extra={"user_id": user.id})

    async def search_users(self, query: str | None, limit: int = 10) -> list[User]:
        """Search active users by username or name."""
        query = validate_search_query(query)
        pattern = contains_pattern(query)

        result = await self.db.execute(
            select(User)
            .where(
                User.is_active.is_(True),
                or_(
                    User.username.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(User.username)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_active_admins(self) -> int:
        """Count users that are both ADMIN and active."""
        result = await self.db.execute(
            select(func.count(User.id)).where(
                User.role == Role.ADMIN.value,
                User.is_active.is_(True),
            )
        )
        return result.scalar_one()
