"""Service dependency injection."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.database import get_db
from app.services.admin_service import AdminService
from app.services.auth_service import AuthService
from app.services.category_service import CategoryService
from app.services.post_service import PostService
from app.services.social_service import SocialService
from app.services.user_service import UserService


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AsyncGenerator[AuthService, None]:
    """Get AuthService instance."""
    yield AuthService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> AsyncGenerator[UserService, None]:
    """Get UserService instance."""
    yield UserService(db)


async def get_post_service(db: AsyncSession = Depends(get_db)) -> AsyncGenerator[PostService, None]:
    """Get PostService instance."""
    yield PostService(db)


async def get_category_service(
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[CategoryService, None]:
    """Get CategoryService instance."""
    yield CategoryService(db)


async def get_social_service(
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[SocialService, None]:
    """Get SocialService instance."""
    yield SocialService(db)


async def get_admin_service(
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[AdminService, None]:
    """Get AdminService instance."""
    yield AdminService(db)
