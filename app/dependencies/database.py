"""Database session dependency."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.database import get_async_session_local


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for one request; services own commit and rollback."""
    session_local = get_async_session_local()
    async with session_local() as session:
        yield session
