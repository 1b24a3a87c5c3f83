"""Test configuration and fixtures."""

import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config.database import get_async_session_local, init_models, reset_engines
from app.config.settings import settings
from app.constants.roles import Role
from app.main import app

# Import all models to register them with Base.metadata
from app.models import *  # noqa: F403, F401
from app.models.category import Category
from app.models.user import User
from app.services.jwt_service import JWTService
from app.utils.security import hash_password

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture(autouse=True)
def setup_test_settings():
    """Override global settings for testing."""
    settings.TESTING = True
    settings.RATE_LIMIT_ENABLED = False
    yield


# Every test gets its own database file
@pytest_asyncio.fixture
async def setup_test_database(tmp_path) -> AsyncGenerator[None, None]:
    """Create a fresh SQLite database with all tables."""
    original_url = settings.DATABASE_URL
    settings.DATABASE_URL = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"

    await reset_engines()
    await init_models()

    yield

    await reset_engines()
    settings.DATABASE_URL = original_url


# Database session for tests
@pytest_asyncio.fixture
async def db_session(setup_test_database):
    """Create async database session for testing."""
    session_local = get_async_session_local()
    async with session_local() as session:
        yield session


# Async test client
@pytest_asyncio.fixture
async def async_client(setup_test_database) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def default_category(setup_test_database) -> Category:
    """The category posts fall back to when none is named."""
    session_local = get_async_session_local()
    async with session_local() as db:
        category = Category(
            name=settings.DEFAULT_CATEGORY_NAME,
            slug="general-discussion",
            color=settings.DEFAULT_CATEGORY_COLOR,
        )
        db.add(category)
        await db.commit()
        return category


@pytest.fixture
def make_user(setup_test_database):
    """Factory creating users directly in the database."""

    async def _make_user(
        role: Role = Role.BEGINNER,
        is_active: bool = True,
        username: str | None = None,
        **fields,
    ) -> User:
        unique_id = uuid.uuid4().hex[:8]
        username = username or f"{role.value.lower()}_{unique_id}"

        session_local = get_async_session_local()
        async with session_local() as db:
            user = User(
                email=f"{username}@example.com",
                username=username,
                password_hash=hash_password(TEST_PASSWORD),
                role=role.value,
                is_active=is_active,
                is_verified=True,
                **fields,
            )
            db.add(user)
            await db.commit()

            # Add original password for testing
            user.original_password = TEST_PASSWORD
            return user

    return _make_user


def auth_headers_for(user: User) -> dict[str, str]:
    """Bearer headers with a freshly issued token for user."""
    token = JWTService().create_access_token(user_id=user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Factory building bearer headers for any user."""
    return auth_headers_for


@pytest_asyncio.fixture
async def beginner(make_user) -> User:
    return await make_user(Role.BEGINNER)


@pytest_asyncio.fixture
async def contributor(make_user) -> User:
    return await make_user(Role.CONTRIBUTOR)


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(Role.ADMIN)


@pytest.fixture
def beginner_headers(beginner) -> dict[str, str]:
    return auth_headers_for(beginner)


@pytest.fixture
def contributor_headers(contributor) -> dict[str, str]:
    return auth_headers_for(contributor)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return auth_headers_for(admin)
