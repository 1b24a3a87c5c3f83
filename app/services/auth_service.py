"""Authentication service: registration, login and token issuance."""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.roles import Role
from app.models.user import User
from app.utils.exceptions import (
    AccountInactiveError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    UsernameAlreadyExistsError,
)
from app.utils.security import hash_password, verify_password
from app.utils.transaction_manager import transaction_scope
from app.utils.validators import validate_email, validate_password, validate_username

from .jwt_service import JWTService
from .user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service for email and password accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.jwt_service = JWTService()
        self.user_service = UserService(db)

    async def register_user(
        self,
        email: str,
        username: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """Register a new BEGINNER account."""
        email = validate_email(email)
        validate_username(username)
        validate_password(password)

        # Check uniqueness before inserting
        if await self.user_service.get_user_by_email(email):
            raise EmailAlreadyExistsError("User with this email already exists")

        if await self.user_service.get_user_by_username(username):
            raise UsernameAlreadyExistsError("Username already taken")

        user = User(
            email=email,
            username=username,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.BEGINNER.value,
            is_active=True,
            is_verified=False,
        )

        async with transaction_scope(self.db) as tx:
            self.db.add(user)
            await tx.flush()

        logger.info("User registered", extra={"user_id": user.id, "username": user.username})
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate user with email and password."""
        user = await self.user_service.get_user_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt", extra={"email": email})
            raise InvalidCredentialsError()

        if not user.can_login:
            raise AccountInactiveError()

        async with transaction_scope(self.db):
            user.last_login_at = datetime.now(timezone.utc)

        logger.info("User logged in", extra={"user_id": user.id})
        return user

    def create_access_token(self, user: User) -> str:
        """Issue an access token for user."""
        return self.jwt_service.create_access_token(user_id=user.id, role=user.role)
