"""Authentication dependencies for FastAPI."""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.policies.base_policy import Principal
from app.policies.guards import require_active_user
from app.services.jwt_service import JWTService
from app.utils.exceptions import AuthenticationError, InvalidTokenError, TokenExpiredError

from .database import get_db

logger = logging.getLogger(__name__)

# Security scheme for Bearer tokens
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Get current user from the Bearer token, or None."""
    if not credentials:
        return None

    try:
        user_id = JWTService().get_user_id_from_token(credentials.credentials)
    except (InvalidTokenError, TokenExpiredError) as e:
        logger.debug("Rejected bearer token", extra={"reason": e.message})
        return None

    user = await db.get(User, user_id)
    if user:
        # Picked up by request logging
        request.state.user_id = user.id
        request.state.user_role = user.role
    return user


async def get_current_active_user(
    current_user: User | None = Depends(get_current_user),
) -> User:
    """Get current active user, raise exception if not authenticated."""
    if not current_user:
        raise AuthenticationError("Authentication required")

    require_active_user(current_user)
    return current_user


async def get_current_principal(
    current_user: User = Depends(get_current_active_user),
) -> Principal:
    """Get the authorization principal of the current user."""
    return Principal.from_user(current_user)
