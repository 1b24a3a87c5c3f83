"""JWT service for token generation and validation."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from app.config.settings import settings
from app.utils.exceptions import InvalidTokenError as CustomInvalidTokenError
from app.utils.exceptions import TokenExpiredError


class JWTService:
    """Service for JWT token operations."""

    def __init__(self):
        self.algorithm = settings.JWT_ALGORITHM
        self.secret_key = settings.JWT_SECRET_KEY
        self.access_token_expire_minutes = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    @property
    def access_token_expire_seconds(self) -> int:
        return self.access_token_expire_minutes * 60

    def create_access_token(
        self,
        user_id: int,
        role: str,
        extra_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Create a JWT access token."""
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=self.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),  # Subject (user ID)
            "role": str(getattr(role, "value", role)),
            "type": "access",
            "iat": now,  # Issued at
            "exp": expire,  # Expiration time
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }

        if extra_claims:
            payload.update(extra_claims)

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str, verify_exp: bool = True) -> Dict[str, Any]:
        """Decode and validate a JWT token."""
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": verify_exp},
                audience=settings.JWT_AUDIENCE,
                issuer=settings.JWT_ISSUER,
            )

        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")

        except InvalidTokenError as e:
            raise CustomInvalidTokenError(f"Invalid token: {e}")

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Decode and validate an access token."""
        payload = self.decode_token(token)

        if payload.get("type") != "access":
            raise CustomInvalidTokenError("Invalid token type")

        return payload

    def get_user_id_from_token(self, token: str) -> int:
        """Extract user ID from an access token."""
        payload = self.decode_access_token(token)
        user_id = payload.get("sub")

        if not user_id:
            raise CustomInvalidTokenError("Token missing user ID")

        try:
            return int(user_id)
        except ValueError:
            raise CustomInvalidTokenError("Invalid user ID in token")
