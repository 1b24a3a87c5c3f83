"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from app.constants.roles import Role

from .common import BaseResponse
from .user import UserResponse


class RegisterRequest(BaseModel):
    """Schema for registering a new account."""

    email: EmailStr = Field(..., description="User email address")
    username: str = Field(..., description="Unique username")
    password: str = Field(..., description="User password")
    first_name: str | None = Field(None, max_length=100, description="First name")
    last_name: str | None = Field(None, max_length=100, description="Last name")


class LoginRequest(BaseModel):
    """Schema for login request."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class AuthResponse(BaseResponse):
    """Schema for register and login responses."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse


class PermissionsResponse(BaseResponse):
    """Capabilities of the current user."""

    role: Role
    permissions: dict[str, bool]
