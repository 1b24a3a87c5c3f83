"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.constants.roles import Role

from .common import BaseResponse, TimestampMixin


class UserSummary(BaseModel):
    """Public user fields embedded in posts, replies and social lists."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None


class SocialUser(UserSummary):
    """Public user fields plus biography."""

    bio: str | None = None


class UserResponse(TimestampMixin):
    """Schema for the authenticated user's own data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    role: Role
    avatar_url: str | None = None
    bio: str | None = None
    is_active: bool
    is_verified: bool
    last_login_at: datetime | None = None


class UserProfileUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    avatar_url: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=1000)


class PasswordChangeRequest(BaseModel):
    """Schema for password change request."""

    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password")


class UserDetailResponse(BaseResponse):
    """User detail response."""

    user: UserResponse
