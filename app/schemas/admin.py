"""Admin schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.constants.roles import Role

from .common import BaseResponse, PaginationMeta
from .user import UserSummary


class RoleUpdateRequest(BaseModel):
    role: Role


class StatusUpdateRequest(BaseModel):
    is_active: bool


class AdminUser(BaseModel):
    """User row in the admin listing."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    role: Role
    is_active: bool
    is_verified: bool
    created_at: datetime
    last_login_at: datetime | None = None
    posts_count: int = 0
    replies_count: int = 0


class AdminPostSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    category: str
    created_at: datetime
    likes_count: int = 0
    replies_count: int = 0


class AdminReplySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    post_id: int
    post_title: str
    created_at: datetime


class AdminUserDetail(AdminUser):
    """User with recent activity."""

    updated_at: datetime
    likes_count: int = 0
    recent_posts: list[AdminPostSummary] = Field(default_factory=list)
    recent_replies: list[AdminReplySummary] = Field(default_factory=list)


class UserStats(BaseModel):
    total: int
    active: int
    inactive: int
    by_role: dict[str, int]


class ContentStats(BaseModel):
    posts: int
    replies: int
    likes: int


class RecentPost(BaseModel):
    id: int
    title: str
    created_at: datetime
    author: UserSummary


class ForumStats(BaseModel):
    users: UserStats
    content: ContentStats
    recent_activity: list[RecentPost]


class AdminUserListResponse(BaseResponse):
    users: list[AdminUser]
    pagination: PaginationMeta


class AdminUserDetailResponse(BaseResponse):
    user: AdminUserDetail


class AdminUserUpdateResponse(BaseResponse):
    user: AdminUser


class StatsResponse(BaseResponse):
    stats: ForumStats
