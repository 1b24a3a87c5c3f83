"""Pydantic schemas for request/response models."""

from .admin import *
from .auth import *
from .category import *
from .common import *
from .post import *
from .social import *
from .user import *

__all__ = [
    # Common
    "BaseResponse",
    "PaginationMeta",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "PermissionsResponse",
    # User
    "UserSummary",
    "SocialUser",
    "UserResponse",
    "UserProfileUpdate",
    "PasswordChangeRequest",
    "UserDetailResponse",
    # Posts
    "PostCreate",
    "PostUpdate",
    "ReplyCreate",
    "PostResponse",
    "PostDetail",
    "ReplyResponse",
    "PostListResponse",
    "PostDetailResponse",
    # Categories
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "PublicCategory",
    # Social
    "FriendRequestResponse",
    "SocialProfile",
    # Admin
    "AdminUser",
    "AdminUserDetail",
    "ForumStats",
]
