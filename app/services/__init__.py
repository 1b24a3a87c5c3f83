"""Service layer for business logic."""

from .admin_service import AdminService
from .auth_service import AuthService
from .category_service import CategoryService
from .jwt_service import JWTService
from .post_service import PostService
from .social_service import SocialService
from .user_service import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "CategoryService",
    "JWTService",
    "PostService",
    "SocialService",
    "UserService",
]
