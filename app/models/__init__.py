"""Database models."""

from .base import Base, TimestampMixin
from .category import Category
from .post import Like, Post, Reply
from .social import FriendRequest, UserFollow
from .user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Category",
    "Post",
    "Reply",
    "Like",
    "FriendRequest",
    "UserFollow",
]
