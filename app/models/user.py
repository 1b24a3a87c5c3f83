"""User model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.constants.roles import Role

from .base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """User model representing forum members."""

    __tablename__ = "users"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Basic info
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))

    # Authentication
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Forum role
    role: Mapped[Role] = mapped_column(
        String(20), default=Role.BEGINNER.value, nullable=False, index=True
    )

    # Profile info
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    bio: Mapped[str | None] = mapped_column(Text)

    # Relationships (rows are removed by ON DELETE CASCADE)
    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="author", cascade="all, delete-orphan", passive_deletes=True
    )
    replies: Mapped[list["Reply"]] = relationship(
        "Reply", back_populates="author", cascade="all, delete-orphan", passive_deletes=True
    )
    likes: Mapped[list["Like"]] = relationship(
        "Like", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    sent_friend_requests: Mapped[list["FriendRequest"]] = relationship(
        "FriendRequest",
        back_populates="sender",
        foreign_keys="FriendRequest.sender_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    received_friend_requests: Mapped[list["FriendRequest"]] = relationship(
        "FriendRequest",
        back_populates="receiver",
        foreign_keys="FriendRequest.receiver_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    following: Mapped[list["UserFollow"]] = relationship(
        "UserFollow",
        back_populates="follower",
        foreign_keys="UserFollow.follower_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    followers: Mapped[list["UserFollow"]] = relationship(
        "UserFollow",
        back_populates="following",
        foreign_keys="UserFollow.following_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        """Check if user holds the admin role."""
        return Role(self.role) == Role.ADMIN

    @property
    def can_login(self) -> bool:
        """Check if user can login."""
        return self.is_active

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
