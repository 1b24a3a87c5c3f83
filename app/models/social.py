"""Friend request and follow models."""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.constants.social import FriendRequestStatus

from .base import Base, TimestampMixin


class FriendRequest(Base, TimestampMixin):
    """Directed friend request; an ACCEPTED record is a friendship."""

    __tablename__ = "friend_requests"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Foreign keys
    sender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[FriendRequestStatus] = mapped_column(
        String(20), default=FriendRequestStatus.PENDING.value, nullable=False, index=True
    )

    # Relationships
    sender: Mapped["User"] = relationship(
        "User", back_populates="sent_friend_requests", foreign_keys=[sender_id]
    )
    receiver: Mapped["User"] = relationship(
        "User", back_populates="received_friend_requests", foreign_keys=[receiver_id]
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("sender_id", "receiver_id", name="unique_friend_request_pair"),
        CheckConstraint("sender_id != receiver_id", name="no_self_friend_request"),
    )

    def __repr__(self) -> str:
        return (
            f"<FriendRequest(id={self.id}, sender_id={self.sender_id}, "
            f"receiver_id={self.receiver_id}, status='{self.status}')>"
        )


class UserFollow(Base, TimestampMixin):
    """Directed follow edge from follower to following."""

    __tablename__ = "user_follows"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Foreign keys
    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    following_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    follower: Mapped["User"] = relationship(
        "User", back_populates="following", foreign_keys=[follower_id]
    )
    following: Mapped["User"] = relationship(
        "User", back_populates="followers", foreign_keys=[following_id]
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="unique_follow_pair"),
        CheckConstraint("follower_id != following_id", name="no_self_follow"),
    )

    def __repr__(self) -> str:
        return f"<UserFollow(follower_id={self.follower_id}, following_id={self.following_id})>"
