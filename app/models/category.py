"""Category model."""

import json

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.constants.roles import ALL_ROLES

from .base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """Discussion category that groups posts."""

    __tablename__ = "categories"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Basic info
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    # Presentation
    icon: Mapped[str | None] = mapped_column(String(100))
    color: Mapped[str] = mapped_column(String(7), default="#6366f1", nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Visibility and access
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    requires_approval: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allowed_roles: Mapped[str] = mapped_column(
        Text, default=lambda: json.dumps(ALL_ROLES), nullable=False
    )  # JSON array

    # Cached count, refreshed by the admin listing
    post_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    posts: Mapped[list["Post"]] = relationship("Post", back_populates="category")

    @property
    def allowed_roles_list(self) -> list[str]:
        """Get allowed roles as a list."""
        if not self.allowed_roles:
            return []
        try:
            return json.loads(self.allowed_roles)
        except (json.JSONDecodeError, TypeError):
            return []

    @allowed_roles_list.setter
    def allowed_roles_list(self, roles: list[str]) -> None:
        """Set allowed roles from a list."""
        self.allowed_roles = json.dumps(roles)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}', slug='{self.slug}')>"
