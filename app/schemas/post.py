"""Post, reply and like schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import BaseResponse, PaginationMeta
from .user import UserSummary


class PostCreate(BaseModel):
    """Schema for creating a post."""

    title: str = Field(..., max_length=255)
    content: str
    category: str | None = Field(None, description="Category name")
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "content")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and content are required")
        return v


class PostUpdate(BaseModel):
    """Schema for updating a post; omitted fields are kept."""

    title: str | None = Field(None, max_length=255)
    content: str | None = None
    category: str | None = None
    tags: list[str] | None = None


class ReplyCreate(BaseModel):
    """Schema for creating or editing a reply."""

    content: str

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reply content is required")
        return v


class PinRequest(BaseModel):
    is_pinned: bool


class LockRequest(BaseModel):
    is_locked: bool


class CategoryRef(BaseModel):
    """Category fields embedded in posts."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str


class ReplyResponse(BaseModel):
    """Schema for reply response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    content: str
    author: UserSummary
    created_at: datetime
    updated_at: datetime


class PostResponse(BaseModel):
    """Schema for post response with aggregate counts."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    category: CategoryRef
    tags: list[str] = Field(default_factory=list)
    author: UserSummary
    likes_count: int = 0
    replies_count: int = 0
    is_pinned: bool
    is_locked: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post, likes_count: int = 0, replies_count: int = 0) -> "PostResponse":
        """Build from a Post with author and category loaded."""
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            category=CategoryRef.model_validate(post.category),
            tags=post.tags_list,
            author=UserSummary.model_validate(post.author),
            likes_count=likes_count,
            replies_count=replies_count,
            is_pinned=post.is_pinned,
            is_locked=post.is_locked,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostDetail(PostResponse):
    """Post with its replies, oldest first."""

    replies: list[ReplyResponse] = Field(default_factory=list)


class PostListResponse(BaseResponse):
    posts: list[PostResponse]
    pagination: PaginationMeta


class PostDetailResponse(BaseResponse):
    post: PostDetail


class PostItemResponse(BaseResponse):
    post: PostResponse


class ReplyItemResponse(BaseResponse):
    reply: ReplyResponse


class LikeResponse(BaseResponse):
    liked: bool
    likes_count: int
