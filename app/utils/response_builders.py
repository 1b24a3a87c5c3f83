"""Response builder utilities for consistent API responses."""

from app.models.category import Category
from app.models.post import Post, Reply
from app.models.user import User
from app.schemas.admin import AdminUser, AdminUserListResponse
from app.schemas.auth import AuthResponse
from app.schemas.common import BaseResponse, PaginationMeta
from app.schemas.category import CategoryDetailResponse, CategoryResponse
from app.schemas.post import (
    PostDetail,
    PostDetailResponse,
    PostItemResponse,
    PostListResponse,
    PostResponse,
    ReplyItemResponse,
    ReplyResponse,
)
from app.schemas.user import UserDetailResponse, UserResponse


class ResponseBuilder:
    """Builder class for standardized API responses."""

    @staticmethod
    def success(message: str = "Operation successful", **data) -> BaseResponse:
        """Build a simple success response."""
        return BaseResponse(success=True, message=message, **data)

    @staticmethod
    def resource_deleted(resource_type: str) -> BaseResponse:
        return BaseResponse(success=True, message=f"{resource_type.title()} deleted successfully")

    @staticmethod
    def authenticated(
        user: User, access_token: str, expires_in: int, message: str
    ) -> AuthResponse:
        """Build register and login responses."""
        return AuthResponse(
            success=True,
            message=message,
            access_token=access_token,
            expires_in=expires_in,
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    def user_detail(user: User, message: str = "User retrieved successfully") -> UserDetailResponse:
        return UserDetailResponse(
            success=True,
            message=message,
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    def post_list(
        rows: list[tuple[Post, int, int]], total: int, page: int, limit: int
    ) -> PostListResponse:
        """Build a paginated post list from (post, likes, replies) rows."""
        return PostListResponse(
            success=True,
            posts=[PostResponse.from_post(post, likes, replies) for post, likes, replies in rows],
            pagination=PaginationMeta.build(page, limit, total),
        )

    @staticmethod
    def post_detail(post: Post, likes: int, replies: int) -> PostDetailResponse:
        """Build a post response with replies, oldest first."""
        base = PostResponse.from_post(post, likes, replies)
        ordered = sorted(post.replies, key=lambda r: (r.created_at, r.id))
        return PostDetailResponse(
            success=True,
            post=PostDetail(
                **base.model_dump(),
                replies=[ReplyResponse.model_validate(reply) for reply in ordered],
            ),
        )

    @staticmethod
    def post_item(post: Post, likes: int, replies: int, message: str) -> PostItemResponse:
        return PostItemResponse(
            success=True,
            message=message,
            post=PostResponse.from_post(post, likes, replies),
        )

    @staticmethod
    def reply_item(reply: Reply, message: str) -> ReplyItemResponse:
        return ReplyItemResponse(
            success=True,
            message=message,
            reply=ReplyResponse.model_validate(reply),
        )

    @staticmethod
    def category_detail(category: Category, message: str | None = None) -> CategoryDetailResponse:
        return CategoryDetailResponse(
            success=True,
            message=message,
            category=CategoryResponse.model_validate(category),
        )

    @staticmethod
    def admin_user(user: User, posts_count: int = 0, replies_count: int = 0) -> AdminUser:
        return AdminUser.model_validate(user).model_copy(
            update={"posts_count": posts_count, "replies_count": replies_count}
        )

    @staticmethod
    def admin_user_list(
        rows: list[tuple[User, int, int]], total: int, page: int, limit: int
    ) -> AdminUserListResponse:
        return AdminUserListResponse(
            success=True,
            users=[ResponseBuilder.admin_user(*row) for row in rows],
            pagination=PaginationMeta.build(page, limit, total),
        )
