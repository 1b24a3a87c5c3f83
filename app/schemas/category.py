"""Category schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.constants.roles import ALL_ROLES, Role

from .common import BaseResponse, TimestampMixin


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    color: str | None = Field(None, description="Hex colour, defaults to the forum colour")
    is_active: bool = True
    sort_order: int = 0
    allowed_roles: list[Role] = Field(default_factory=lambda: [Role(r) for r in ALL_ROLES])
    is_public: bool = True
    requires_approval: bool = False


class CategoryUpdate(BaseModel):
    """Schema for updating a category; omitted fields are kept."""

    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    color: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None
    allowed_roles: list[Role] | None = None
    is_public: bool | None = None
    requires_approval: bool | None = None


class CategoryResponse(TimestampMixin):
    """Schema for category response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    color: str
    sort_order: int
    is_active: bool
    is_public: bool
    requires_approval: bool
    allowed_roles: list[Role] = Field(validation_alias="allowed_roles_list")
    post_count: int


class PublicCategory(BaseModel):
    """Category fields visible to every member."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    color: str


class CategoryListResponse(BaseResponse):
    categories: list[CategoryResponse]


class PublicCategoryListResponse(BaseResponse):
    categories: list[PublicCategory]


class CategoryDetailResponse(BaseResponse):
    category: CategoryResponse
