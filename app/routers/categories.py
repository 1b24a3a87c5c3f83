"""Category routes."""

from fastapi import APIRouter, Depends, status

from app.decorators.permissions import require_category_permission
from app.dependencies.auth import get_current_active_user
from app.dependencies.services import get_category_service
from app.models.user import User
from app.policies.base_policy import Action
from app.policies.guards import require
from app.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    PublicCategory,
    PublicCategoryListResponse,
)
from app.schemas.common import BaseResponse
from app.services.category_service import CategoryService
from app.utils.response_builders import ResponseBuilder

router = APIRouter()


@router.get("/public/list", response_model=PublicCategoryListResponse)
async def list_public_categories(
    current_user: User = Depends(get_current_active_user),
    category_service: CategoryService = Depends(get_category_service),
):
    """Active, public categories for post creation and filtering."""
    require(current_user, Action.READ, "category", public_listing=True)
    categories = await category_service.list_public_categories()
    return PublicCategoryListResponse(
        success=True,
        categories=[PublicCategory.model_validate(c) for c in categories],
    )


@router.get("/", response_model=CategoryListResponse)
@require_category_permission(Action.READ)
async def list_categories(
    current_user: User = Depends(get_current_active_user),
    category_service: CategoryService = Depends(get_category_service),
):
    """All categories with live post counts."""
    categories = await category_service.list_categories()
    return CategoryListResponse(
        success=True,
        categories=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.get("/{category_id}", response_model=CategoryDetailResponse)
@require_category_permission(Action.READ, resource_id_param="category_id")
async def get_category(
    category_id: int,
    current_user: User = Depends(get_current_active_user),
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.get_category(category_id)
    return ResponseBuilder.category_detail(category)


@router.post("/", response_model=CategoryDetailResponse, status_code=status.HTTP_201_CREATED)
@require_category_permission(Action.CREATE)
async def create_category(
    category_data: CategoryCreate,
    current_user: User = Depends(get_current_active_user),
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.create_category(**category_data.model_dump())
    return ResponseBuilder.category_detail(category, "Category created successfully")


@router.put("/{category_id}", response_model=CategoryDetailResponse)
@require_category_permission(Action.UPDATE, resource_id_param="category_id")
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    current_user: User = Depends(get_current_active_user),
    category_service: CategoryService = Depends(get_category_service),
):
    """Partial update; omitted fields are kept."""
    category = await category_service.update_category(
        category_id, **category_data.model_dump(exclude_unset=True)
    )
    return ResponseBuilder.category_detail(category, "Category updated successfully")


@router.delete("/{category_id}", response_model=BaseResponse)
@require_category_permission(Action.DELETE, resource_id_param="category_id")
async def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_active_user),
    category_service: CategoryService = Depends(get_category_service),
):
    """Delete a category that has no posts."""
    await category_service.delete_category(category_id)
    return ResponseBuilder.resource_deleted("category")
