"""User administration routes."""

from fastapi import APIRouter, Depends, Query

from app.config.settings import settings
from app.decorators.permissions import require_admin, require_user_management
from app.dependencies.auth import get_current_active_user
from app.dependencies.services import get_admin_service
from app.models.user import User
from app.schemas.admin import (
    AdminUserDetail,
    AdminUserDetailResponse,
    AdminUserListResponse,
    AdminUserUpdateResponse,
    ForumStats,
    RoleUpdateRequest,
    StatsResponse,
    StatusUpdateRequest,
)
from app.schemas.common import BaseResponse
from app.services.admin_service import AdminService
from app.utils.response_builders import ResponseBuilder

router = APIRouter()


@router.get("/users", response_model=AdminUserListResponse)
@require_user_management()
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE),
    role: str | None = Query(None, description="Filter by role"),
    search: str | None = Query(None, description="Username, email or name fragment"),
    current_user: User = Depends(get_current_active_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    rows, total = await admin_service.list_users(page=page, limit=limit, role=role, search=search)
    return ResponseBuilder.admin_user_list(rows, total, page, limit)


@router.get("/users/{user_id}", response_model=AdminUserDetailResponse)
@require_user_management(resource_id_param="user_id")
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    """User with counts and recent activity."""
    detail = await admin_service.get_user_detail(user_id)
    return AdminUserDetailResponse(success=True, user=AdminUserDetail(**detail))


@router.put("/users/{user_id}/role", response_model=AdminUserUpdateResponse)
@require_user_management(resource_id_param="user_id")
async def update_user_role(
    user_id: int,
    role_data: RoleUpdateRequest,
    current_user: User = Depends(get_current_active_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    user = await admin_service.update_role(current_user, user_id, role_data.role)
    return AdminUserUpdateResponse(
        success=True,
        message="User role updated successfully",
        user=ResponseBuilder.admin_user(user),
    )


@router.put("/users/{user_id}/status", response_model=AdminUserUpdateResponse)
@require_user_management(resource_id_param="user_id")
async def update_user_status(
    user_id: int,
    status_data: StatusUpdateRequest,
    current_user: User = Depends(get_current_active_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    user = await admin_service.update_status(current_user, user_id, status_data.is_active)
    message = "User activated successfully" if user.is_active else "User deactivated successfully"
    return AdminUserUpdateResponse(
        success=True,
        message=message,
        user=ResponseBuilder.admin_user(user),
    )


@router.delete("/users/{user_id}", response_model=BaseResponse)
@require_user_management(resource_id_param="user_id")
async def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    """Delete a user together with their content and relationships."""
    await admin_service.delete_user(current_user, user_id)
    return ResponseBuilder.resource_deleted("user")


@router.get("/stats", response_model=StatsResponse)
@require_admin
async def get_stats(
    current_user: User = Depends(get_current_active_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    """Forum-wide totals and recent posts."""
    stats = await admin_service.get_stats()
    return StatsResponse(success=True, stats=ForumStats(**stats))
