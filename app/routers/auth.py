"""Authentication routes."""

from fastapi import APIRouter, Depends, status

from app.dependencies.auth import get_current_active_user, get_current_principal
from app.dependencies.services import get_auth_service, get_user_service
from app.models.user import User
from app.policies.authorization_policy import capabilities
from app.policies.base_policy import Principal
from app.schemas.auth import AuthResponse, LoginRequest, PermissionsResponse, RegisterRequest
from app.schemas.common import BaseResponse
from app.schemas.user import PasswordChangeRequest, UserDetailResponse, UserProfileUpdate
from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.utils.response_builders import ResponseBuilder

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user and sign them in."""
    user = await auth_service.register_user(
        email=user_data.email,
        username=user_data.username,
        password=user_data.password,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
    )

    return ResponseBuilder.authenticated(
        user,
        auth_service.create_access_token(user),
        auth_service.jwt_service.access_token_expire_seconds,
        "User registered successfully",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Authenticate with email and password."""
    user = await auth_service.authenticate_user(
        email=login_data.email,
        password=login_data.password,
    )

    return ResponseBuilder.authenticated(
        user,
        auth_service.create_access_token(user),
        auth_service.jwt_service.access_token_expire_seconds,
        "Login successful",
    )


@router.post("/logout", response_model=BaseResponse)
async def logout():
    """Tokens are stateless, so clients simply discard theirs."""
    return ResponseBuilder.success("Logout successful")


@router.get("/profile", response_model=UserDetailResponse)
async def get_profile(current_user: User = Depends(get_current_active_user)):
    """Get current user profile."""
    return ResponseBuilder.user_detail(current_user, "User profile retrieved successfully")


@router.patch("/profile", response_model=UserDetailResponse)
async def update_profile(
    profile_data: UserProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
):
    """Update the caller's profile."""
    user = await user_service.update_profile(
        current_user, **profile_data.model_dump(exclude_unset=True)
    )
    return ResponseBuilder.user_detail(user, "Profile updated successfully")


@router.post("/change-password", response_model=BaseResponse)
async def change_password(
    password_data: PasswordChangeRequest,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
):
    await user_service.change_password(
        current_user,
        current_password=password_data.current_password,
        new_password=password_data.new_password,
    )
    return ResponseBuilder.success("Password changed successfully")


@router.get("/permissions", response_model=PermissionsResponse)
async def get_permissions(principal: Principal = Depends(get_current_principal)):
    """Capabilities the caller's role grants."""
    return PermissionsResponse(
        success=True,
        role=principal.role,
        permissions=capabilities(principal),
    )
