"""Custom exceptions for the application."""

from typing import Any, Dict, Optional


class BaseAPIException(Exception):
    """Base exception for errors reported to API clients."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAPIException):
    """Raised when there is no authenticated principal."""

    def __init__(self, message: str = "Authentication required", **kwargs):
        kwargs.setdefault("error_code", "AUTHENTICATION_FAILED")
        super().__init__(message, **kwargs)


class AuthorizationError(BaseAPIException):
    """Raised when the principal lacks the required role or ownership."""

    def __init__(self, message: str = "Access denied", **kwargs):
        kwargs.setdefault("error_code", "ACCESS_DENIED")
        super().__init__(message, **kwargs)


class ValidationError(BaseAPIException):
    """Raised when request data is invalid."""

    def __init__(self, message: str = "Validation failed", **kwargs):
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)


class PolicyRejectedError(BaseAPIException):
    """Raised when a domain rule rejects an otherwise valid request."""

    def __init__(self, message: str = "Request rejected", **kwargs):
        kwargs.setdefault("error_code", "POLICY_REJECTED")
        super().__init__(message, **kwargs)


class NotFoundError(BaseAPIException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        kwargs.setdefault("error_code", "NOT_FOUND")
        super().__init__(message, **kwargs)


class ConflictError(BaseAPIException):
    """Raised when there's a conflict (e.g., duplicate resource)."""

    def __init__(self, message: str = "Resource conflict", **kwargs):
        kwargs.setdefault("error_code", "CONFLICT")
        super().__init__(message, **kwargs)


class TokenExpiredError(AuthenticationError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Token has expired", **kwargs):
        super().__init__(message, error_code="TOKEN_EXPIRED", **kwargs)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is invalid."""

    def __init__(self, message: str = "Invalid token", **kwargs):
        super().__init__(message, error_code="INVALID_TOKEN", **kwargs)


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials do not match."""

    def __init__(self, message: str = "Invalid credentials", **kwargs):
        super().__init__(message, error_code="INVALID_CREDENTIALS", **kwargs)


class AccountInactiveError(AuthorizationError):
    """Raised when a deactivated account tries to act."""

    def __init__(self, message: str = "User account is inactive", **kwargs):
        super().__init__(message, error_code="ACCOUNT_INACTIVE", **kwargs)


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user doesn't have sufficient permissions."""

    def __init__(self, message: str = "Insufficient permissions", **kwargs):
        super().__init__(message, error_code="INSUFFICIENT_PERMISSIONS", **kwargs)


class PostLockedError(AuthorizationError):
    """Raised when replying to a locked post."""

    def __init__(self, message: str = "This post is closed. No new replies are allowed.", **kwargs):
        super().__init__(message, error_code="POST_LOCKED", **kwargs)


class LastAdminError(PolicyRejectedError):
    """Raised when an action would leave the forum without an active admin."""

    def __init__(self, message: str = "Cannot remove the last admin", **kwargs):
        super().__init__(message, error_code="LAST_ADMIN", **kwargs)


class UserNotFoundError(NotFoundError):
    """Raised when user is not found."""

    def __init__(self, message: str = "User not found", **kwargs):
        super().__init__(message, error_code="USER_NOT_FOUND", **kwargs)


class PostNotFoundError(NotFoundError):
    """Raised when post is not found."""

    def __init__(self, message: str = "Post not found", **kwargs):
        super().__init__(message, error_code="POST_NOT_FOUND", **kwargs)


class ReplyNotFoundError(NotFoundError):
    """Raised when reply is not found."""

    def __init__(self, message: str = "Reply not found", **kwargs):
        super().__init__(message, error_code="REPLY_NOT_FOUND", **kwargs)


class CategoryNotFoundError(NotFoundError):
    """Raised when category is not found."""

    def __init__(self, message: str = "Category not found", **kwargs):
        super().__init__(message, error_code="CATEGORY_NOT_FOUND", **kwargs)


class RelationshipNotFoundError(NotFoundError):
    """Raised when a friend request, friendship or follow edge is missing."""

    def __init__(self, message: str = "Relationship not found", **kwargs):
        super().__init__(message, error_code="RELATIONSHIP_NOT_FOUND", **kwargs)


class EmailAlreadyExistsError(ConflictError):
    """Raised when email already exists."""

    def __init__(self, message: str = "Email already exists", **kwargs):
        super().__init__(message, error_code="EMAIL_EXISTS", **kwargs)


class UsernameAlreadyExistsError(ConflictError):
    """Raised when username already exists."""

    def __init__(self, message: str = "Username already exists", **kwargs):
        super().__init__(message, error_code="USERNAME_EXISTS", **kwargs)


class CategoryAlreadyExistsError(ConflictError):
    """Raised when a category name or slug is taken."""

    def __init__(self, message: str = "Category with this name or slug already exists", **kwargs):
        super().__init__(message, error_code="CATEGORY_EXISTS", **kwargs)
