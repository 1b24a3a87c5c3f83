"""Utility functions and classes."""

from .exceptions import *
from .security import *
from .validators import *

__all__ = [
    # Security
    "hash_password",
    "verify_password",
    # Exceptions
    "BaseAPIException",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    "PolicyRejectedError",
    "NotFoundError",
    "ConflictError",
    # Validators
    "validate_email",
    "validate_password",
    "validate_username",
    "validate_slug",
    "validate_hex_color",
    "validate_search_query",
]
