"""Validation utilities."""

import re

from email_validator import EmailNotValidError
from email_validator import validate_email as _validate_email

from app.config.settings import settings

from .exceptions import ValidationError


def validate_email(email: str) -> str:
    """Validate and normalize email address."""
    try:
        validated_email = _validate_email(email, check_deliverability=False)
        return validated_email.normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email address: {e}")


def validate_password(password: str) -> None:
    """Validate password length."""
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )

    if len(password) > 128:
        raise ValidationError("Password must be less than 128 characters")


def validate_username(username: str) -> None:
    """Validate username format."""
    if not username:
        raise ValidationError("Username is required")

    if len(username) < 3:
        raise ValidationError("Username must be at least 3 characters long")

    if len(username) > 30:
        raise ValidationError("Username must be less than 30 characters")

    # Username can contain letters, numbers, underscores, and hyphens
    if not re.match(r"^[a-zA-Z0-9_-]+$", username):
        raise ValidationError(
            "Username can only contain letters, numbers, underscores, and hyphens"
        )


def validate_slug(slug: str) -> None:
    """Validate category slug format."""
    if not slug:
        raise ValidationError("Slug is required")

    if len(slug) > 100:
        raise ValidationError("Slug must be less than 100 characters")

    # Slug can contain lowercase letters, numbers, and hyphens
    if not re.match(r"^[a-z0-9-]+$", slug):
        raise ValidationError("Slug can only contain lowercase letters, numbers, and hyphens")


def validate_hex_color(color: str) -> None:
    """Validate hex color format."""
    if not color:
        return  # Color is optional

    if not re.match(r"^#[0-9a-fA-F]{6}$", color):
        raise ValidationError("Color must be a valid hex color (e.g., #FF0000)")


def validate_search_query(query: str | None) -> str:
    """Validate a user search query and return it stripped."""
    query = (query or "").strip()
    if len(query) < settings.USER_SEARCH_MIN_LENGTH:
        raise ValidationError(
            f"Search query must be at least {settings.USER_SEARCH_MIN_LENGTH} characters"
        )
    return query


def contains_pattern(term: str) -> str:
    """LIKE pattern matching ``term`` literally anywhere; use with ``escape="\\\\"``."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
