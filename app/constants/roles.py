"""Forum user roles and their rank ordering."""

from enum import Enum


class Role(str, Enum):
    """Forum-wide user roles."""

    BEGINNER = "BEGINNER"  # Default for new accounts
    CONTRIBUTOR = "CONTRIBUTOR"  # Trusted members, moderation rights
    ADMIN = "ADMIN"  # Full access, user and category management


# Role hierarchy: ADMIN > CONTRIBUTOR > BEGINNER
ROLE_HIERARCHY = {
    Role.BEGINNER: 1,
    Role.CONTRIBUTOR: 2,
    Role.ADMIN: 3,
}

ALL_ROLES = [role.value for role in Role]


def role_rank(role: Role | str) -> int:
    """Get the rank of a role, accepting enum members or raw values."""
    return ROLE_HIERARCHY[Role(role)]
