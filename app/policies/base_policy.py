"""Base policy classes and types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Optional

from app.constants.roles import Role, role_rank


class Action(str, Enum):
    """Standard actions for authorization."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    # Moderation actions
    MODERATE = "moderate"
    PIN = "pin"
    LOCK = "lock"
    REPLY = "reply"

    # Admin actions
    MANAGE = "manage"


@dataclass(frozen=True)
class Principal:
    """The authenticated actor a decision is made for."""

    id: Hashable
    role: Role

    def __post_init__(self):
        # Accept raw role strings loaded from storage
        object.__setattr__(self, "role", Role(self.role))

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        """Build a principal from any object exposing id and role."""
        return cls(id=user.id, role=user.role)

    @property
    def rank(self) -> int:
        """Rank of the principal's role."""
        return role_rank(self.role)


@dataclass
class PolicyContext:
    """Context for policy evaluation."""

    principal: Optional[Principal]
    resource: Optional[Any] = None
    resource_id: Optional[Hashable] = None
    extra_data: Optional[Dict[str, Any]] = None

    @property
    def resource_author_id(self) -> Optional[Hashable]:
        """Get the author of the resource, if it has one."""
        if self.resource is None:
            return None

        if isinstance(self.resource, dict):
            return self.resource.get("author_id")

        return getattr(self.resource, "author_id", None)

    def get_extra(self, key: str, default: Any = None) -> Any:
        """Get a value from the extra data."""
        if not self.extra_data:
            return default
        return self.extra_data.get(key, default)


@dataclass
class PolicyResult:
    """Result of policy evaluation."""

    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, reason: Optional[str] = None) -> "PolicyResult":
        """Create an allow result."""
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str) -> "PolicyResult":
        """Create a deny result."""
        return cls(allowed=False, reason=reason)


class BasePolicy(ABC):
    """Base class for all authorization policies."""

    @abstractmethod
    def check(self, action: Action, context: PolicyContext) -> PolicyResult:
        """Check if action is allowed in the given context."""
        pass

    def _require_authentication(self, context: PolicyContext) -> Optional[PolicyResult]:
        """Check that there is a principal at all."""
        if context.principal is None:
            return PolicyResult.deny("Authentication required")

        return None

    def _unsupported(self, action: Action) -> PolicyResult:
        return PolicyResult.deny(f"Action {action.value} not supported for {self.resource_type}")

    resource_type: str = "resource"
