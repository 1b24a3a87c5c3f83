"""Configuration module."""

from .database import get_redis
from .logging_config import setup_logging
from .settings import settings

__all__ = ["settings", "get_redis", "setup_logging"]
