"""API routers."""

from . import admin, auth, categories, posts, social

__all__ = ["auth", "posts", "categories", "social", "admin"]
