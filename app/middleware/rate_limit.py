"""Rate limiting middleware using Redis."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware

from app.config.database import get_redis
from app.config.settings import settings

from .logging_middleware import get_client_ip

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client rate limiting with a sliding window log."""

    def __init__(self, app, requests_per_minute: int | None = None, exclude_paths=None):
        super().__init__(app)
        self.limit = requests_per_minute or settings.RATE_LIMIT_REQUESTS_PER_MINUTE
        self.exclude_paths = exclude_paths or {"/health"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if (
            not settings.RATE_LIMIT_ENABLED
            or settings.TESTING
            or request.url.path in self.exclude_paths
        ):
            return await call_next(request)

        client_ip = getattr(request.state, "client_ip", None) or get_client_ip(request)

        if not await self._check_rate_limit(f"ip:{client_ip}"):
            logger.warning(
                "Rate limit exceeded",
                extra={"client_ip": client_ip, "path": request.url.path},
            )
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "error": "Too many requests",
                    "error_code": "RATE_LIMIT_EXCEEDED",
                    "details": {"retry_after": WINDOW_SECONDS},
                },
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )

        return await call_next(request)

    async def _check_rate_limit(self, client_id: str) -> bool:
        """Record the request and report whether the client is under its limit."""
        key = f"rate_limit:{client_id}"
        now = time.time()

        try:
            redis = await get_redis()
            async with redis.pipeline() as pipe:
                pipe.zremrangebyscore(key, 0, now - WINDOW_SECONDS)
                pipe.zcard(key)
                pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
                pipe.expire(key, WINDOW_SECONDS)
                results = await pipe.execute()
        except (RedisError, OSError) as e:
            # Redis outage must not take the forum down
            logger.warning(f"Rate limit check skipped: {e}")
            return True

        return results[1] < self.limit
