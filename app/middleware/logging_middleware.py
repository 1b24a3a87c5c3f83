"""Request logging and slow request middleware."""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
DEFAULT_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
DEFAULT_EXCLUDED_PATHS = frozenset({"/health", "/favicon.ico"})


def get_client_ip(request: Request) -> str:
    """Client address, honouring proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def _elapsed(start: float) -> str:
    return f"{time.perf_counter() - start:.4f}s"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line when a request arrives and one when it completes.

    The completion line carries the authenticated member (id and role) when
    the route resolved one, so moderation traffic can be traced per user.
    Every response gets X-Request-ID and X-Process-Time headers.
    """

    def __init__(
        self,
        app: Any,
        log_headers: bool = False,
        sensitive_headers: set[str] | None = None,
        exclude_paths: set[str] | None = None,
    ):
        super().__init__(app)
        self.log_headers = log_headers
        self.sensitive_headers = frozenset(sensitive_headers or DEFAULT_SENSITIVE_HEADERS)
        self.exclude_paths = frozenset(exclude_paths or DEFAULT_EXCLUDED_PATHS)

    def _is_excluded(self, path: str) -> bool:
        # Interactive docs live under the API prefix
        return path in self.exclude_paths or path.endswith(("/docs", "/redoc", "/openapi.json"))

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._is_excluded(request.url.path):
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.client_ip = get_client_ip(request)
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        started_data = {
            "event": "request_started",
            "request_id": request_id,
            "query_params": dict(request.query_params),
            "client_ip": request.state.client_ip,
        }
        if self.log_headers:
            started_data["headers"] = self._redact(request.headers.items())
        logger.info(route, extra=started_data)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{route} failed",
                extra={
                    "event": "request_failed",
                    "request_id": request_id,
                    "error_type": type(e).__name__,
                    "process_time": _elapsed(started),
                },
                exc_info=True,
            )
            raise

        process_time = _elapsed(started)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = process_time.rstrip("s")

        completed_data = {
            "event": "request_completed",
            "request_id": request_id,
            "status_code": response.status_code,
            "user_id": getattr(request.state, "user_id", None),
            "user_role": getattr(request.state, "user_role", None),
            "process_time": process_time,
        }

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, f"{route} -> {response.status_code}", extra=completed_data)

        return response

    def _redact(self, headers) -> dict[str, str]:
        return {
            key: REDACTED if key.lower() in self.sensitive_headers else value
            for key, value in headers
        }


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Warn about requests slower than a threshold in seconds."""

    def __init__(self, app: Any, slow_request_threshold: float = 1.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        if elapsed > self.slow_request_threshold:
            logger.warning(
                f"Slow request: {request.method} {request.url.path}",
                extra={
                    "event": "slow_request",
                    "process_time": f"{elapsed:.4f}s",
                    "threshold": f"{self.slow_request_threshold}s",
                    "status_code": response.status_code,
                },
            )

        return response
