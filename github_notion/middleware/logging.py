"""
Request logging middleware.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from github_notion.utils.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        log = logger.with_context(delivery_id=request.headers.get("x-github-delivery"))

        try:
            response = await call_next(request)
        except Exception:
            log.error(
                f"{request.method} {request.url.path} failed",
                extra={"http_method": request.method, "path": request.url.path},
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "http_method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
