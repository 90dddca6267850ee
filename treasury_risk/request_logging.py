import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("treasury_risk.http")

CACHE_STATUS_HEADER = "X-Risk-Cache"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request; echoes the risk cache outcome as a header."""

    async def dispatch(self, request, call_next):
        start = time.monotonic()
        status_code = 500
        cache_status = "none"
        try:
            response = await call_next(request)
            status_code = response.status_code
            cache_status = getattr(request.state, "cache_status", "none")
            if cache_status != "none":
                response.headers[CACHE_STATUS_HEADER] = cache_status
            return response
        finally:
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.info(
                "http_request method=%s path=%s status=%s duration_ms=%s cache=%s",
                request.method.upper(),
                request.url.path,
                status_code,
                duration_ms,
                cache_status,
            )
