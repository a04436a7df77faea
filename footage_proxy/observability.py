import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

_access_logger = logging.getLogger("footage_proxy.access")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per proxied call, tagged with an ``x-request-id``."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        start = time.perf_counter()
        extra = {"request_id": request_id, "method": request.method, "path": request.url.path}
        try:
            response = await call_next(request)
        except Exception:
            extra.update(status_code=500, latency_ms=_elapsed_ms(start))
            _access_logger.exception("request_failed", extra=extra)
            raise

        extra.update(status_code=response.status_code, latency_ms=_elapsed_ms(start))
        _access_logger.info("request_complete", extra=extra)
        response.headers["x-request-id"] = request_id
        return response
