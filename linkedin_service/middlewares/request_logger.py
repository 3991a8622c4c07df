"""
Request logging middleware
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and latency of every request"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        # Stays 500 when call_next raises
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} {status_code} {elapsed_ms:.1f}ms"
            )
