from .request_logger import RequestLoggerMiddleware


__all__ = [
    "RequestLoggerMiddleware",
]
