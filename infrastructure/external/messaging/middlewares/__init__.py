from .logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
]
