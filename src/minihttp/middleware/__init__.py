"""
=============================================================================
MIDDLEWARE
=============================================================================

Wrappers around the router that see every routed request and response.

    base.py      Middleware ABC, MiddlewarePipeline
    logging.py   LoggingMiddleware (access log), RequestLog

HTTPServer wraps its router in a pipeline holding LoggingMiddleware.

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",

    # Built-in middleware
    "LoggingMiddleware",
    "RequestLog",
]
