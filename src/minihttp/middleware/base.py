"""
=============================================================================
MIDDLEWARE PIPELINE
=============================================================================

Middleware sits between the connection handler and the router. Each one
gets the request plus a `next` callable, and returns a response:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Request ──────────────────────────────────────────►               │
    │                                                                      │
    │   ┌──────────────┐    ┌──────────────┐    ┌──────────────┐          │
    │   │  Logging MW  │───►│  (your MW)   │───►│    Router    │          │
    │   └──────────────┘    └──────────────┘    └──────────────┘          │
    │        [after]             [after]              │                    │
    │   log status, time                              │                    │
    │                                                                      │
    │   ◄────────────────────────────────────────────── Response          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Requests that fail to parse never reach the pipeline: the connection
handler answers them with 404 directly.

A middleware may observe and replace responses, but it must not add
headers. The server only ever emits Content-Type and Content-Length.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware, or the router itself at the end of the chain
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Abstract base class for middleware.

        class Timing(Middleware):
            def __call__(self, request, next):
                start = time.perf_counter()
                response = next(request)
                logger.debug(f"took {time.perf_counter() - start:.3f}s")
                return response

    Not calling `next` short-circuits the chain; the returned response
    goes straight back to the client.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The parsed request (frozen, cannot be modified).
            next: The rest of the chain.

        Returns:
            The response to send.
        """

    @property
    def name(self) -> str:
        """Name used in log lines."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final handler.

    First added is outermost:

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware()).add(Other())
        handler = pipeline.wrap(router.handle)

        handler(request)  →  Logging(Other(router.handle))
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append middleware (innermost so far). Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with all middleware in the pipeline.

        Given [MW1, MW2] and handler, wrapping runs in reverse so the
        result is MW1 → MW2 → handler.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    @staticmethod
    def _create_wrapped_handler(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
