"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, request target) to a handler. The route table is small and
fixed, so matching is plain string comparison, not a pattern language:

    - Exact routes:   "/" matches "/" and nothing else
    - Prefix routes:  "/echo/" matches "/echo/", "/echo/abc", "/echo/a/b"

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Incoming Request                                                   │
    │   GET /echo/hello                                                    │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER (first registered match wins)                        │   │
    │   │                                                              │   │
    │   │  GET  /            exact   → root                           │   │
    │   │  GET  /user-agent  exact   → user_agent                     │   │
    │   │  GET  /echo/       prefix  → echo          ← MATCH!         │   │
    │   │  GET  /files/      prefix  → read file                      │   │
    │   │  POST /files/      prefix  → write file                     │   │
    │   │                                                              │   │
    │   │  suffix = "hello"  (everything after the prefix, verbatim)  │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   echo(request, "hello")                                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    No match → 404 with no headers and no body. There is no 405: a POST
    to "/" is simply "not found".

The suffix is passed to the handler as an argument because HTTPRequest is
frozen. It is never percent-decoded or normalised.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from .request import HTTPMethod, HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)


# Handler: takes the request and the path suffix after the route prefix
# (always "" for exact routes) and returns a response.
Handler = Callable[[HTTPRequest, str], HTTPResponse]


@dataclass(frozen=True)
class Route:
    """
    A registered route.

        Route(method=HTTPMethod.GET, path="/echo/", handler=echo, prefix=True)

    With prefix=False the target must equal `path`; with prefix=True it
    only has to start with it.
    """

    method: HTTPMethod
    path: str
    handler: Handler
    prefix: bool = False

    def match(self, method: HTTPMethod, target: str) -> Optional[str]:
        """Return the suffix if this route accepts the request, else None."""
        if method is not self.method:
            return None

        if self.prefix:
            if target.startswith(self.path):
                return target[len(self.path):]
            return None

        return "" if target == self.path else None


@dataclass(frozen=True)
class RouteMatch:
    """
    Result of a successful route match.

    Example:
        Route:   GET /files/ (prefix)
        Target:  /files/notes.txt
        Result:  RouteMatch(route=<Route>, suffix="notes.txt")
    """

    route: Route
    suffix: str


class Router:
    """
    HTTP request router over exact and prefix routes.

    ==========================================================================
    DECORATOR-BASED API
    ==========================================================================

        router = Router()

        @router.get("/")
        def root(request, suffix):
            return ok()

        @router.get("/echo/", prefix=True)
        def echo(request, suffix):
            return ResponseBuilder().text(suffix).build()

    ==========================================================================
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        method: HTTPMethod,
        path: str,
        handler: Handler,
        prefix: bool = False,
    ) -> Route:
        """
        Register a route.

        Registration order is matching order, so more specific routes must
        be added before broader prefixes that would shadow them.

        Args:
            method: HTTP method the route answers to.
            path: Exact target, or the prefix when prefix=True.
            handler: Called as handler(request, suffix).
            prefix: Match targets that start with `path`.

        Returns:
            The registered Route.
        """
        route = Route(method=method, path=path, handler=handler, prefix=prefix)
        self._routes.append(route)
        kind = "prefix" if prefix else "exact"
        logger.debug(f"Registered {kind} route {method.value} {path}")
        return route

    def route(
        self,
        method: HTTPMethod,
        path: str,
        prefix: bool = False,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator form of add_route().

            @router.route(HTTPMethod.POST, "/files/", prefix=True)
            def write(request, suffix):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, path, handler, prefix)
            return handler
        return decorator

    def get(self, path: str, prefix: bool = False) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(HTTPMethod.GET, path, prefix)

    def post(self, path: str, prefix: bool = False) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(HTTPMethod.POST, path, prefix)

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: HTTPMethod, target: str) -> Optional[RouteMatch]:
        """
        Find the first route accepting (method, target).

        Returns:
            RouteMatch if found, None otherwise
        """
        for route in self._routes:
            suffix = route.match(method, target)
            if suffix is not None:
                return RouteMatch(route=route, suffix=suffix)
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Unknown targets, unknown methods and HTTPMethod.UNKNOWN all end in
        the same bare 404.
        """
        match = self.match(request.method, request.target)

        if match is None:
            logger.debug(f"No route for {request.method_name} {request.target}")
            return not_found()

        return match.route.handler(request, match.suffix)

    # The router is the innermost handler of the middleware pipeline
    __call__ = handle

    @property
    def routes(self) -> List[Route]:
        """Registered routes in matching order."""
        return list(self._routes)
