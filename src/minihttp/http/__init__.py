"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

The part of the server that knows what HTTP looks like on the wire:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   raw bytes ──► RequestParser ──► HTTPRequest                        │
    │                                        │                             │
    │                                        ▼                             │
    │                                     Router ──► handler(request, sfx) │
    │                                        │                             │
    │                                        ▼                             │
    │   raw bytes ◄── HTTPResponse.to_bytes() ◄── HTTPResponse             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    request.py       Message parser (start line, headers, Content-Length body)
    response.py      Response model, byte-exact serializer, ResponseBuilder
    router.py        Exact and prefix routes, 404 fallback
    status_codes.py  The closed set of statuses: 200, 201, 404

Nothing in this package touches sockets or the filesystem.

=============================================================================
"""

from .request import (
    HTTPMethod,
    HTTPParseError,
    HTTPRequest,
    RequestParser,
    parse_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,             # 200 OK
    created,        # 201 Created
    not_found,      # 404 Not Found
)
from .router import Route, RouteMatch, Router
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPMethod",
    "HTTPParseError",
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "not_found",

    # Routing
    "Route",
    "RouteMatch",
    "Router",

    # Status codes
    "HTTPStatus",
]
