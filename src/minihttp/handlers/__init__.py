"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handlers for the fixed route set.

Every handler has the same shape:

    handler(request: HTTPRequest, suffix: str) -> HTTPResponse

where `suffix` is the part of the target after the route's prefix
("" for exact routes).

    ┌──────────────────────┬────────────────────────────────────────────┐
    │ Handler              │ Route                                      │
    ├──────────────────────┼────────────────────────────────────────────┤
    │ basic.root           │ GET /                                      │
    │ basic.user_agent     │ GET /user-agent                            │
    │ basic.echo           │ GET /echo/<text>                           │
    │ FileHandler.get      │ GET /files/<name>                          │
    │ FileHandler.post     │ POST /files/<name>                         │
    └──────────────────────┴────────────────────────────────────────────┘

=============================================================================
"""

from .basic import echo, root, user_agent
from .files import FileHandler, read_file, write_file

__all__ = [
    "root",
    "user_agent",
    "echo",
    "FileHandler",
    "read_file",
    "write_file",
]
