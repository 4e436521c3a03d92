"""
Handlers for the routes that need nothing but the request itself.

    GET /             → 200, no headers, no body
    GET /user-agent   → 200 text/plain with the User-Agent value, or 404
    GET /echo/<text>  → 200 text/plain echoing <text> verbatim
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, not_found, ok


def root(request: HTTPRequest, suffix: str) -> HTTPResponse:
    return ok()


def user_agent(request: HTTPRequest, suffix: str) -> HTTPResponse:
    """
    Reflect the client's User-Agent header back as text.

    The header name is matched exactly ("user-agent" will not do). A request
    without the header gets a 404.
    """
    agent = request.user_agent
    if agent is None:
        return not_found()
    return ResponseBuilder().text(agent).build()


def echo(request: HTTPRequest, suffix: str) -> HTTPResponse:
    """
    Echo everything after "/echo/".

        GET /echo/abc     → "abc", Content-Length: 3
        GET /echo/a%20b   → "a%20b" (no percent-decoding)
        GET /echo/        → 200 with no headers and no body

    The empty case is a plain 200 rather than a 404, unlike an empty
    file name under /files/.
    """
    if not suffix:
        return ok()
    return ResponseBuilder().text(suffix).build()
