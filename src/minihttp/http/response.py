"""
=============================================================================
HTTP RESPONSE MODEL AND SERIALIZER
=============================================================================

Turns a structured HTTPResponse into the exact bytes written to the socket.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE ON THE WIRE                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HTTP/1.1 200 OK\r\n                  ← status line, always          │
    │  Content-Type: text/plain\r\n         ← one line per header          │
    │  Content-Length: 3\r\n                                               │
    │  \r\n                                 ← only if there is a body      │
    │  abc\r\n                              ← only if there is a body      │
    │  \r\n                                 ← terminator, always           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two consequences worth knowing:

    No body:    "HTTP/1.1 404 Not Found\r\n\r\n"
                The status line, the headers, one CRLF. Nothing else.

    With body:  the body is followed by an extra CRLF that Content-Length
                does NOT count. Clients that honour Content-Length simply
                never read it.

The serializer never invents headers. No Date, no Server, no automatic
Content-Length: whatever the handler put in `headers` is exactly what
goes out, and only Content-Type/Content-Length are ever used.

=============================================================================
BUILDER PATTERN
=============================================================================

    Handlers build responses fluently:

        ResponseBuilder()
            .status(HTTPStatus.OK)
            .text("abc")              # Content-Type + Content-Length + body
            .build()

    text() and octet_stream() set the body AND both framing headers in one
    call, so Content-Length can never drift from the body it describes.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


CRLF = b"\r\n"

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
            │                       │                        │
        HTTPResponse(            b"HTTP/1.1 200 OK\\r\\n   conn.send_response(
          status=200,              Content-Type: ...\\r\\n     data
          headers={...},           \\r\\n                    )
          body=b"abc"              abc\\r\\n\\r\\n"
        )

    =========================================================================

    body is None when the response has no body at all. b"" is a present
    but empty body, and it DOES produce the blank line and trailing CRLF.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        The first line of the response, without CRLF.

        Example: "HTTP/1.1 201 Created"
        """
        return f"{self.version} {self.status.value} {self.status.phrase}"

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over the socket.

        This cannot fail for any HTTPResponse: the status is a closed enum,
        so the code/phrase pair is always valid.

        Returns:
            Complete HTTP response as bytes ready for socket.sendall()
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Status line and every header line end with CRLF
        head = "".join(line + "\r\n" for line in lines).encode("utf-8")

        if self.body is None:
            return head + CRLF

        return head + CRLF + self.body + CRLF + CRLF


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Each method returns `self`, enabling chaining:

        builder.status(HTTPStatus.OK).octet_stream(data).build()

    Usage examples:

        # 200 with no headers and no body
        ResponseBuilder().build()

        # Plain text
        ResponseBuilder().text("curl/7.64.1").build()

        # Raw file contents
        ResponseBuilder().octet_stream(b"\\x00\\x01").build()

        # 201 with nothing else
        ResponseBuilder().status(HTTPStatus.CREATED).build()
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Optional[bytes] = None

    # =========================================================================
    # STATUS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """
        Set the HTTP status.

        Accepts an HTTPStatus member or a plain int; ints outside the enum
        raise ValueError here rather than at serialization time.
        """
        self._status = HTTPStatus(status)
        return self

    # =========================================================================
    # HEADERS
    # =========================================================================

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Set a single response header, replacing any previous value."""
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def content_length(self, length: int) -> "ResponseBuilder":
        return self.header("Content-Length", str(length))

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body without touching any header.

        Strings are encoded to UTF-8.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """
        Set a text/plain body.

        Content-Length is the UTF-8 BYTE length, not the character count:

            text("abc")  → Content-Length: 3
            text("é")    → Content-Length: 2
        """
        return self._framed(text.encode("utf-8"), TEXT_PLAIN)

    def octet_stream(self, data: bytes) -> "ResponseBuilder":
        """Set an application/octet-stream body (raw file bytes)."""
        return self._framed(data, OCTET_STREAM)

    def _framed(self, data: bytes, content_type: str) -> "ResponseBuilder":
        self._body = data
        return self.content_type(content_type).content_length(len(data))

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Quick one-liners for the three responses the server can send.
#
#     return ok()                            # 200, nothing else
#     return ok("abc", content_type="text/plain")
#     return created()                       # 201
#     return not_found()                     # 404
#
# =============================================================================

def ok(body: Union[str, bytes, None] = None, content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    With no arguments the response has no headers and no body, which is
    what GET / returns. When a content type is given, Content-Type and
    Content-Length are both set to match the body.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if body is not None:
        data = body.encode("utf-8") if isinstance(body, str) else body
        builder.body(data)
        if content_type:
            builder.content_type(content_type).content_length(len(data))

    return builder.build()


def created() -> HTTPResponse:
    """Create a 201 Created response with no headers and no body."""
    return ResponseBuilder().status(HTTPStatus.CREATED).build()


def not_found() -> HTTPResponse:
    """
    Create a 404 Not Found response.

    Every failure in the server ends up here: unknown routes, parse errors,
    missing files, failed writes. The response is always the same bare
    status line, with no headers and no body.
    """
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()
