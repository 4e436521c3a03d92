"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the byte stream of one connection into a structured HTTPRequest.

=============================================================================
WHAT WE READ
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST ON THE WIRE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  POST /files/notes.txt HTTP/1.1\r\n      ← start line               │
    │  ──┬─ ────────┬─────── ────┬───                                      │
    │  method     target     (ignored)                                     │
    │                                                                      │
    │  Host: localhost:4221\r\n                ← header lines             │
    │  User-Agent: curl/7.64.1\r\n               "Name: value"            │
    │  Content-Length: 5\r\n                                               │
    │  \r\n                                    ← empty line ends headers  │
    │  hello                                   ← exactly 5 body bytes     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The parser consumes a LINE-BUFFERED stream (socket.makefile("rb") or an
io.BytesIO in tests) instead of a pre-read buffer:

    1. readline()          → start line, split on whitespace
    2. readline() ...      → header lines until exactly b"\\r\\n"
    3. read(Content-Length) → body, only if the header is present

Anything the client sends after that is never read. There is exactly one
request per connection, so leftover bytes simply die with the socket.

=============================================================================
FRAMING RULES
=============================================================================

    ┌────────────────────────────┬───────────────────────────────────────┐
    │  Input                     │  Outcome                              │
    ├────────────────────────────┼───────────────────────────────────────┤
    │  EOF before start line     │  HTTPParseError                       │
    │  < 2 start-line tokens     │  HTTPParseError                       │
    │  unknown method token      │  HTTPMethod.UNKNOWN (parse continues) │
    │  header line without ": "  │  HTTPParseError                       │
    │  EOF inside header block   │  HTTPParseError                       │
    │  duplicate header name     │  last value wins                      │
    │  Content-Length not digits │  HTTPParseError                       │
    │  fewer body bytes than CL  │  HTTPParseError                       │
    │  no Content-Length         │  body is None, nothing read           │
    └────────────────────────────┴───────────────────────────────────────┘

Header names are NOT case-folded: "Content-Length" and "content-length"
are different headers here, and only the first spelling frames a body.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Optional
import io
import re


# Size limits are off unless ServerConfig sets them
DEFAULT_MAX_LINE_SIZE: Optional[int] = None
DEFAULT_MAX_BODY_SIZE: Optional[int] = None


class HTTPParseError(Exception):
    """
    Raised when the stream does not hold a usable HTTP message.

    The connection handler turns every HTTPParseError into a 404, so the
    message is only ever seen in logs.
    """


class HTTPMethod(Enum):
    """
    Request methods the server recognises.

    Anything else maps to UNKNOWN instead of failing the parse, so an
    unusual method still gets a normal 404 back.
    """
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_token(cls, token: str) -> "HTTPMethod":
        """
        Map a start-line token to a method (case-sensitive).

            >>> HTTPMethod.from_token("POST")
            <HTTPMethod.POST: 'POST'>
            >>> HTTPMethod.from_token("get")
            <HTTPMethod.UNKNOWN: 'UNKNOWN'>
        """
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once per connection and never modified afterwards (frozen).

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         HTTPMethod member (UNKNOWN for unrecognised tokens)

        target:         Request target exactly as sent, "/echo/a%20b"
                        stays "/echo/a%20b" (no decoding, no query split)

        headers:        Header name → trimmed value, names kept verbatim

        body:           Raw bytes if a Content-Length header framed one,
                        otherwise None. b"" means "Content-Length: 0".

        method_name:    The method token as sent, for logging

        client_address: (ip, port) of the peer, for logging

    =========================================================================
    """

    method: HTTPMethod
    target: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    # Metadata
    method_name: str = ""
    client_address: tuple[str, int] = ("", 0)

    @property
    def user_agent(self) -> Optional[str]:
        """The User-Agent header, or None if the client did not send one."""
        return self.headers.get("User-Agent")

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Look up a header by its exact name.

        Unlike most servers this is a case-sensitive lookup, matching the
        way headers are stored.
        """
        return self.headers.get(name, default)


class RequestParser:
    """
    Reads exactly one HTTP request from a binary stream.

    ==========================================================================
    PARSER FLOW
    ==========================================================================

        stream
          │
          ▼
        ┌───────────────────────────────────────────────────────────────┐
        │  1. _read_start_line()                                        │
        │     "GET /echo/abc HTTP/1.1\\r\\n" → (GET, "/echo/abc")         │
        │     ▼                                                         │
        │  2. _read_headers()                                           │
        │     loop readline() until b"\\r\\n"                             │
        │     "Name: value" → headers["Name"] = "value"                 │
        │     ▼                                                         │
        │  3. _read_body()                                              │
        │     Content-Length present? read(n), must get n bytes         │
        │     ▼                                                         │
        │  4. HTTPRequest(...)                                          │
        └───────────────────────────────────────────────────────────────┘

    Every failure raises HTTPParseError. Stream errors (connection reset,
    socket timeout) are re-raised as HTTPParseError too, so callers only
    have one exception to handle.

    ==========================================================================
    """

    HEADER_SEPARATOR = ": "
    CONTENT_LENGTH = "Content-Length"

    # ASCII digits, optionally preceded by "+". int() alone would also take
    # "-1" and "1_0"
    CONTENT_LENGTH_PATTERN = re.compile(r"\+?[0-9]+")

    def __init__(
        self,
        max_line_size: Optional[int] = DEFAULT_MAX_LINE_SIZE,
        max_body_size: Optional[int] = DEFAULT_MAX_BODY_SIZE,
    ):
        """
        Args:
            max_line_size: Longest accepted start or header line, in bytes
                           (including the CRLF). None for no limit.
            max_body_size: Largest accepted Content-Length value. None for
                           no limit.
        """
        self.max_line_size = max_line_size
        self.max_body_size = max_body_size

    def parse(
        self,
        stream: BinaryIO,
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one request from the stream.

        Args:
            stream: Binary file-like object with readline() and read().
            client_address: Peer (ip, port), copied onto the request.

        Returns:
            The parsed HTTPRequest.

        Raises:
            HTTPParseError: If no valid request could be read.
        """
        try:
            method_name, target = self._read_start_line(stream)
            headers = self._read_headers(stream)
            body = self._read_body(stream, headers)
        except OSError as e:
            raise HTTPParseError(f"Stream error while reading request: {e}") from e

        return HTTPRequest(
            method=HTTPMethod.from_token(method_name),
            target=target,
            headers=headers,
            body=body,
            method_name=method_name,
            client_address=client_address,
        )

    # =========================================================================
    # STEP 1: START LINE
    # =========================================================================

    def _read_start_line(self, stream: BinaryIO) -> tuple[str, str]:
        """
        Read the start line and return (method token, request target).

        Only the first two whitespace-separated tokens matter. The version
        token, if any, is ignored.
        """
        line = self._readline(stream)
        if not line:
            raise HTTPParseError("Connection closed before start line")

        tokens = self._decode(line).split()
        if len(tokens) < 2:
            raise HTTPParseError(f"Malformed start line: {line!r}")

        return tokens[0], tokens[1]

    # =========================================================================
    # STEP 2: HEADERS
    # =========================================================================

    def _read_headers(self, stream: BinaryIO) -> Dict[str, str]:
        """
        Read header lines up to and including the empty line.

        Each line is split on the FIRST ": ", so values may contain ": "
        themselves ("X-Time: 12: 30" → "12: 30").
        """
        headers: Dict[str, str] = {}

        while True:
            line = self._readline(stream)

            if line == b"\r\n":
                return headers

            if not line:
                raise HTTPParseError("Connection closed inside header block")

            text = self._decode(line)
            name, separator, value = text.partition(self.HEADER_SEPARATOR)
            if not separator:
                raise HTTPParseError(f"Malformed header line: {line!r}")

            # Last occurrence wins
            headers[name] = value.strip()

    # =========================================================================
    # STEP 3: BODY
    # =========================================================================

    def _read_body(self, stream: BinaryIO, headers: Dict[str, str]) -> Optional[bytes]:
        """
        Read the body framed by Content-Length, if there is one.

        No Content-Length means no body, even when more bytes are waiting
        on the stream.
        """
        raw_length = headers.get(self.CONTENT_LENGTH)
        if raw_length is None:
            return None

        if not self.CONTENT_LENGTH_PATTERN.fullmatch(raw_length):
            raise HTTPParseError(f"Invalid Content-Length: {raw_length!r}")

        length = int(raw_length)
        if self.max_body_size is not None and length > self.max_body_size:
            raise HTTPParseError(
                f"Content-Length {length} exceeds limit of {self.max_body_size} bytes"
            )

        body = stream.read(length)
        if len(body) != length:
            raise HTTPParseError(
                f"Incomplete body: expected {length} bytes, got {len(body)}"
            )

        return body

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _readline(self, stream: BinaryIO) -> bytes:
        """Read one line, enforcing max_line_size when set."""
        if self.max_line_size is None:
            return stream.readline()

        line = stream.readline(self.max_line_size + 1)
        if len(line) > self.max_line_size:
            raise HTTPParseError(f"Line exceeds {self.max_line_size} bytes")
        return line

    @staticmethod
    def _decode(line: bytes) -> str:
        try:
            return line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HTTPParseError(f"Line is not valid UTF-8: {e}") from e


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_line_size: Optional[int] = DEFAULT_MAX_LINE_SIZE,
    max_body_size: Optional[int] = DEFAULT_MAX_BODY_SIZE,
) -> HTTPRequest:
    """
    Parse a request held entirely in memory.

    Wraps the bytes in io.BytesIO and runs a fresh RequestParser over them.
    Handy in tests and for replaying captured requests.
    """
    parser = RequestParser(max_line_size=max_line_size, max_body_size=max_body_size)
    return parser.parse(io.BytesIO(data), client_address)
