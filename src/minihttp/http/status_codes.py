"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server speaks exactly three statuses. Nothing else can be put on the
wire, so the set is a closed enum rather than a free integer:

    ┌────────┬───────────────┬──────────────────────────────────────────┐
    │  Code  │  Phrase       │  Used for                                │
    ├────────┼───────────────┼──────────────────────────────────────────┤
    │  200   │  OK           │  /, /user-agent, /echo/*, GET /files/*   │
    │  201   │  Created      │  POST /files/*                           │
    │  404   │  Not Found    │  everything else, including every error  │
    └────────┴───────────────┴──────────────────────────────────────────┘

There is no 4xx/5xx taxonomy beyond 404. A malformed request and a failing
disk write look the same to a client.

Constructing a status from any other integer fails immediately:

    >>> HTTPStatus(200).phrase
    'OK'
    >>> HTTPStatus(500)
    Traceback (most recent call last):
        ...
    ValueError: 500 is not a valid HTTPStatus

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes understood by the server.

    IntEnum, so members compare equal to their integer code and format as
    the bare number inside f-strings.
    """

    OK = 200            # Request handled, body optional
    CREATED = 201       # File written by POST /files/<name>
    NOT_FOUND = 404     # Catch-all failure

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
}
