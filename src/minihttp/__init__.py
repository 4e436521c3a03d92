"""
=============================================================================
MINIHTTP
=============================================================================

A minimal HTTP/1.1 server: one request per TCP connection, a fixed set of
routes, and byte-exact framing on both sides of the wire.

    GET  /                 200, empty
    GET  /user-agent       200 text/plain, the User-Agent header (404 if absent)
    GET  /echo/<text>      200 text/plain, <text> as sent
    GET  /files/<name>     200 application/octet-stream, the file's bytes
    POST /files/<name>     201 after writing the request body to the file
    anything else          404, empty

=============================================================================
PACKAGE LAYOUT
=============================================================================

    minihttp/
    ├── http/            Parser, response serializer, router, status codes
    ├── handlers/        The five route handlers
    ├── middleware/      Pipeline and access logging
    ├── core/            Listening socket and per-connection wrapper
    ├── routes.py        The route table
    ├── server.py        HTTPServer: accept, thread per connection, cycle
    ├── config.py        ServerConfig
    └── __main__.py      `python -m minihttp` / `minihttp` CLI

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(directory="/tmp/data/"))
    server.run()

    $ curl -i http://127.0.0.1:4221/echo/hello
    HTTP/1.1 200 OK
    Content-Type: text/plain
    Content-Length: 5

    hello

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
