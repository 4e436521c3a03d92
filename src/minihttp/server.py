"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: accept loop, one thread per connection, and the
parse → route → serialize cycle on each of them.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. ACCEPT
       └── SocketServer.accept() returns a client socket

    2. SPAWN
       └── A new daemon thread takes the Connection; the accept loop
           goes straight back to accept()

    3. PARSE
       └── RequestParser reads ONE request from conn.reader
       └── HTTPParseError → skip to 5 with a 404

    4. ROUTE
       └── LoggingMiddleware → Router → handler(request, suffix)
       └── Unexpected exception → 404 (logged with traceback)

    5. SEND
       └── response.to_bytes() written with sendall()

    6. CLOSE
       └── Always. There is no keep-alive, whatever the client asks for.

Every client gets exactly one response. Even a request that cannot be
parsed is answered ("HTTP/1.1 404 Not Found\\r\\n\\r\\n") rather than
dropped. The only way a client gets nothing is if the write itself fails.

=============================================================================
CONCURRENCY
=============================================================================

Thread per connection, unbounded. No pool, no queue, no 503. Each thread
owns its connection outright and shares no mutable state with the others,
so nothing here takes a lock.

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional, Tuple

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers.files import ReadFile, WriteFile, read_file, write_file
from .http import (
    HTTPParseError, HTTPRequest, HTTPResponse, RequestParser, Router, not_found,
)
from .middleware import LoggingMiddleware, MiddlewarePipeline
from .routes import create_router


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Minimal HTTP/1.1 server.

    =========================================================================
    USAGE
    =========================================================================

        # Serve /files/ from /tmp/data/ on 127.0.0.1:4221
        server = HTTPServer(ServerConfig(directory="/tmp/data/"))
        server.run()            # blocks until Ctrl+C / SIGTERM

        # In tests, drive one connection without a listening socket
        server = HTTPServer()
        server_side, client_side = socket.socketpair()
        client_side.sendall(b"GET / HTTP/1.1\\r\\n\\r\\n")
        server.handle_connection(Connection(server_side, ("test", 0)))

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        read_file: ReadFile = read_file,
        write_file: WriteFile = write_file,
    ):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            read_file: Filesystem read collaborator for GET /files/.
            write_file: Filesystem write collaborator for POST /files/.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(
            max_line_size=self.config.max_line_size,
            max_body_size=self.config.max_body_size,
        )
        self._router = create_router(self.config.directory, read_file, write_file)

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))

        self._handler: Callable[[HTTPRequest], HTTPResponse] = self._middleware.wrap(
            self._router.handle
        )

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """The bound address once listening, else the configured one."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Blocks until shutdown() is called or SIGINT/SIGTERM arrives (the
        latter only when running on the main thread).

        Args:
            host: Override config host.
            port: Override config port (0 picks a free port).

        Raises:
            OSError: If the address cannot be bound.
        """
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        if self.config.directory:
            logger.info(f"Serving files from {self.config.directory!r}")

        try:
            self._socket_server.start(self._spawn_connection_thread)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight connections finish."""
        logger.info("Shutting down server...")
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until run() is listening. False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        # No-op if the host application already configured logging
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _spawn_connection_thread(self, conn: Connection):
        """Called by the accept loop: hand the connection to a new thread."""
        thread = threading.Thread(
            target=self.handle_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def handle_connection(self, conn: Connection):
        """
        Run one full request/response cycle on a connection, then close it.

        Runs on the calling thread. Never raises for anything the client
        sends; a failed write is logged by the connection and ends the
        cycle early.
        """
        with conn:
            conn.state = ConnectionState.READING
            try:
                request = self._parser.parse(conn.reader, conn.address)
            except HTTPParseError as e:
                logger.info(f"[{conn.id}] Unparseable request from {conn.client_ip}: {e}")
                response = not_found()
            else:
                conn.state = ConnectionState.PROCESSING
                response = self.handle_request(request)

            conn.send_response(response.to_bytes())

    def handle_request(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run a parsed request through the middleware and the router.

        A handler that raises still produces a response: there is no 500
        here, so it becomes the same 404 as every other failure.
        """
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method_name} {request.target}: {e}")
            return not_found()
