"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for a single request/response cycle.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

recv() can return any slice of what the client sent: half a start line,
three headers and part of a body, anything. Rather than reassembling chunks
by hand, the connection exposes a BUFFERED READER:

    reader = sock.makefile("rb")

    reader.readline(limit)   → blocks until CRLF, EOF or `limit` bytes
    reader.read(n)           → blocks until n bytes or EOF

which is exactly what the request parser needs. The write side is the raw
socket, used once via sendall().

=============================================================================
LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED  │
    │    │         │                                       ▲               │
    │    │         └── parse failed (still answered) ──────┤               │
    │    └── accepted                                      │               │
    │                                       send failed ───┘               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no KEEP_ALIVE state: one request per connection, always.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    NEW = "new"                  # Just accepted
    READING = "reading"          # Parser is consuming the request
    PROCESSING = "processing"    # Router/handler running
    WRITING = "writing"          # Sending the response
    CLOSING = "closing"          # Shutdown sequence in progress
    CLOSED = "closed"            # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short random identifier, prefixed to log lines.
        state: Current ConnectionState.
        created_at: Timestamp when the connection was accepted.
        timeout: Socket timeout in seconds. None blocks forever, so a
                 silent client holds its thread until it disconnects.
        reader: Buffered binary stream over the socket's read side.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = None

    # Seconds spent draining unread client data on close
    drain_timeout: float = 0.5

    reader: BinaryIO = field(init=False, repr=False)

    def __post_init__(self):
        self.socket.settimeout(self.timeout)
        self.reader = self.socket.makefile("rb")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the serialized response.

        sendall() keeps writing until every byte is out or the socket
        fails; plain send() may stop short.

        Returns:
            True if the whole response was sent, False if the client was
            gone. A failed send only ends this connection.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR) sends FIN so the client sees end-of-response.
        2. Drain whatever the client sent that the parser never read.
           Closing with unread data makes the kernel send RST, which can
           destroy a response the client has not read yet.
        3. Release the reader and the socket.

        Errors here mean the peer is already gone, so they are ignored.
        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass

        try:
            self.socket.settimeout(self.drain_timeout)
            while self.socket.recv(4096):
                pass
        except OSError:
            pass

        # The socket is only really closed once the makefile() stream is too
        self.reader.close()
        self.socket.close()

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows using Connection with 'with' for automatic cleanup:

            with Connection(sock, addr) as conn:
                request = parser.parse(conn.reader)
                conn.send_response(response.to_bytes())
            # Connection closed here, even on error
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
