"""
=============================================================================
CORE NETWORKING
=============================================================================

The transport layer under the HTTP code:

    socket_server.py   Listening socket, accept loop, signal handling
    connection.py      One accepted socket: buffered reader, sendall, close

=============================================================================
CONCURRENCY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   main thread: accept() ──► accept() ──► accept() ──► ...            │
    │                    │            │            │                       │
    │                    ▼            ▼            ▼                       │
    │                 thread 1     thread 2     thread 3                   │
    │                 parse        parse        parse                      │
    │                 route        route        route                      │
    │                 send         send         send                       │
    │                 close        close        close                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One thread per connection, no pool and no cap. Threads share nothing but
the filesystem, so the HTTP code needs no locks. Two clients writing the
same file at once race at the OS level.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accept loop
    "Connection",       # Client socket wrapper
    "ConnectionState",  # Connection lifecycle states
]
