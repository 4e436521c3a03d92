"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every setting the server has, in one dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m minihttp --directory /tmp/data/                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_DIRECTORY=/tmp/data/ python -m minihttp               │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The defaults reproduce the plain server: loopback on port 4221, no socket
timeout, files relative to the current directory.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .http.request import DEFAULT_MAX_BODY_SIZE, DEFAULT_MAX_LINE_SIZE


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    HTTP SETTINGS
    - directory, max_line_size, max_body_size

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to. Loopback by default; "0.0.0.0" exposes the
    server (and its unchecked file paths) to the network.
    """

    port: int = 4221
    """The port number to listen on. 0 lets the OS pick a free one."""

    backlog: int = 128
    """Maximum number of queued connections waiting for accept()."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = block forever. A client that connects and says nothing keeps
    its thread until it disconnects.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    directory: str = ""
    """
    Base directory for /files/<name>. Joined to the name by plain string
    concatenation, so it normally ends with a path separator.
    """

    max_line_size: Optional[int] = DEFAULT_MAX_LINE_SIZE
    """Longest start line or header line accepted, in bytes. None = no limit."""

    max_body_size: Optional[int] = DEFAULT_MAX_BODY_SIZE
    """Largest Content-Length accepted, in bytes. None = no limit."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (Apache-like) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 4221)
        HTTP_DIRECTORY   Base directory for /files/ (default: "")
        HTTP_TIMEOUT     Socket timeout in seconds (default: none)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        HTTP_LOG_FORMAT  Access log format (default: text)

        =====================================================================

        Raises:
            ValueError: If HTTP_PORT or HTTP_TIMEOUT is not a number.
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY", ""),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values, failing fast at startup.

        The directory is NOT checked for existence: a missing directory
        only shows up as 404s on /files/.

        Raises:
            ValueError: On the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_line_size is not None and self.max_line_size < 16:
            raise ValueError("max_line_size must be >= 16")

        if self.max_body_size is not None and self.max_body_size < 0:
            raise ValueError("max_body_size must be >= 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}."
            )

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.log_format}. Must be 'text' or 'json'.")
