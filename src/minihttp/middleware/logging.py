"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

One log line per routed request, on the "minihttp.access" logger:

    text:  127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /echo/abc" 200 3 0.12ms
    json:  {"request_id": "1f3a9c0d", "method": "GET", "target": "/echo/abc", ...}

The logger is separate from the module loggers so it can be silenced or
redirected on its own:

    logging.getLogger("minihttp.access").setLevel(logging.WARNING)

Unlike many access-log middlewares this one does NOT add an X-Request-ID
(or any other) header to the response. The request id lives only in the
log.

=============================================================================
"""

import time
import json
import uuid
import logging
from dataclasses import asdict, dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """
    Structured access log entry.

    request_id:     Random id for correlating with other log lines
    method:         Method token as sent (so "PATCH", not "UNKNOWN")
    target:         Request target as sent
    client_ip:      Peer address
    user_agent:     User-Agent header, "-" if absent
    status_code:    Response status
    content_length: Response body size in bytes (0 without a body)
    duration_ms:    Time spent in the rest of the chain
    timestamp:      Local time in Apache log format
    """

    request_id: str
    method: str
    target: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-like common log line with the duration appended."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Add it FIRST so the timing covers every other middleware:

        pipeline.add(LoggingMiddleware(log_format="json"))

    A handler exception is logged here and re-raised; the connection
    handler decides what to send.
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" or "json".
            log_level: Level access lines are emitted at.
        """
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = str(uuid.uuid4())[:8]
        method = request.method_name or request.method.value
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {request.target} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        log_entry = RequestLog(
            request_id=request_id,
            method=method,
            target=request.target,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body) if response.body is not None else 0,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
