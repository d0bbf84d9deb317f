"""
=============================================================================
ACCESS LOG
=============================================================================

One structured record per answered request, written to the
``fileserver.access`` logger.

    text:  127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /index.html HTTP/1.0" 200 512 0.84ms
    json:  {"connection_id": "1a2b3c4d", "method": "GET", "path": "/index.html", ...}

Requests that fail to parse are not access-logged; the server reports
them on its own logger at WARNING.

The logger is namespaced so it can be routed separately:

    logging.getLogger("fileserver.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """Structured log entry for one request/response pair."""

    connection_id: str
    method: str
    path: str
    version: str
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
        """Common Log Format, plus the handling time."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path} {self.version}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(
    request: HTTPRequest,
    response: HTTPResponse,
    duration_ms: float,
    connection_id: str = "-",
    log_format: str = "text",
) -> RequestLog:
    """
    Build a RequestLog and emit it.

    Error responses are logged at WARNING, everything else at INFO.
    """
    entry = RequestLog(
        connection_id=connection_id,
        method=request.method,
        path=request.path,
        version=request.version,
        client_ip=request.client_address[0],
        user_agent=request.user_agent or "-",
        status_code=response.status_code,
        content_length=len(response.body),
        duration_ms=duration_ms,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )

    level = logging.WARNING if response.status.is_error else logging.INFO
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())

    return entry
