"""
=============================================================================
ACCESS LOG
=============================================================================

One line per request, written AFTER the response exists so it can carry
the status and size.

    text:  10.0.0.7 - - [10/Jun/2024:10:55:36 +0000] "GET /app.js" 200 1234 0.41ms
    json:  {"method": "GET", "path": "/app.js", "status_code": 200, ...}

The path is written raw, still percent-encoded. A decoded path could
smuggle "%0A" into the log as a line break and forge entries.

Lines go to the "staticgate.access" logger, separate from the gate's own
DEBUG decisions:

    logging.getLogger("staticgate.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("staticgate.access")


@dataclass
class AccessRecord:
    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    @classmethod
    def from_exchange(
        cls,
        request: HTTPRequest,
        response: HTTPResponse,
        request_id: str,
        duration_ms: float,
    ) -> "AccessRecord":
        # HEAD responses carry the file size in Content-Length but no body.
        size = response.headers.get("Content-Length")
        return cls(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=request.query,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=int(size) if size is not None else len(response.body),
            duration_ms=round(duration_ms, 2),
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    @property
    def target(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] "{self.method} {self.target}" '
            f'{self.status_code} {self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Access logging. Add it FIRST so it also sees requests that a later
    stage answers before the static gate is reached.
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = False,
        log_level: int = logging.INFO,
        skip_paths: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            log_format: "text" or "json".
            include_request_id: Echo the generated ID as X-Request-ID.
            log_level: Level for access lines.
            skip_paths: Raw paths never logged, e.g. ["/favicon.ico"].
        """
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = frozenset(skip_paths or ())

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        started = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.path} failed after "
                f"{elapsed:.2f}ms: {type(e).__name__}: {e}"
            )
            raise

        if request.path not in self.skip_paths:
            record = AccessRecord.from_exchange(
                request,
                response,
                request_id,
                (time.perf_counter() - started) * 1000,
            )
            line = record.to_json() if self.log_format == "json" else record.to_text()
            logger.log(self.log_level, line)

        if self.include_request_id:
            response.set_header("X-Request-ID", request_id)
        return response
