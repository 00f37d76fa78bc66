"""
=============================================================================
HTTP RESPONSE
=============================================================================

Response container, a fluent builder, and the HTTP-date helpers used for
Last-Modified / If-Modified-Since.

=============================================================================
HTTP DATES HAVE ONE-SECOND RESOLUTION
=============================================================================

    Last-Modified: Wed, 15 Jun 2024 10:00:00 GMT
                                          ──
                                          └── no fractions, ever

A file modified at 10:00:00.750 is advertised as 10:00:00. When the
client sends that value back in If-Modified-Since, comparing it with the
raw mtime (10:00:00.750) would say "modified since!" and send a full 200
every time. Both sides must be truncated to whole seconds before they
are compared. format_http_date() truncates; parse_http_date() returns
whole seconds.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional, Dict, Any, Union
import json

from .status_codes import HTTPStatus
from .mime_types import get_content_type


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Use ResponseBuilder for a more convenient way to construct responses.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Example: "HTTP/1.1 304 Not Modified"."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for method chaining."""
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the response body, encoding strings as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .file(content, "index.html")
            .cache(max_age=60)
            .build())

    Every method returns self except build().
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """Serialize data to JSON and set Content-Type."""
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def file(self, content: bytes, filename: str) -> "ResponseBuilder":
        """
        Set a file body, detecting Content-Type from the filename extension.
        """
        self._body = content
        self._headers["Content-Type"] = get_content_type(filename)
        return self

    def cache(self, max_age: int) -> "ResponseBuilder":
        """
        Add a Cache-Control header.

            Cache-Control: max-age=3600
                           ───┬───
                              └── seconds the client may reuse its copy
        """
        self._headers["Cache-Control"] = f"max-age={max_age}"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


# =============================================================================
# HTTP DATES
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    Sub-second precision is dropped (truncated, never rounded).
    HTTP dates are ALWAYS in GMT (UTC), never local time.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def parse_http_date(value: str) -> Optional[int]:
    """
    Parse an HTTP-date into a POSIX timestamp (whole seconds).

    Returns None when the value cannot be parsed; an unreadable
    If-Modified-Since header is ignored, not an error.

        >>> parse_http_date("Thu, 01 Jan 1970 00:01:40 GMT")
        100
        >>> parse_http_date("yesterday") is None
        True
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    # A date without zone info is assumed to be GMT, as RFC 7231 requires.
    if parsed.tzinfo is None:
        return int((parsed - datetime(1970, 1, 1)).total_seconds())
    return int(parsed.timestamp())


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def bad_request(message: str = "Bad Request") -> HTTPResponse:
    """
    Create a 400 Bad Request response.

    The static gate uses this for undecodable paths:
        {"error": "Could not decode path"}
    """
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).json({"error": message}).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    """
    Create a 404 Not Found response.

    This is what a request looks like after every stage has fallen through.
    """
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).json({"error": message}).build()


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """Create a 500 response. Keep the message generic: no paths, no errno."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).json({"error": message}).build()
