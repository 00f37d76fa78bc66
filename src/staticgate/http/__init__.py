"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

Value types shared by the pipeline, the static gate and the host:

    request.py       HTTPRequest (raw, undecoded path)
    response.py      HTTPResponse, ResponseBuilder, HTTP-date helpers
    status_codes.py  HTTPStatus enum
    mime_types.py    Extension → Content-Type table

=============================================================================
"""

from .request import HTTPRequest
from .response import (
    HTTPResponse,
    ResponseBuilder,
    bad_request,       # 400 Bad Request
    not_found,         # 404 Not Found
    internal_error,    # 500 Internal Server Error
    format_http_date,
    parse_http_date,
)
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, get_content_type

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "ResponseBuilder",
    "bad_request",
    "not_found",
    "internal_error",
    "format_http_date",
    "parse_http_date",
    "HTTPStatus",
    "get_mime_type",
    "get_content_type",
]
