"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes a static-file host actually produces.

    ┌────────────────────────────────────────────────────────────────────┐
    │                 STATUS CODES IN STATIC SERVING                     │
    ├────────┬───────────────────────────────────────────────────────────┤
    │  200   │ File delivered (GET) or headers only (HEAD)               │
    │  304   │ Client's cached copy is still current (If-Modified-Since) │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  400   │ Request path could not be percent-decoded                 │
    │  404   │ Nothing in the pipeline handled the request               │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  500   │ File exists but could not be read                         │
    └────────┴───────────────────────────────────────────────────────────┘

Note what is missing: there is no 403. Paths that escape the root and
hidden files fall through to the next stage and typically end as 404,
exactly like files that do not exist.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so codes compare equal to plain integers:

        >>> HTTPStatus.NOT_MODIFIED == 304
        True
        >>> HTTPStatus.NOT_MODIFIED.phrase
        'Not Modified'
    """

    OK = 200

    NOT_MODIFIED = 304          # Cached version is still valid

    BAD_REQUEST = 400           # Undecodable path
    NOT_FOUND = 404             # Fallthrough reached the end of the pipeline

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 304 Not Modified
                     ─── ────────────
                      │       └── Reason phrase
                      └────────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
