"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure the static gate can produce, grouped by WHEN it happens and
WHAT the client is allowed to observe.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      STATIC GATE ERRORS                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ERROR                 WHEN            CLIENT SEES                  │
    │   ─────                 ────            ───────────                  │
    │                                                                      │
    │   ConfigurationError    setup time      (server never starts)       │
    │   PathDecodeError       per request     400 Could not decode path   │
    │   ContainmentError      per request     next stage (usually 404)    │
    │   DeliveryError         per request     500 from the host           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Hidden-path rejections and delivery misses are not errors at all: they are
ordinary fallthrough outcomes and never raise.

=============================================================================
WHY CONTAINMENT IS SILENT
=============================================================================

A probe for /../../etc/passwd and a probe for /does-not-exist must look the
same from the outside. If the first produced a 403 and the second a 404,
an attacker could map the filesystem by comparing status codes.

=============================================================================
"""

from typing import Optional


class StaticGateError(Exception):
    """
    Base class for all static gate errors.

    Like the request parser's errors, each instance carries the HTTP status
    that should reach the client if the error escapes to the host.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(StaticGateError, ValueError):
    """Raised at setup time when the root or options are invalid."""


class PathDecodeError(StaticGateError):
    """
    Raised when the request path is not valid percent-encoded UTF-8.

    Examples of paths that fail:
        /%zz.txt      (% not followed by two hex digits)
        /%E4          (byte 0xE4 alone is not a UTF-8 character)
    """

    status_code = 400
    MESSAGE = "Could not decode path"

    def __init__(self, path: str = ""):
        super().__init__(self.MESSAGE)
        self.path = path


class ContainmentError(StaticGateError):
    """
    Raised when a decoded path would resolve outside the configured root.

    Never surfaces to the client: the gate turns it into a fallthrough.
    """

    status_code = 404

    def __init__(self, path: str, reason: str):
        super().__init__(f"Path escapes root ({reason}): {path!r}")
        self.path = path
        self.reason = reason


class DeliveryError(StaticGateError):
    """Raised when the file exists but cannot be read for another reason."""

    status_code = 500

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Failed to deliver {path}: {cause}")
        self.path = path
        self.cause = cause
