"""
=============================================================================
HTTP REQUEST
=============================================================================

The request object handed through the middleware pipeline.

=============================================================================
RAW PATHS
=============================================================================

The path stored on HTTPRequest is the path EXACTLY as it arrived on the
request line, minus the query string. It is NOT percent-decoded here:

    Request line:   GET /docs/read%20me.txt?v=2 HTTP/1.1
                         ─────────┬──────── ─┬─
                                  │          │
    request.path  = "/docs/read%20me.txt"    │
    request.query = "v=2" ───────────────────┘

Decoding is a security decision (what does "%2e%2e" mean? what about an
invalid escape?) and belongs to the component that maps paths to files.
A parser that decodes early, and then later code that decodes again, is a
classic double-decoding traversal bug.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class HTTPRequest:
    """
    Represents one HTTP request travelling through the pipeline.

        method:         GET, HEAD, POST, ...
        path:           Raw (still percent-encoded) path, no query string
        version:        "HTTP/1.1" or "HTTP/1.0"
        headers:        Header name → value, names LOWERCASE
        query:          Raw query string without the "?"
        client_address: (ip, port) of the client
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    query: str = ""
    client_address: tuple[str, int] = ("", 0)

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: Optional[Dict[str, str]] = None,
        version: str = "HTTP/1.1",
        client_address: tuple[str, int] = ("", 0),
    ) -> "HTTPRequest":
        """
        Build a request from a request-target such as "/a/b.txt?x=1".

        We split on "?" by hand instead of using urlsplit(): urlsplit reads
        "//evil/passwd" as host "evil" + path "/passwd", which would hide
        the double slash from the path resolver.
        """
        target = target.split("#", 1)[0]
        path, _, query = target.partition("?")
        normalized = {name.lower(): value for name, value in (headers or {}).items()}
        return cls(
            method=method.upper(),
            path=path or "/",
            version=version,
            headers=normalized,
            query=query,
            client_address=client_address,
        )

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name.lower(), default)
