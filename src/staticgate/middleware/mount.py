"""
=============================================================================
MOUNT
=============================================================================

Runs a middleware under a URL prefix, hiding the prefix from it.

    Mount("/assets", serve("./public"))

    GET /assets/css/site.css   → gate sees /css/site.css
    GET /assets                → gate sees /
    GET /assetsx/file          → not under the prefix, next stage
    GET /about                 → not under the prefix, next stage

The inner middleware's `next` continues with the ORIGINAL request, so a
later stage never sees the stripped path.

=============================================================================
"""

from dataclasses import replace

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from .base import Middleware, NextHandler


class Mount(Middleware):
    def __init__(self, prefix: str, middleware: Middleware):
        stripped = "/" + prefix.strip("/")
        self.prefix = "" if stripped == "/" else stripped
        self.middleware = middleware

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if not self.prefix:
            return self.middleware(request, next)

        path = request.path
        # Segment match: "/assets" must not capture "/assetsx".
        if path != self.prefix and not path.startswith(self.prefix + "/"):
            return next(request)

        inner = replace(request, path=path[len(self.prefix):] or "/")
        return self.middleware(inner, lambda _mounted: next(request))

    @property
    def name(self) -> str:
        return f"Mount({self.prefix or '/'}, {self.middleware.name})"
