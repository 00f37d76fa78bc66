"""
=============================================================================
DELIVERY
=============================================================================

Everything that happens AFTER the gate has a safe path:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   StaticGate ──path──► DeliveryAdapter ──path, SendOptions──►       │
    │                              │                          FileSender   │
    │                              │                              │        │
    │                              │◄────────── Delivery ─────────┘        │
    │                              │                                       │
    │        HANDLED ◄── handled ──┤                                       │
    │        FALLTHROUGH ◄── miss ─┘                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The adapter only translates: gate options in, Delivery out. The sender is
the collaborator that touches the disk. It can be swapped (tests, a CDN
uploader, an in-memory bundle) by passing another Sender to the adapter.

=============================================================================
WHAT FileSender DOES
=============================================================================

1. stat() the path. Missing, "not a directory", or "name too long"
   means MISS: not an error, just not ours.
2. Directory? With format=True and an index, retry with dir/index.
   Otherwise MISS.
3. Conditional GET: If-Modified-Since >= mtime (whole seconds) → 304.
4. Otherwise 200 with Content-Type, Content-Length, Last-Modified and
   Cache-Control. HEAD gets the headers and no body.

=============================================================================
"""

import errno
import logging
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..config import StaticOptions
from ..errors import DeliveryError
from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    parse_http_date,
)
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# stat() failures that mean "nothing to serve here" rather than "broken".
_MISS_ERRNOS = {errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG}


@dataclass(frozen=True)
class SendOptions:
    """The subset of StaticOptions the sender is allowed to see."""

    maxage: int = 0
    if_modified_since_support: bool = True
    format: bool = True
    index: Optional[str] = None

    @classmethod
    def from_options(cls, options: StaticOptions) -> "SendOptions":
        return cls(
            maxage=options.maxage,
            if_modified_since_support=options.if_modified_since_support,
            format=options.format,
            index=options.index,
        )


@dataclass(frozen=True)
class Delivery:
    """
    Outcome of one delivery attempt.

        handled=True   response is complete (200, 304), pipeline stops
        handled=False  nothing was written, the request falls through
    """

    handled: bool
    response: Optional[HTTPResponse] = None
    path: Optional[str] = None

    @classmethod
    def sent(cls, response: HTTPResponse, path: str) -> "Delivery":
        return cls(handled=True, response=response, path=path)

    @classmethod
    def miss(cls) -> "Delivery":
        return cls(handled=False)


class Sender(ABC):
    """A component that turns a safe filesystem path into a response."""

    @abstractmethod
    def send(self, request: HTTPRequest, path: str, options: SendOptions) -> Delivery:
        pass


class FileSender(Sender):
    """
    Serve files straight from the local filesystem.

    The whole file is read into memory. That matches the host's
    HTTPResponse (bytes body) and is fine for typical web assets.
    """

    def send(self, request: HTTPRequest, path: str, options: SendOptions) -> Delivery:
        st = self._stat(path)
        if st is None:
            return Delivery.miss()

        if stat.S_ISDIR(st.st_mode):
            if not (options.format and options.index):
                return Delivery.miss()
            path = os.path.join(path, options.index)
            st = self._stat(path)
            if st is None:
                return Delivery.miss()

        # Directories without index, FIFOs, sockets, devices.
        if not stat.S_ISREG(st.st_mode):
            return Delivery.miss()

        # HTTP dates have one-second resolution, so mtime is truncated
        # before it is either advertised or compared.
        mtime = int(st.st_mtime)
        headers = {
            "Cache-Control": f"max-age={options.maxage}",
            "Last-Modified": format_http_date(datetime.fromtimestamp(mtime, tz=timezone.utc)),
        }

        if options.if_modified_since_support and self._not_modified(request, mtime):
            response = (ResponseBuilder()
                .status(HTTPStatus.NOT_MODIFIED)
                .headers(headers)
                .build())
            return Delivery.sent(response, path)

        content = b"" if request.method == "HEAD" else self._read(path)
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .headers(headers)
            .file(content, path)
            .header("Content-Length", str(st.st_size if request.method == "HEAD" else len(content)))
            .build())
        return Delivery.sent(response, path)

    def _stat(self, path: str) -> Optional[os.stat_result]:
        try:
            return os.stat(path)
        except OSError as e:
            if e.errno in _MISS_ERRNOS:
                return None
            raise DeliveryError(path, e) from e

    def _read(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise DeliveryError(path, e) from e

    def _not_modified(self, request: HTTPRequest, mtime: int) -> bool:
        since = parse_http_date(request.get_header("if-modified-since"))
        return since is not None and mtime <= since


class DeliveryAdapter:
    """
    The gate's single call into the delivery collaborator.

    Usage:
        adapter = DeliveryAdapter(StaticOptions(maxage=60))
        delivery = adapter.deliver(request, "/srv/www/app.js")
        if delivery.handled:
            return delivery.response
    """

    def __init__(self, options: StaticOptions, sender: Optional[Sender] = None):
        self.options = SendOptions.from_options(options)
        self.sender = sender or FileSender()

    def deliver(self, request: HTTPRequest, path: str) -> Delivery:
        delivery = self.sender.send(request, path, self.options)
        if delivery.handled and delivery.response is None:
            raise TypeError(f"{type(self.sender).__name__} reported handled without a response")

        if delivery.handled:
            logger.debug(f"Delivered {delivery.path or path} ({int(delivery.response.status)})")
        else:
            logger.debug(f"Delivery miss: {path}")
        return delivery
