"""
=============================================================================
STATIC GATE
=============================================================================

Decides, for every request, whether it is a static-file request, which
file it maps to, whether that file may be shown, and then either delivers
it or lets the request continue down the pipeline.

=============================================================================
ONE REQUEST, STEP BY STEP
=============================================================================

    START
      │
      ├── method not GET/HEAD ───────────────────────────► FALLTHROUGH
      │
      ├── decode path ──── malformed escape ─────────────► REJECTED (400)
      │
      ├── path ends in "/" and index set: append index
      │
      ├── resolve against root ──── escapes root ────────► FALLTHROUGH
      │
      ├── hidden segment and hidden=False ───────────────► FALLTHROUGH
      │
      └── deliver ──┬── file sent (200 / 304) ───────────► HANDLED
                    └── no such file ────────────────────► FALLTHROUGH

Every FALLTHROUGH looks the same from outside: the next stage runs,
usually ending in a 404. A probe for /../../etc/passwd, a probe for
/.git/config and a request for /missing.txt are indistinguishable.

REJECTED is the only outcome that stops the pipeline without a file: a
path that cannot be decoded is a broken request, not a miss.

=============================================================================
USAGE
=============================================================================

    pipeline = MiddlewarePipeline()
    pipeline.add(serve("./public", index="index.html", maxage=3600))
    handler = pipeline.wrap(lambda request: not_found())

    # Or ask for the decision without running the pipeline:
    gate = StaticGate("./public", StaticOptions(index="index.html"))
    result = gate.handle(HTTPRequest(method="GET", path="/"))
    result.outcome    # Outcome.HANDLED

=============================================================================
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..config import StaticOptions
from ..errors import ConfigurationError, ContainmentError, PathDecodeError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, bad_request
from ..middleware.base import Middleware, NextHandler
from .delivery import DeliveryAdapter, Sender
from .hidden import is_hidden
from .resolver import (
    apply_index,
    decode_path,
    normalize_root,
    resolve_path,
    strip_path_root,
)


logger = logging.getLogger(__name__)


ELIGIBLE_METHODS = frozenset({"GET", "HEAD"})


class Outcome(Enum):
    HANDLED = "handled"
    FALLTHROUGH = "fallthrough"
    REJECTED = "rejected"


@dataclass(frozen=True)
class GateResult:
    """
    The gate's verdict for one request.

        outcome:         HANDLED / FALLTHROUGH / REJECTED
        response:        Set for HANDLED and REJECTED
        decoded_path:    Path after percent-decoding and index substitution
        filesystem_path: Path that was resolved, if resolution succeeded
        reason:          Short tag for logs ("method", "hidden", ...)
    """

    outcome: Outcome
    response: Optional[HTTPResponse] = None
    decoded_path: Optional[str] = None
    filesystem_path: Optional[str] = None
    reason: str = ""


class StaticGate(Middleware):
    """
    Static-file middleware guarding a single root directory.

    Root and options are fixed at construction and never change, so one
    gate can serve any number of concurrent requests without locking.
    """

    def __init__(
        self,
        root: str,
        options: Optional[StaticOptions] = None,
        sender: Optional[Sender] = None,
    ):
        """
        Args:
            root: Directory to serve. Relative paths are made absolute
                  against the current working directory, once.
            options: Behaviour flags; defaults to StaticOptions().
            sender: Delivery collaborator; defaults to FileSender.

        Raises:
            ConfigurationError: root is empty or options are invalid.
        """
        if not root:
            raise ConfigurationError("root directory is required to serve files")

        self.options = options or StaticOptions()
        self.options.validate()
        self.root = normalize_root(root)
        self._delivery = DeliveryAdapter(self.options, sender)

        logger.debug(f'static "{self.root}" {self.options}')

    def handle(self, request: HTTPRequest) -> GateResult:
        """Run the gate for one request and return its verdict."""
        if request.method not in ELIGIBLE_METHODS:
            return GateResult(Outcome.FALLTHROUGH, reason="method")

        try:
            decoded = decode_path(strip_path_root(request.path))
        except PathDecodeError as e:
            logger.debug(f"Undecodable path: {request.path!r}")
            return GateResult(Outcome.REJECTED, response=bad_request(str(e)), reason="decode")

        decoded = apply_index(request.path, decoded, self.options.index)

        try:
            path = resolve_path(self.root, decoded)
        except ContainmentError as e:
            # DEBUG only, never WARNING.
            logger.debug(str(e))
            return GateResult(Outcome.FALLTHROUGH, decoded_path=decoded, reason="containment")

        if not self.options.hidden and is_hidden(self.root, path):
            logger.debug(f"Hidden path not served: {path}")
            return GateResult(
                Outcome.FALLTHROUGH,
                decoded_path=decoded,
                filesystem_path=path,
                reason="hidden",
            )

        delivery = self._delivery.deliver(request, path)
        if delivery.handled:
            return GateResult(
                Outcome.HANDLED,
                response=delivery.response,
                decoded_path=decoded,
                filesystem_path=path,
            )

        return GateResult(
            Outcome.FALLTHROUGH,
            decoded_path=decoded,
            filesystem_path=path,
            reason="not_found",
        )

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        result = self.handle(request)
        if result.outcome is Outcome.FALLTHROUGH:
            return next(request)
        return result.response

    @property
    def name(self) -> str:
        return f"StaticGate({self.root})"


def serve(root: str, options: Optional[StaticOptions] = None, **overrides) -> StaticGate:
    """
    Create a static gate.

    Keyword overrides are applied on top of options (or the defaults):

        serve("./public")
        serve("./public", index="index.html", maxage=86400)
        serve("./public", StaticOptions.from_env(), hidden=False)
    """
    if options is None:
        options = StaticOptions(**overrides)
    elif overrides:
        options = replace(options, **overrides)
    return StaticGate(root, options)
