"""
=============================================================================
STATICGATE - Static File Middleware With A Safe Path Gate
=============================================================================

Serves files from one root directory as a stage in a middleware pipeline.
The gate decides whether a request is a static-file request, maps the URL
path to a file that is provably inside the root, refuses dot-files, and
either answers or passes the request on.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         STATICGATE                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   request ──► LoggingMiddleware ──► [Mount] ──► StaticGate          │
    │                                                    │                 │
    │                    ┌───────────────────────────────┤                 │
    │                    │               │               │                 │
    │                 HANDLED       FALLTHROUGH       REJECTED             │
    │               200 / 304       next stage       400 decode            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    staticgate/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m staticgate)
    ├── config.py            # StaticOptions, ServerConfig
    ├── errors.py            # Error taxonomy
    ├── server.py            # StaticServer (threaded host)
    ├── static/              # The gate
    │   ├── resolver.py      # Decode, index, containment
    │   ├── hidden.py        # Dot-file filter
    │   ├── delivery.py      # DeliveryAdapter, FileSender
    │   └── gate.py          # StaticGate, serve()
    ├── http/                # Request, response, status, MIME types
    └── middleware/          # Pipeline, Mount, LoggingMiddleware

=============================================================================
QUICK START
=============================================================================

    from staticgate import serve, StaticServer, ServerConfig

    gate = serve("./public", index="index.html", maxage=3600)
    StaticServer(gate, ServerConfig(port=8080)).run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig, StaticOptions
from .errors import (
    ConfigurationError,
    ContainmentError,
    DeliveryError,
    PathDecodeError,
    StaticGateError,
)
from .static import GateResult, Outcome, StaticGate, serve
from .server import StaticServer

__all__ = [
    "serve",
    "StaticGate",
    "GateResult",
    "Outcome",
    "StaticOptions",
    "ServerConfig",
    "StaticServer",
    "StaticGateError",
    "ConfigurationError",
    "PathDecodeError",
    "ContainmentError",
    "DeliveryError",
    "__version__",
]
