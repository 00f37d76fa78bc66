"""
=============================================================================
MIDDLEWARE
=============================================================================

The pipeline the static gate plugs into, plus the two host-side
middleware shipped with it:

    base.py       Middleware, MiddlewarePipeline, NextHandler
    mount.py      Mount: serve a middleware under a URL prefix
    logging.py    LoggingMiddleware: one access line per request

The gate itself (staticgate.static.StaticGate) is just another
Middleware: it answers or calls next().

=============================================================================
"""

from .base import (
    Middleware,
    MiddlewarePipeline,
    NextHandler,
    FunctionMiddleware,
    function_middleware,
)
from .logging import LoggingMiddleware
from .mount import Mount

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "FunctionMiddleware",
    "function_middleware",
    "LoggingMiddleware",
    "Mount",
]
