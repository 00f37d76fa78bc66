"""
=============================================================================
STATIC SERVER
=============================================================================

A small runnable host for the middleware pipeline, built on the standard
library's ThreadingHTTPServer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST JOURNEY                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   socket ──► ThreadingHTTPServer (one thread per connection)        │
    │                 │                                                    │
    │                 ▼                                                    │
    │           _RequestHandler: request line + headers → HTTPRequest      │
    │                 │                                                    │
    │                 ▼                                                    │
    │           StaticServer.handle(request)                               │
    │                 │                                                    │
    │                 ▼                                                    │
    │           LoggingMiddleware → [Mount] → StaticGate → 404 handler     │
    │                 │                                                    │
    │                 ▼                                                    │
    │           HTTPResponse → status line, headers, body → socket         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Threads share exactly one thing: the pipeline, whose gate is immutable.

=============================================================================
"""

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Iterable, Optional

from .config import ServerConfig
from .errors import StaticGateError
from .http.request import HTTPRequest
from .http.response import HTTPResponse, internal_error, not_found
from .http.status_codes import HTTPStatus
from .middleware.base import Middleware, MiddlewarePipeline
from .middleware.logging import LoggingMiddleware
from .middleware.mount import Mount


logger = logging.getLogger(__name__)


def _not_found_handler(request: HTTPRequest) -> HTTPResponse:
    """End of the pipeline: every stage fell through."""
    return not_found()


class StaticServer:
    """
    Threaded HTTP server running a static gate.

    Usage:
        gate = serve("./public", index="index.html")
        server = StaticServer(gate, ServerConfig(port=8080))
        server.run()                     # blocks until Ctrl+C
    """

    def __init__(
        self,
        gate: Middleware,
        config: Optional[ServerConfig] = None,
        middleware: Iterable[Middleware] = (),
    ):
        """
        Args:
            gate: The static gate (or any middleware) to serve.
            config: Host settings; defaults to ServerConfig().
            middleware: Extra middleware placed between logging and the gate.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._pipeline = MiddlewarePipeline()
        self._pipeline.add(LoggingMiddleware(log_format=self.config.log_format))
        self._pipeline.use(*middleware)
        self._pipeline.add(Mount(self.config.mount, gate) if self.config.mount else gate)

        self._handler = self._pipeline.wrap(_not_found_handler)
        self._httpd: Optional[ThreadingHTTPServer] = None

    @property
    def address(self) -> tuple[str, int]:
        """(host, port) actually bound; port is real even when config asked for 0."""
        if self._httpd is None:
            return self.config.host, self.config.port
        host, port = self._httpd.server_address[:2]
        return host, port

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run one request through the pipeline.

        Exceptions never leave this method: a typed gate error becomes its
        status code, anything else a generic 500.
        """
        try:
            return self._handler(request)
        except StaticGateError as e:
            logger.error(f"{request.method} {request.path}: {e}")
            if e.status_code == HTTPStatus.NOT_FOUND:
                return not_found()
            return internal_error()
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return internal_error()

    def bind(self) -> tuple[str, int]:
        """Create the listening socket without serving yet."""
        self._httpd = ThreadingHTTPServer(
            (self.config.host, self.config.port),
            _make_request_handler(self),
        )
        self._httpd.daemon_threads = True
        return self.address

    def serve_forever(self) -> None:
        if self._httpd is None:
            self.bind()
        self._httpd.serve_forever()

    def run(self) -> None:
        """Start the server (blocking)."""
        self._setup_logging()
        host, port = self.bind()
        logger.info(f"Serving on http://{host}:{port}{self.config.mount or '/'}")

        try:
            self.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self) -> None:
        """Stop serve_forever() from another thread."""
        if self._httpd is not None:
            self._httpd.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("staticgate").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        if self._httpd is not None:
            self._httpd.server_close()
            self._httpd = None
        logger.info("Server stopped")


def _make_request_handler(app: StaticServer) -> type:
    """Build a BaseHTTPRequestHandler subclass bound to one StaticServer."""

    class _RequestHandler(BaseHTTPRequestHandler):
        protocol_version = "HTTP/1.1"
        server_version = app.config.server_name

        def _dispatch(self) -> None:
            headers: dict[str, str] = {}
            for name, value in self.headers.items():
                name = name.lower()
                headers[name] = f"{headers[name]}, {value}" if name in headers else value

            # Drain any body so the next request on this connection parses.
            try:
                length = int(headers.get("content-length", 0) or 0)
            except ValueError:
                length = 0
            if length > 0:
                self.rfile.read(length)

            request = HTTPRequest.from_target(
                method=self.command,
                target=self.path,
                headers=headers,
                version=self.request_version,
                client_address=self.client_address[:2],
            )
            self._write(app.handle(request))

        def _write(self, response: HTTPResponse) -> None:
            self.send_response(int(response.status), response.status.phrase)
            for name, value in response.headers.items():
                self.send_header(name, value)
            if "Content-Length" not in response.headers:
                self.send_header("Content-Length", str(len(response.body)))
            self.end_headers()
            if self.command != "HEAD" and response.body:
                self.wfile.write(response.body)

        do_GET = _dispatch
        do_HEAD = _dispatch
        do_POST = _dispatch
        do_PUT = _dispatch
        do_DELETE = _dispatch
        do_PATCH = _dispatch
        do_OPTIONS = _dispatch

        def log_message(self, format: str, *args) -> None:
            # Access lines come from LoggingMiddleware; keep stdlib chatter at DEBUG.
            logger.debug(format % args)

    return _RequestHandler


