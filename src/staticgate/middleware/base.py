"""
=============================================================================
MIDDLEWARE PROTOCOL
=============================================================================

A middleware is anything callable as

    middleware(request, next) -> HTTPResponse

where `next` runs the rest of the pipeline. Returning next(request) lets
the request continue; returning a response of your own ends it there.
The static gate is one such stage, and "continue" is how it says
"not a file of mine".

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ONE PIPELINE                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐     │
    │   │  Logging │───►│  Mount   │───►│  Static  │───►│   404    │     │
    │   │          │    │ /assets  │    │   Gate   │    │ handler  │     │
    │   └────┬─────┘    └────┬─────┘    └────┬─────┘    └──────────┘     │
    │        │               │               │                            │
    │   time + log      strip prefix     file found?                      │
    │   on the way      or skip          ├── yes: respond, stop           │
    │   back out                         └── no:  next(request)           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, Iterator, List, Optional
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The rest of the pipeline, as seen from one stage.
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    One pipeline stage.

        class BlockPrefix(Middleware):
            def __init__(self, prefix):
                self.prefix = prefix

            def __call__(self, request, next):
                if request.path.startswith(self.prefix):
                    return not_found()
                return next(request)

    Stages are shared by every request thread. Keep per-request state in
    locals, never on self.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        pass

    @property
    def name(self) -> str:
        """Label used in debug logs."""
        return type(self).__name__


class MiddlewarePipeline:
    """
    Ordered stages in front of a final handler.

        handler = (MiddlewarePipeline()
            .add(LoggingMiddleware())
            .add(serve("./public"))
            .wrap(lambda request: not_found()))

    The first stage added sees the request first and the response last.
    """

    def __init__(self):
        self._stages: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        self._stages.append(middleware)
        logger.debug(f"Pipeline stage {len(self._stages)}: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        """add() for several stages, in order."""
        for stage in middleware:
            self.add(stage)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Bind every stage to its successor and return the entry point.

        Built from the inside out: the final handler first, then the last
        stage around it, and so on until the first stage is outermost.
        """
        chain = handler
        for stage in reversed(self._stages):
            chain = partial(stage, next=chain)
        return chain

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._stages)


class FunctionMiddleware(Middleware):
    """A plain function used as a stage."""

    def __init__(
        self,
        func: Callable[[HTTPRequest, NextHandler], HTTPResponse],
        name: Optional[str] = None,
    ):
        self._func = func
        self._name = name or func.__name__

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self._func(request, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(
    func: Callable[[HTTPRequest, NextHandler], HTTPResponse]
) -> FunctionMiddleware:
    """
    Decorator form of FunctionMiddleware.

        @function_middleware
        def no_cache(request, next):
            response = next(request)
            response.set_header("Cache-Control", "no-store")
            return response
    """
    return FunctionMiddleware(func)
