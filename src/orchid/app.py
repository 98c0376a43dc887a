"""Orchid application class.

Wires a Router, a middleware pipeline and error handlers together.
Everything is passed in explicitly; there is no process-wide instance.
"""

import logging
from collections.abc import Callable, Iterable

import anyio

from orchid._internal.invoke import chain
from orchid._internal.types import ErrorHandler, GroupCallback, Handler
from orchid.config import AppConfig
from orchid.context import request_var
from orchid.errors import HTTPError
from orchid.http.request import Request
from orchid.http.response import Response
from orchid.middleware.protocol import Middleware, Next
from orchid.routing.group import RouteGroup
from orchid.routing.route import Route
from orchid.routing.router import Router
from orchid.server.errors import handle_http_error, handle_internal_error

logger = logging.getLogger("orchid.app")


class App:
    """The orchid application.

    Routes are registered during bootstrap, then ``handle()`` is called
    once per request::

        app = App(AppConfig(debug=True))

        @app.route("/user/:id")
        def show(request, response):
            return f"user {request.path_params['id']}"

        response = app.run_sync(Request.from_url("GET", "/user/17"))

    The route table is expected to be read-only once requests are being
    served; nothing enforces it.
    """

    __slots__ = ("_error_handlers", "_middleware", "config", "router")

    def __init__(self, config: AppConfig | None = None, router: Router | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = router if router is not None else Router()
        self._middleware: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}

    # -- Route registration --

    def route(
        self,
        pattern: str,
        *,
        methods: Iterable[str] | None = None,
        priority: int = 0,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator. Methods default to GET."""
        return self.router.route(pattern, methods=methods, priority=priority, name=name)

    def map(
        self,
        methods: Iterable[str] | str,
        pattern: str,
        handler: Handler,
        priority: int = 0,
        *,
        name: str | None = None,
    ) -> Route:
        return self.router.map(methods, pattern, handler, priority, name=name)

    def get(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.get(pattern, handler, priority)

    def post(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.post(pattern, handler, priority)

    def put(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.put(pattern, handler, priority)

    def patch(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.patch(pattern, handler, priority)

    def delete(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.delete(pattern, handler, priority)

    def options(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.options(pattern, handler, priority)

    def head(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.head(pattern, handler, priority)

    def any(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.router.any(pattern, handler, priority)

    def redirect(self, from_: str, to: str, status: int | None = None) -> Route:
        """Redirect GET *from_* to *to*, with ``config.redirect_status`` by default."""
        return self.router.redirect(from_, to, status or self.config.redirect_status)

    def group(self, pattern: str, callback: GroupCallback) -> RouteGroup:
        return self.router.group(pattern, callback)

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator."""

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware around every request, matched or not."""
        self._middleware.append(middleware)

    # -- Request handling --

    async def handle(self, request: Request) -> Response:
        """Process a single request through the full pipeline."""
        token = request_var.set(request)
        try:

            async def dispatch(req: Request) -> Response:
                route = self.router.dispatch(req)
                return await route.run(
                    req,
                    Response(content_type=self.config.default_content_type),
                    default_buffering=self.config.output_buffering,
                )

            handler: Next = chain(self._middleware, dispatch)
            response = await handler(request)

        except HTTPError as exc:
            response = await handle_http_error(
                exc, request, self._error_handlers, self.config.debug
            )
        except Exception as exc:
            response = await handle_internal_error(
                exc, request, self._error_handlers, self.config.debug
            )
        finally:
            request_var.reset(token)

        if response.is_empty or request.method == "HEAD":
            response = response.with_body(b"" if isinstance(response.body, bytes) else "")
        logger.debug("%s %s -> %d", request.method, request.path, response.status)
        return response

    def run_sync(self, request: Request) -> Response:
        """Handle *request* from synchronous code.

        ``config.log_level`` is applied to the ``orchid`` logger first.
        """
        logging.getLogger("orchid").setLevel(self.config.log_level.upper())
        return anyio.run(self.handle, request)
