"""Priority-ordered router.

Routes are registered during a bootstrap phase and then scanned in
priority order on every dispatch. There is no specificity scoring: the
first route whose methods and pattern accept the request wins, so a
``/a/:id`` route registered before ``/a/b`` (at equal priority) shadows
it. Raise the priority of the literal route to make it win.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from contextvars import ContextVar
from typing import Any
from urllib.parse import quote

from orchid._internal.types import GroupCallback, Handler
from orchid.errors import ConfigurationError, EmptyRouteTable, InvalidPattern, RouteNotFound
from orchid.http.request import Request
from orchid.http.response import Response
from orchid.routing.group import RouteGroup
from orchid.routing.patterns import (
    ARG_KEY,
    CAPTURE_KEY,
    match_named,
    match_regex,
    match_wildcard,
)
from orchid.routing.route import Route, RouteMatch

logger = logging.getLogger("orchid.routing")

# According to RFC 7231 methods are case-sensitive and defined in uppercase
METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD")


def match_route(route: Route, path: str) -> dict[str, Any] | None:
    """Try the four strategies on one route, in fixed order.

    Returns the extracted parameters (possibly empty) or ``None``.
    *path* must already be normalised to a single leading ``/``.
    """
    if route.pattern == path:
        return {}

    if route.regex is not None:
        captures = match_regex(route.regex, path)
        if captures is not None:
            return {CAPTURE_KEY: captures}

    if route.wildcard is not None:
        args = match_wildcard(route.wildcard, path)
        if args is not None:
            return {ARG_KEY: args}

    if route.segments is not None:
        params = match_named(route.segments, path)
        if params is not None:
            return params

    return None


class Router:
    """Route table with group prefixes and priority-ordered dispatch.

    Usage::

        router = Router()
        router.get("/users/:id", show_user)
        router.group("/admin", lambda: router.get("/users", list_users))

        route = router.dispatch(request)
        response = await route.run(request, Response())

    The active-group stack lives in a ``ContextVar``, so groups opened in
    one thread or task are invisible to registrations running elsewhere.
    """

    __slots__ = ("_active_groups", "_route_counter", "_routes", "_sorted")

    def __init__(self) -> None:
        self._routes: dict[int, Route] = {}
        self._route_counter = 0
        self._sorted: list[Route] | None = None
        self._active_groups: ContextVar[tuple[RouteGroup, ...]] = ContextVar(
            f"orchid_route_groups_{id(self):x}", default=()
        )

    # -- Registration --

    def map(
        self,
        methods: Iterable[str] | str,
        pattern: str,
        handler: Handler,
        priority: int = 0,
        *,
        name: str | None = None,
    ) -> Route:
        """Register *handler* for *methods* on *pattern* and return the Route.

        The pattern is prefixed with the patterns of all active groups,
        outermost first. Methods are normalised to uppercase.
        """
        if not isinstance(pattern, str):
            raise InvalidPattern(pattern)

        if isinstance(methods, str):
            methods = [methods]
        methods = [m.upper() for m in methods]
        if not methods:
            msg = f"Route {pattern!r} must accept at least one HTTP method."
            raise ConfigurationError(msg)

        groups = self._active_groups.get()
        if groups:
            pattern = "".join(g.pattern for g in groups) + pattern

        route = Route(methods, pattern, handler, priority, groups, self._route_counter, name=name)
        self._routes[route.identifier] = route
        self._route_counter += 1
        self._sorted = None

        logger.debug("Registered %r", route)
        return route

    def get(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["GET"], pattern, handler, priority)

    def post(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["POST"], pattern, handler, priority)

    def put(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["PUT"], pattern, handler, priority)

    def patch(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["PATCH"], pattern, handler, priority)

    def delete(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["DELETE"], pattern, handler, priority)

    def options(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["OPTIONS"], pattern, handler, priority)

    def head(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        return self.map(["HEAD"], pattern, handler, priority)

    def any(self, pattern: str, handler: Handler, priority: int = 0) -> Route:
        """Register *handler* for all seven standard methods."""
        return self.map(METHODS, pattern, handler, priority)

    def route(
        self,
        pattern: str,
        *,
        methods: Iterable[str] | None = None,
        priority: int = 0,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator. Methods default to GET."""

        def decorator(func: Handler) -> Handler:
            self.map(methods or ["GET"], pattern, func, priority, name=name)
            return func

        return decorator

    def redirect(self, from_: str, to: str, status: int = 302) -> Route:
        """Register a GET route on *from_* that always redirects to *to*."""
        location = str(to)

        def handler(request: Request, response: Response) -> Response:
            return response.with_header("Location", location).with_status(status)

        return self.get(from_, handler)

    def group(self, pattern: str, callback: GroupCallback) -> RouteGroup:
        """Run *callback* with *pattern* prepended to every route it maps.

        Groups nest; the stack is restored even if the callback raises.
        """
        group = RouteGroup(pattern, callback)
        token = self._active_groups.set((*self._active_groups.get(), group))
        try:
            group()
        finally:
            self._active_groups.reset(token)
        return group

    # -- Introspection --

    @property
    def routes(self) -> dict[int, Route]:
        """All routes keyed by identifier."""
        return dict(self._routes)

    def get_routes(self) -> dict[int, Route]:
        return self.routes

    def sorted_routes(self) -> list[Route]:
        """Routes in scan order: priority descending, then registration order."""
        if self._sorted is None:
            self._sorted = sorted(
                self._routes.values(), key=lambda r: (-r.priority, r.identifier)
            )
        return list(self._sorted)

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self.sorted_routes())

    def lookup(self, name: str) -> Route | None:
        """Return the first route registered under *name*, if any."""
        for route in self._routes.values():
            if route.name == name:
                return route
        return None

    def url_for(self, name: str, **params: Any) -> str:
        """Build a path for the named route from its ``:name`` segments.

        Raises ``LookupError`` for an unknown name, ``KeyError`` for a
        missing parameter and ``ConfigurationError`` for regex or
        wildcard patterns, which cannot be reversed.
        """
        route = self.lookup(name)
        if route is None:
            msg = f"No route named {name!r}"
            raise LookupError(msg)
        if route.regex is not None or route.wildcard is not None:
            msg = f"Cannot build a URL for {route.pattern!r}"
            raise ConfigurationError(msg)
        if route.segments is None:
            return route.pattern

        head = route.pattern.split("/", 1)[0]
        parts = [
            quote(str(params[seg[1:]]), safe="") if seg.startswith(":") else seg
            for seg in route.segments
        ]
        return "/".join([head, *parts])

    # -- Dispatch --

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the first route accepting *method* and *path*.

        Returns a falsy ``RouteMatch`` when nothing matches.
        Raises ``EmptyRouteTable`` if no routes are registered.
        """
        if not self._routes:
            raise EmptyRouteTable()

        method = method.upper()
        pathname = "/" + path.lstrip("/")

        for route in self.sorted_routes():
            if method not in route.methods:
                continue
            params = match_route(route, pathname)
            if params is not None:
                return RouteMatch(route=route, params=params)

        return RouteMatch(route=None)

    def dispatch(self, request: Request) -> Route:
        """Match *request* and bind the extracted parameters to the route.

        Raises ``EmptyRouteTable`` if no routes are registered and
        ``RouteNotFound`` if none of them accepts the request.
        """
        result = self.match(request.method, request.path)
        if result.route is None:
            logger.debug("No route for %s %s", request.method, request.path)
            raise RouteNotFound(request.method, "/" + request.path.lstrip("/"))

        logger.debug("%s %s -> %r %s", request.method, request.path, result.route, result.params)
        return result.route.set_arguments(result.params)
