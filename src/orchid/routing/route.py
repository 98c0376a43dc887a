"""Route and RouteMatch."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from orchid._internal.invoke import chain, invoke, invoke_captured
from orchid._internal.types import Handler
from orchid.config import OutputBuffering
from orchid.http.request import Request
from orchid.http.response import Response
from orchid.middleware.protocol import Middleware, Next
from orchid.routing.patterns import (
    compile_regex,
    compile_wildcard,
    is_named,
    is_regex,
    is_wildcard,
    split_segments,
)

if TYPE_CHECKING:
    from orchid.routing.group import RouteGroup


class Route:
    """A single registered rule: methods, pattern, handler, priority.

    Created by ``Router.map()``. The pattern, methods, priority and
    identifier are fixed at construction; ``arguments``, middleware and
    the output-buffering mode may be changed before dispatch.

    The compiled forms of the pattern (``regex``, ``wildcard``,
    ``segments``) are ``None`` when the pattern does not take that form.
    """

    __slots__ = (
        "_identifier",
        "_methods",
        "_pattern",
        "_priority",
        "arguments",
        "groups",
        "handler",
        "middleware",
        "name",
        "output_buffering",
        "regex",
        "segments",
        "wildcard",
    )

    def __init__(
        self,
        methods: Iterable[str],
        pattern: str,
        handler: Handler,
        priority: int = 0,
        groups: Iterable[RouteGroup] = (),
        identifier: int = 0,
        *,
        name: str | None = None,
    ) -> None:
        self._methods = frozenset(m.upper() for m in methods)
        self._pattern = pattern
        self._priority = priority
        self._identifier = identifier
        self.handler = handler
        self.groups: tuple[RouteGroup, ...] = tuple(groups)
        self.name = name
        self.arguments: dict[str, Any] = {}
        self.middleware: list[Middleware] = []
        self.output_buffering: OutputBuffering | None = None

        self.regex: re.Pattern[str] | None = compile_regex(pattern) if is_regex(pattern) else None
        self.wildcard: re.Pattern[str] | None = (
            compile_wildcard(pattern) if is_wildcard(pattern) else None
        )
        self.segments: list[str] | None = split_segments(pattern) if is_named(pattern) else None

    def __repr__(self) -> str:
        methods = ",".join(sorted(self._methods))
        return f"<Route #{self._identifier} {methods} {self._pattern!r} priority={self._priority}>"

    # -- Fixed attributes --

    @property
    def methods(self) -> frozenset[str]:
        return self._methods

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def identifier(self) -> int:
        return self._identifier

    # -- Chainable configuration --

    def set_arguments(self, arguments: dict[str, Any]) -> Route:
        self.arguments = dict(arguments)
        return self

    def set_output_buffering(self, mode: OutputBuffering | None) -> Route:
        """Choose where printed handler output goes: "append", "prepend" or False.

        ``None`` leaves the choice to the app configuration.
        """
        if mode not in ("append", "prepend", False, None):
            msg = f"Unknown output buffering mode: {mode!r}"
            raise ValueError(msg)
        self.output_buffering = mode
        return self

    def set_name(self, name: str) -> Route:
        self.name = name
        return self

    def add(self, middleware: Middleware) -> Route:
        """Append route-level middleware. Chainable."""
        self.middleware.append(middleware)
        return self

    # -- Execution --

    @property
    def middleware_stack(self) -> list[Middleware]:
        """Group middleware (outermost group first), then route middleware."""
        stack: list[Middleware] = []
        for group in self.groups:
            stack.extend(group.middleware)
        stack.extend(self.middleware)
        return stack

    async def run(
        self,
        request: Request,
        response: Response,
        *,
        default_buffering: OutputBuffering = False,
    ) -> Response:
        """Run the middleware stack around the handler.

        The handler is called as ``handler(request, response)`` with the
        bound ``arguments`` available as ``request.path_params``. When the
        route has no output-buffering mode of its own, *default_buffering*
        applies to this call only.
        """
        request = request.with_path_params(self.arguments)
        mode = self.output_buffering if self.output_buffering is not None else default_buffering

        async def endpoint(req: Request) -> Response:
            return await self._call_handler(req, response, mode)

        handler: Next = chain(self.middleware_stack, endpoint)
        return await handler(request)

    call_middleware_stack = run

    async def _call_handler(
        self, request: Request, response: Response, mode: OutputBuffering
    ) -> Response:
        if not mode:
            result = await invoke(self.handler, request, response)
            return to_response(result, response)

        result, printed = await invoke_captured(self.handler, request, response)
        response = to_response(result, response)
        if not printed:
            return response
        if mode == "prepend":
            return response.with_body(_join(printed, response.body))
        return response.with_body(_join(response.body, printed))


def _join(first: str | bytes, second: str | bytes) -> str | bytes:
    if isinstance(first, bytes) or isinstance(second, bytes):
        a = first.encode("utf-8") if isinstance(first, str) else first
        b = second.encode("utf-8") if isinstance(second, str) else second
        return a + b
    return first + second


def to_response(result: Any, response: Response) -> Response:
    """Turn a handler's return value into a Response.

    ``None`` keeps the response passed in, strings and bytes become its
    body, a ``Response`` is used as is.
    """
    if result is None:
        return response
    if isinstance(result, Response):
        return result
    if isinstance(result, (str, bytes)):
        return response.with_body(result)
    msg = f"Handler returned unsupported type {type(result).__name__}"
    raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of ``Router.match()``.

    Falsy when no route matched, so callers can write::

        result = router.match("GET", "/users/17")
        if not result:
            return not_found_page()
    """

    route: Route | None
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.route is not None

    def __bool__(self) -> bool:
        return self.found
