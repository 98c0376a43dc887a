"""The shape every orchid middleware has.

Middleware is called as ``mw(request, next)`` and returns a Response,
either its own or whatever ``await next(request)`` produced. It can be
attached at three levels, outermost first:

    app.add_middleware(mw)     every request, matched or not
    group.add(mw)              every route registered inside the group
    route.add(mw)              a single route

Plain ``def`` middleware works too; the pipeline awaits only when needed.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from orchid.http.request import Request
from orchid.http.response import Response

Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Anything callable as ``mw(request, next)``.

    ::

        async def require_ajax(request: Request, next: Next) -> Response:
            if not request.is_ajax:
                return Response(body="AJAX only", status=400)
            return await next(request)

        class Language:
            def __init__(self, available: list[str]) -> None:
                self.available = available

            async def __call__(self, request: Request, next: Next) -> Response:
                response = await next(request)
                lang = request.preferred_language(self.available)
                return response.with_header("Content-Language", lang)
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
