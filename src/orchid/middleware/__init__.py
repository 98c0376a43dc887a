"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

It can be attached to the whole app, to a route group or to one route.
"""

from orchid.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "Next"]
