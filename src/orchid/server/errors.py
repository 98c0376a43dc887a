"""Turning failures into responses.

``App.handle`` routes every exception that escapes the pipeline through
here. Registered handlers are found by exception type, status code or
exception base class; anything unhandled gets a plain-text default.
"""

import inspect
import logging
import traceback
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from orchid._internal.invoke import invoke
from orchid.errors import HTTPError
from orchid.http.request import Request
from orchid.http.response import Response
from orchid.routing.route import to_response

logger = logging.getLogger("orchid.server")

ErrorHandlers: TypeAlias = Mapping[int | type, Callable[..., Any]]

_PLAIN_TEXT = "text/plain; charset=utf-8"


def find_error_handler(
    handlers: ErrorHandlers, exc: Exception, status: int
) -> Callable[..., Any] | None:
    """Exact exception type first, then *status*, then the exception's bases."""
    for key in (type(exc), status, *type(exc).__mro__[1:]):
        if key in handlers:
            return handlers[key]
    return None


async def run_error_handler(
    handler: Callable[..., Any], request: Request, exc: Exception, status: int
) -> Response:
    """Call *handler* with as many of (request, exc) as it accepts.

    A handler that leaves the status at 200 gets *status* applied.
    """
    arity = len(inspect.signature(handler).parameters)
    args = (request, exc)[:arity]
    response = to_response(await invoke(handler, *args), Response())
    return response if response.status != 200 else response.with_status(status)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Build the response for an ``HTTPError`` raised during the request."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = find_error_handler(error_handlers, exc, exc.status)
    if handler is not None:
        return await run_error_handler(handler, request, exc, exc.status)

    if not exc.detail:
        body = f"Error {exc.status}"
    elif debug:
        body = str(exc)
    else:
        body = exc.detail
    return Response(body=body, status=exc.status, content_type=_PLAIN_TEXT).with_headers(
        dict(exc.headers)
    )


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Log an unexpected exception and answer with a 500."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = find_error_handler(error_handlers, exc, 500)
    if handler is not None:
        return await run_error_handler(handler, request, exc, 500)

    body = "".join(traceback.format_exception(exc)) if debug else "Internal Server Error"
    return Response(body=body, status=500, content_type=_PLAIN_TEXT)
