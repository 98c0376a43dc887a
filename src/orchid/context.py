"""Request-scoped context via ContextVar.

``App.handle`` sets the current request before running the pipeline and
resets it afterwards, so code deep inside a handler can reach it without
threading it through every call.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local otherwise.
    No locks needed.
"""

from contextvars import ContextVar

from orchid.http.request import Request

request_var: ContextVar[Request] = ContextVar("orchid_request")
"""The current request. Set by ``App.handle`` before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
