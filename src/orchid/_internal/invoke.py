"""Invoke helpers: call sync or async handlers uniformly.

Orchid handlers and middleware can be ``def`` or ``async def``. Any code
that calls a user-provided callable must handle both cases. This module
keeps the sync/async check in exactly one place.

Usage::

    from orchid._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
import io
import sys
from collections.abc import Awaitable, Callable, Iterable
from contextvars import ContextVar
from typing import Any

_capture_buffer: ContextVar[io.StringIO | None] = ContextVar(
    "orchid_capture_buffer", default=None
)


class _TaskLocalStdout:
    """Stands in for ``sys.stdout`` while captures may be active.

    Writes go to the capture buffer of the current task, or to the
    wrapped stream when that task is not capturing.
    """

    def __init__(self, stream: Any) -> None:
        self._stream = stream

    def write(self, text: str) -> int:
        buffer = _capture_buffer.get()
        if buffer is not None:
            return buffer.write(text)
        if self._stream is None:
            return len(text)
        return self._stream.write(text)

    def flush(self) -> None:
        if _capture_buffer.get() is None and self._stream is not None:
            self._stream.flush()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


def _install_stdout_proxy() -> None:
    # Installed once per stream; replaced again if someone rebinds sys.stdout
    if not isinstance(sys.stdout, _TaskLocalStdout):
        sys.stdout = _TaskLocalStdout(sys.stdout)


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


async def invoke_captured(handler: Any, *args: Any, **kwargs: Any) -> tuple[Any, str]:
    """Like :func:`invoke`, also returning whatever the handler printed.

    The buffer is bound to the running task through a ContextVar, so
    handlers that await while others print keep their output apart.
    """
    _install_stdout_proxy()
    buffer = io.StringIO()
    token = _capture_buffer.set(buffer)
    try:
        result = await invoke(handler, *args, **kwargs)
    finally:
        _capture_buffer.reset(token)
    return result, buffer.getvalue()


def chain(middleware: Iterable[Any], endpoint: Callable[[Any], Awaitable[Any]]) -> Any:
    """Wrap *endpoint* in *middleware*, first item outermost.

    Each middleware is called as ``mw(request, next)``.
    """
    handler = endpoint
    for mw in reversed(list(middleware)):
        handler = _link(mw, handler)
    return handler


def _link(
    mw: Any, next_handler: Callable[[Any], Awaitable[Any]]
) -> Callable[[Any], Awaitable[Any]]:
    async def call(request: Any) -> Any:
        return await invoke(mw, request, next_handler)

    return call
