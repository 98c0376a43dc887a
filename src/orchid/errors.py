"""Orchid exception hierarchy.

Shared across Router, App, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class OrchidError(Exception):
    """Base for all orchid-specific errors."""


class ConfigurationError(OrchidError):
    """Raised when routes or the app are set up incorrectly.

    Registration happens at startup, so these surface before the
    first request is served.
    """


class InvalidPattern(ConfigurationError, TypeError):
    """A route pattern was not a string."""

    def __init__(self, pattern: object) -> None:
        self.pattern = pattern
        super().__init__(f"Route pattern must be a string, got {type(pattern).__name__}")


class InvalidRegexPattern(ConfigurationError):
    """A ``#...#`` route pattern does not compile as a regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid regex route pattern {pattern!r}: {reason}")


class EmptyRouteTable(OrchidError, RuntimeError):
    """Dispatch was attempted on a router with no registered routes."""

    def __init__(self) -> None:
        super().__init__("Route list is empty")


@dataclass(frozen=True, slots=True)
class HTTPError(OrchidError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. ``App.handle``
    catches these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing to serve for the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class RouteNotFound(NotFound):  # noqa: N818
    """404: no route matched the request method and path."""

    method: str
    path: str

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"No route matches {method} {path!r}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", path)
