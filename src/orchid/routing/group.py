"""Route groups: a shared pattern prefix and middleware for nested routes."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field

from orchid._internal.types import GroupCallback
from orchid.errors import ConfigurationError
from orchid.middleware.protocol import Middleware


@dataclass(slots=True, eq=False)
class RouteGroup:
    """A prefix scope opened by ``Router.group()``.

    The callback runs once, synchronously, while the group sits on the
    router's active-group stack. Routes registered during that call keep
    a reference to the group, so middleware added to it afterwards still
    applies to them.
    """

    pattern: str
    callback: GroupCallback
    middleware: list[Middleware] = field(default_factory=list)

    def add(self, middleware: Middleware) -> RouteGroup:
        """Append middleware for every route in the group. Chainable."""
        self.middleware.append(middleware)
        return self

    def __call__(self) -> None:
        result = self.callback()
        if inspect.isawaitable(result):
            close = getattr(result, "close", None)
            if close is not None:
                close()
            msg = f"Group callback for {self.pattern!r} must be synchronous."
            raise ConfigurationError(msg)
