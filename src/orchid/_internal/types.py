"""Shared type aliases used across orchid modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: called as handler(request, response)
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives (request, error) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]

# Group body: registers nested routes, takes no arguments
GroupCallback: TypeAlias = Callable[[], Any]
