"""Orchid: a small web micro-framework built around a priority router.

Basic usage::

    from orchid import App, Request

    app = App()

    @app.route("/user/:id")
    def show(request, response):
        return f"user {request.path_params['id']}"

    app.group("/admin", lambda: app.get("/users", list_users))

    response = app.run_sync(Request.from_url("GET", "/user/17"))

Patterns are literal (``/users``), regex (``#^/page/(\\d+)$#``),
wildcard (``/assets/*``) or named (``/user/:id``).
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "EmptyRouteTable",
    "HTTPError",
    "InvalidPattern",
    "InvalidRegexPattern",
    "Middleware",
    "Next",
    "NotFound",
    "OrchidError",
    "Request",
    "Response",
    "Route",
    "RouteGroup",
    "RouteMatch",
    "RouteNotFound",
    "Router",
    "get_request",
    "redirect",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import orchid`` fast while providing a clean top-level API.
    """
    if name == "App":
        from orchid.app import App

        return App

    if name == "AppConfig":
        from orchid.config import AppConfig

        return AppConfig

    if name == "Request":
        from orchid.http.request import Request

        return Request

    if name in ("Response", "redirect"):
        from orchid.http import response as _resp

        return getattr(_resp, name)

    if name in ("Route", "RouteMatch"):
        from orchid.routing import route as _route

        return getattr(_route, name)

    if name == "RouteGroup":
        from orchid.routing.group import RouteGroup

        return RouteGroup

    if name == "Router":
        from orchid.routing.router import Router

        return Router

    if name in ("Middleware", "Next"):
        from orchid.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from orchid.context import get_request

        return get_request

    if name in (
        "ConfigurationError",
        "EmptyRouteTable",
        "HTTPError",
        "InvalidPattern",
        "InvalidRegexPattern",
        "NotFound",
        "OrchidError",
        "RouteNotFound",
    ):
        from orchid import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
