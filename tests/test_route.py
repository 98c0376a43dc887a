"""Tests for orchid.routing.route: Route, RouteMatch, handler execution."""

import sys

import anyio
import pytest

from orchid.errors import InvalidRegexPattern
from orchid.http.request import Request
from orchid.http.response import Response
from orchid.routing.route import Route, RouteMatch, to_response


def _handler(request, response):
    return "ok"


class TestRoute:
    def test_creation(self) -> None:
        route = Route(["get"], "/users", _handler, priority=3, identifier=7)
        assert route.pattern == "/users"
        assert route.handler is _handler
        assert route.methods == frozenset({"GET"})
        assert route.priority == 3
        assert route.identifier == 7
        assert route.groups == ()
        assert route.arguments == {}
        assert route.name is None

    def test_pattern_is_read_only(self) -> None:
        route = Route(["GET"], "/", _handler)
        with pytest.raises(AttributeError):
            route.pattern = "/other"  # type: ignore[misc]

    def test_priority_is_read_only(self) -> None:
        route = Route(["GET"], "/", _handler)
        with pytest.raises(AttributeError):
            route.priority = 5  # type: ignore[misc]

    def test_compiled_forms(self) -> None:
        literal = Route(["GET"], "/users", _handler)
        assert (literal.regex, literal.wildcard, literal.segments) == (None, None, None)

        regex = Route(["GET"], "#^/p/(\\d+)$#", _handler)
        assert regex.regex is not None

        wildcard = Route(["GET"], "/files/*", _handler)
        assert wildcard.wildcard is not None

        named = Route(["GET"], "/user/:id", _handler)
        assert named.segments == ["user", ":id"]

    def test_bad_regex(self) -> None:
        with pytest.raises(InvalidRegexPattern):
            Route(["GET"], "#[#", _handler)

    def test_chainable_setters(self) -> None:
        route = Route(["GET"], "/", _handler)
        assert route.set_arguments({"id": "1"}) is route
        assert route.set_output_buffering("prepend") is route
        assert route.set_name("home") is route
        assert route.arguments == {"id": "1"}
        assert route.output_buffering == "prepend"
        assert route.name == "home"

    def test_unknown_output_buffering(self) -> None:
        route = Route(["GET"], "/", _handler)
        with pytest.raises(ValueError, match="output buffering"):
            route.set_output_buffering("sideways")  # type: ignore[arg-type]

    def test_repr(self) -> None:
        route = Route(["POST", "GET"], "/x", _handler, priority=2, identifier=4)
        assert repr(route) == "<Route #4 GET,POST '/x' priority=2>"


class TestRouteRun:
    @pytest.mark.anyio
    async def test_string_becomes_body(self) -> None:
        route = Route(["GET"], "/", _handler)
        response = await route.run(Request(method="GET", path="/"), Response())
        assert response.text == "ok"
        assert response.status == 200

    @pytest.mark.anyio
    async def test_path_params_from_arguments(self) -> None:
        def show(request, response):
            return f"user {request.path_params['id']}"

        route = Route(["GET"], "/user/:id", show).set_arguments({"id": "17"})
        response = await route.run(Request(method="GET", path="/user/17"), Response())
        assert response.text == "user 17"

    @pytest.mark.anyio
    async def test_async_handler(self) -> None:
        async def handler(request, response):
            return response.with_status(201).with_body("made")

        route = Route(["POST"], "/", handler)
        response = await route.run(Request(method="POST", path="/"), Response())
        assert response.status == 201
        assert response.text == "made"

    @pytest.mark.anyio
    async def test_none_keeps_response(self) -> None:
        route = Route(["GET"], "/", lambda request, response: None)
        base = Response(body="base")
        assert await route.run(Request(method="GET", path="/"), base) is base

    @pytest.mark.anyio
    async def test_middleware_order(self) -> None:
        calls: list[str] = []

        def mw(label: str):
            async def middleware(request, next):
                calls.append(f"{label}:in")
                response = await next(request)
                calls.append(f"{label}:out")
                return response.with_header(f"X-{label}", "1")

            return middleware

        def handler(request, response):
            calls.append("handler")
            return "body"

        route = Route(["GET"], "/", handler).add(mw("a")).add(mw("b"))
        response = await route.call_middleware_stack(Request(method="GET", path="/"), Response())

        assert calls == ["a:in", "b:in", "handler", "b:out", "a:out"]
        assert response.header("X-a") == "1"
        assert response.header("X-b") == "1"

    @pytest.mark.anyio
    async def test_middleware_can_short_circuit(self) -> None:
        async def deny(request, next):
            return Response(body="denied", status=403)

        route = Route(["GET"], "/", _handler).add(deny)
        response = await route.run(Request(method="GET", path="/"), Response())
        assert response.status == 403
        assert response.text == "denied"


class TestOutputBuffering:
    @pytest.mark.anyio
    async def test_append(self) -> None:
        def handler(request, response):
            print("printed", end="")
            return "returned "

        route = Route(["GET"], "/", handler).set_output_buffering("append")
        response = await route.run(Request(method="GET", path="/"), Response())
        assert response.text == "returned printed"

    @pytest.mark.anyio
    async def test_prepend(self) -> None:
        def handler(request, response):
            print("printed ", end="")
            return "returned"

        route = Route(["GET"], "/", handler).set_output_buffering("prepend")
        response = await route.run(Request(method="GET", path="/"), Response())
        assert response.text == "printed returned"

    @pytest.mark.anyio
    async def test_disabled(self, capsys: pytest.CaptureFixture[str]) -> None:
        def handler(request, response):
            print("to stdout")
            return "returned"

        route = Route(["GET"], "/", handler).set_output_buffering(False)
        response = await route.run(Request(method="GET", path="/"), Response())
        assert response.text == "returned"
        assert capsys.readouterr().out == "to stdout\n"

    @pytest.mark.anyio
    async def test_bytes_body(self) -> None:
        def handler(request, response):
            print("!", end="")
            return b"data"

        route = Route(["GET"], "/", handler).set_output_buffering("append")
        response = await route.run(Request(method="GET", path="/"), Response())
        assert response.body == b"data!"

    @pytest.mark.anyio
    async def test_default_buffering_applies_when_unset(self) -> None:
        def handler(request, response):
            print("!", end="")
            return "hi"

        route = Route(["GET"], "/", handler)
        request = Request(method="GET", path="/")
        assert (await route.run(request, Response(), default_buffering="prepend")).text == "!hi"
        assert route.output_buffering is None

        route.set_output_buffering(False)
        assert (await route.run(request, Response(), default_buffering="append")).text == "hi"

    @pytest.mark.anyio
    async def test_overlapping_handlers_keep_their_own_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        async def fast(request, response):
            print("fast", end="")
            await anyio.sleep(0.01)
            print("+", end="")
            return ""

        async def slow(request, response):
            print("slow", end="")
            await anyio.sleep(0.05)
            print("!", end="")
            return ""

        request = Request(method="GET", path="/")
        fast_route = Route(["GET"], "/", fast).set_output_buffering("append")
        slow_route = Route(["GET"], "/", slow).set_output_buffering("append")
        await fast_route.run(request, Response())
        stdout = sys.stdout
        bodies: dict[str, str] = {}

        async def run(name: str, route: Route) -> None:
            bodies[name] = (await route.run(request, Response())).text

        async with anyio.create_task_group() as tg:
            tg.start_soon(run, "fast", fast_route)
            await anyio.sleep(0)
            tg.start_soon(run, "slow", slow_route)

        assert bodies == {"fast": "fast+", "slow": "slow!"}
        assert sys.stdout is stdout
        print("after")
        assert capsys.readouterr().out == "after\n"


class TestToResponse:
    def test_conversions(self) -> None:
        base = Response()
        assert to_response(None, base) is base
        assert to_response("x", base).text == "x"
        assert to_response(b"x", base).body == b"x"
        other = Response(status=204)
        assert to_response(other, base) is other

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError, match="int"):
            to_response(42, Response())


class TestRouteMatch:
    def test_found(self) -> None:
        route = Route(["GET"], "/users/:id", _handler)
        match = RouteMatch(route=route, params={"id": "42"})
        assert match.route is route
        assert match.params == {"id": "42"}
        assert match

    def test_not_found(self) -> None:
        match = RouteMatch(route=None)
        assert not match
        assert match.found is False

    def test_frozen(self) -> None:
        match = RouteMatch(route=None)
        with pytest.raises(AttributeError):
            match.route = None  # type: ignore[misc]
