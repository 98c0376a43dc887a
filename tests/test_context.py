"""Tests for orchid.context: request-scoped ContextVar."""

import pytest

from orchid.context import get_request, request_var
from orchid.http.request import Request


class TestRequestVar:
    def test_get_request_raises_outside_context(self) -> None:
        """get_request raises LookupError when no request is active."""
        with pytest.raises(LookupError):
            get_request()

    def test_set_and_get_request(self) -> None:
        request = Request.from_url("GET", "/test")
        token = request_var.set(request)
        try:
            assert get_request() is request
            assert get_request().path == "/test"
        finally:
            request_var.reset(token)

        with pytest.raises(LookupError):
            get_request()
