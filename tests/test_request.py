"""Tests for orchid.http.request: frozen Request."""

import pytest

from orchid.http.request import Request


class TestRequest:
    def test_method_uppercased(self) -> None:
        assert Request(method="post", path="/").method == "POST"

    def test_headers_lowercased(self) -> None:
        req = Request(method="GET", path="/", headers={"X-Requested-With": "XMLHttpRequest"})
        assert req.headers == {"x-requested-with": "XMLHttpRequest"}
        assert req.header("X-REQUESTED-WITH") == "XMLHttpRequest"
        assert req.header("missing", "default") == "default"

    def test_segments(self) -> None:
        req = Request(method="GET", path="/users/17/edit/")
        assert req.segments == ["users", "17", "edit"]

    def test_root_has_no_segments(self) -> None:
        assert Request(method="GET", path="/").segments == []

    def test_frozen(self) -> None:
        req = Request(method="GET", path="/")
        with pytest.raises(AttributeError):
            req.path = "/other"  # type: ignore[misc]

    def test_with_path_params(self) -> None:
        req = Request(method="GET", path="/user/1")
        bound = req.with_path_params({"id": "1"})
        assert bound.path_params == {"id": "1"}
        assert req.path_params == {}
        assert bound.path == req.path


class TestFromURL:
    def test_path_and_query(self) -> None:
        req = Request.from_url("get", "/search?q=orchid&tag=a&tag=b")
        assert req.method == "GET"
        assert req.path == "/search"
        assert req.query == {"q": ["orchid"], "tag": ["a", "b"]}
        assert req.param("q") == "orchid"
        assert req.param("tag") == "a"
        assert req.param("missing") is None

    def test_absolute_url(self) -> None:
        req = Request.from_url("GET", "https://example.com:8443/a/b")
        assert req.path == "/a/b"
        assert req.is_secure

    def test_path_is_percent_decoded(self) -> None:
        req = Request.from_url("GET", "/files/my%20doc.txt")
        assert req.path == "/files/my doc.txt"

    def test_leading_slash_added(self) -> None:
        assert Request.from_url("GET", "").path == "/"

    def test_blank_query_values_kept(self) -> None:
        req = Request.from_url("GET", "/?flag=")
        assert req.query == {"flag": [""]}

    def test_url_round_trip(self) -> None:
        req = Request.from_url("GET", "/search?q=x")
        assert req.url == "/search?q=x"
        assert Request(method="GET", path="/plain").url == "/plain"

    def test_url_reencodes_reserved_characters(self) -> None:
        req = Request.from_url("GET", "/my%20files/s?q=a%26b&eq=x%3Dy&text=hello+world&q=2")
        assert req.query == {"q": ["a&b", "2"], "eq": ["x=y"], "text": ["hello world"]}

        again = Request.from_url("GET", req.url)
        assert again.path == "/my files/s"
        assert again.query == req.query


class TestClientInfo:
    def test_is_ajax_header(self) -> None:
        req = Request(method="GET", path="/", headers={"X-Requested-With": "XMLHttpRequest"})
        assert req.is_ajax

    def test_is_ajax_json(self) -> None:
        req = Request(method="POST", path="/", headers={"Content-Type": "application/json"})
        assert req.is_ajax
        assert req.content_type == "application/json"

    def test_not_ajax(self) -> None:
        assert not Request(method="GET", path="/").is_ajax

    def test_client_ip_prefers_forwarded(self) -> None:
        req = Request(
            method="GET",
            path="/",
            headers={"X-Forwarded-For": "10.0.0.1", "Client-IP": "10.0.0.2"},
            remote_addr="127.0.0.1",
        )
        assert req.client_ip == "10.0.0.1"

    def test_client_ip_fallbacks(self) -> None:
        req = Request(method="GET", path="/", headers={"Client-IP": "10.0.0.2"})
        assert req.client_ip == "10.0.0.2"
        assert Request(method="GET", path="/", remote_addr="127.0.0.1").client_ip == "127.0.0.1"
        assert Request(method="GET", path="/").client_ip is None


class TestPreferredLanguage:
    def test_highest_q_available(self) -> None:
        req = Request(
            method="GET", path="/", headers={"Accept-Language": "ru;q=0.5, en-US, de;q=0.8"}
        )
        assert req.preferred_language(["de", "ru"]) == "de"
        assert req.preferred_language(["en-us", "ru"]) == "en-us"

    def test_default_when_nothing_available(self) -> None:
        req = Request(method="GET", path="/", headers={"Accept-Language": "fr"})
        assert req.preferred_language(["en"], default="ru") == "ru"

    def test_missing_header(self) -> None:
        assert Request(method="GET", path="/").preferred_language(["en"]) == "en"
