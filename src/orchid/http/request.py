"""Immutable HTTP request.

Frozen metadata about a received request. The router only needs the
method, the path and its ``/``-delimited segments; the rest is here for
handlers and middleware.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

_LANGUAGE_RE = re.compile(r"([a-z]{1,8}(?:-[a-z]{1,8})?)(?:;q=([0-9.]+))?")


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Header names are stored lower-cased. ``query`` maps each key to the
    list of values it was given. ``path_params`` holds whatever the
    router extracted for the matched route.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, list[str]] = field(default_factory=dict)
    path_params: Mapping[str, Any] = field(default_factory=dict)
    remote_addr: str | None = None
    scheme: str = "http"

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(
            self, "headers", {k.lower(): v for k, v in self.headers.items()}
        )

    # -- Computed properties --

    @property
    def segments(self) -> list[str]:
        """Non-empty ``/``-delimited parts of the path."""
        return [part for part in self.path.split("/") if part]

    @property
    def url(self) -> str:
        """Percent-encoded path plus the query string, as ``from_url`` accepts it."""
        path = quote(self.path, safe="/")
        if not self.query:
            return path
        return f"{path}?{urlencode(self.query, doseq=True)}"

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def is_ajax(self) -> bool:
        """True for XMLHttpRequest or JSON requests."""
        if self.headers.get("x-requested-with") == "XMLHttpRequest":
            return True
        return "application/json" in (self.content_type or "").lower()

    @property
    def is_secure(self) -> bool:
        return self.scheme == "https"

    @property
    def client_ip(self) -> str | None:
        """Client address, preferring proxy headers over the socket peer."""
        for name in ("x-forwarded-for", "client-ip"):
            value = self.headers.get(name)
            if value:
                return value
        return self.remote_addr

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def param(self, name: str, default: str | None = None) -> str | None:
        """First query-string value for *name*."""
        values = self.query.get(name)
        return values[0] if values else default

    def preferred_language(self, available: Sequence[str], default: str = "en") -> str:
        """Pick the best of *available* according to ``Accept-Language``.

        Languages are tried in descending ``q`` order; the first one
        present in *available* wins, otherwise *default* is returned.
        """
        header = (self.headers.get("accept-language") or "").lower()
        ranked: dict[str, float] = {}
        for lang, q in _LANGUAGE_RE.findall(header):
            try:
                ranked.setdefault(lang, float(q) if q else 1.0)
            except ValueError:
                continue
        for lang in sorted(ranked, key=ranked.__getitem__, reverse=True):
            if lang in available:
                return lang
        return default

    def with_path_params(self, params: Mapping[str, Any]) -> Request:
        """Return a copy carrying the parameters bound by the router."""
        return replace(self, path_params=dict(params))

    # -- Factory --

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        remote_addr: str | None = None,
    ) -> Request:
        """Create a Request from a method and a (possibly absolute) URL.

        The path is percent-decoded and always begins with ``/``.
        """
        parts = urlsplit(url)
        path = "/" + unquote(parts.path).lstrip("/")
        return cls(
            method=method,
            path=path,
            headers=dict(headers or {}),
            query=parse_qs(parts.query, keep_blank_values=True),
            remote_addr=remote_addr,
            scheme=parts.scheme or "http",
        )
