"""Outgoing response value.

Handlers receive a Response and hand back a (possibly different) one;
nothing is mutated in place. Status, headers and body are all set through
``with_*`` methods that return a copy.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from http import HTTPStatus

# Statuses that never carry a body
EMPTY_STATUSES: frozenset[int] = frozenset({204, 205, 304})


@dataclass(frozen=True, slots=True)
class Response:
    """A status, a body and an ordered list of header lines.

    ``headers`` keeps repeated names (``Vary``, ``Set-Cookie``); use
    ``with_added_header`` for those and ``with_header`` for the rest.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Copies with one field changed --

    def with_status(self, status: int) -> Response:
        """Copy with *status*."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with *name* set to *value*.

        Any previous value of the header is replaced.
        """
        kept = tuple((k, v) for k, v in self.headers if k.lower() != name.lower())
        return replace(self, headers=(*kept, (name, value)))

    def with_added_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header line."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with several headers set."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def with_body(self, body: str | bytes) -> Response:
        return replace(self, body=body)

    def with_content_type(self, content_type: str) -> Response:
        """Copy with *content_type*."""
        return replace(self, content_type=content_type)

    # -- Inspection --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Last value of header *name* (case-insensitive)."""
        for k, v in reversed(self.headers):
            if k.lower() == name.lower():
                return v
        return default

    @property
    def reason(self) -> str:
        """Reason phrase for the status code, empty if unknown."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ""

    @property
    def is_empty(self) -> bool:
        return self.status in EMPTY_STATUSES

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400 and self.header("Location") is not None

    # -- Body --

    @property
    def body_bytes(self) -> bytes:
        """Body encoded as UTF-8 if it is text."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 if it is bytes."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


def redirect(url: str, status: int = 302) -> Response:
    """Build a bodiless redirect to *url*."""
    return Response(status=status).with_header("Location", str(url))
