"""Route pattern forms and their matching strategies.

Four pattern forms are understood, checked in this order:

    Literal     /users/list        exact string comparison
    Regex       #^/page/(\\d+)$#    interior is a regex, captures under ":capture"
    Wildcard    /assets/*          each ``*`` becomes ``(.*)``, captures under ":arg"
    Named       /user/:id          segment-wise, ``:id`` binds the segment value

Compilation happens once per route at registration; the ``match_*``
helpers are then pure functions of (compiled pattern, path).
"""

import re

from orchid.errors import InvalidRegexPattern

REGEX_DELIMITER = "#"
CAPTURE_KEY = ":capture"
ARG_KEY = ":arg"


def is_regex(pattern: str) -> bool:
    """True only when the pattern starts *and* ends with the delimiter."""
    return (
        len(pattern) >= 2
        and pattern.startswith(REGEX_DELIMITER)
        and pattern.endswith(REGEX_DELIMITER)
    )


def is_wildcard(pattern: str) -> bool:
    return "*" in pattern


def is_named(pattern: str) -> bool:
    return ":" in pattern


def compile_regex(pattern: str) -> re.Pattern[str]:
    """Compile the interior of a ``#...#`` pattern.

    Raises ``InvalidRegexPattern`` so a broken pattern fails at
    registration instead of on the first request that reaches it.
    """
    try:
        return re.compile(pattern[1:-1])
    except re.error as exc:
        raise InvalidRegexPattern(pattern, str(exc)) from exc


def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """Escape the pattern and turn every ``*`` into a ``(.*)`` group.

    Anchored at the start only: ``/files/*`` also matches ``/files``
    followed by anything, and ``/a*`` matches ``/abc/def``.
    """
    return re.compile("^" + re.escape(pattern).replace(r"\*", "(.*)"))


def split_segments(value: str) -> list[str]:
    """Split on ``/`` and drop the leading element (empty for ``/x``)."""
    return value.split("/")[1:]


def match_regex(regex: re.Pattern[str], path: str) -> list[str] | None:
    """Search *path*; return the captured groups, unmatched ones as ``""``."""
    found = regex.search(path)
    if found is None:
        return None
    return [group or "" for group in found.groups()]


def match_wildcard(regex: re.Pattern[str], path: str) -> list[str] | None:
    found = regex.match(path)
    if found is None:
        return None
    return list(found.groups())


def match_named(segments: list[str], path: str) -> dict[str, str] | None:
    """Bind ``:name`` segments of a pattern against *path* by position.

    Segment counts must be equal and every literal segment must equal
    its counterpart. Nothing is returned for a partial match.
    """
    parts = split_segments(path)
    if len(parts) != len(segments):
        return None

    params: dict[str, str] = {}
    for expected, actual in zip(segments, parts, strict=True):
        if expected.startswith(":"):
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params
