"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation and checked by
attribute name rather than string keys.
"""

from dataclasses import dataclass
from typing import Literal, TypeAlias

OutputBuffering: TypeAlias = Literal["append", "prepend", False]


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, output_buffering="prepend")
    """

    debug: bool = False

    # Where text printed by a handler lands in the response body:
    # "append", "prepend", or False to discard it.
    output_buffering: OutputBuffering = "append"

    # Responses
    default_content_type: str = "text/html; charset=utf-8"
    redirect_status: int = 302

    # Logging
    log_level: str = "warning"
