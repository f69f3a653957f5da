"""Serializer settings shared by every JsonNode in the process."""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .types import ErrorType, JsonNodeError


MAX_DEPTH = 128

ENV_INDENT = "JSON_NODE_INDENT"
ENV_MAX_DEPTH = "JSON_NODE_MAX_DEPTH"


@dataclass(frozen=True)
class SerializerSettings:
    """
    Immutable configuration for JSON text reading and writing.

    Output formatting is chosen here rather than per call: ``indent=None``
    produces compact text, any integer produces indented text.
    """

    max_depth: int = MAX_DEPTH
    indent: Optional[int] = None
    ensure_ascii: bool = False
    # Date-time strings are read back as datetimes, including strings that
    # were added as plain text.
    parse_dates: bool = True

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.max_depth <= 0:
            raise JsonNodeError("max_depth must be positive", ErrorType.STRUCTURE,
                                context={"max_depth": self.max_depth})
        if self.indent is not None and self.indent < 0:
            raise JsonNodeError("indent must be non-negative", ErrorType.STRUCTURE,
                                context={"indent": self.indent})

    @property
    def separators(self):
        """Item and key separators handed to the json module."""
        if self.indent is None:
            return (",", ":")
        return (",", ": ")

    def with_indent(self, indent: Optional[int]) -> "SerializerSettings":
        """Return a copy of these settings with a different indentation."""
        return replace(self, indent=indent)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SerializerSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            SerializerSettings instance
        """
        environ = os.environ if environ is None else environ

        indent = _read_int(environ, ENV_INDENT)
        max_depth = _read_int(environ, ENV_MAX_DEPTH)

        return cls(
            max_depth=MAX_DEPTH if max_depth is None else max_depth,
            indent=indent,
        )


def _read_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise JsonNodeError(f"{name} must be an integer, got {raw!r}", ErrorType.SYNTAX,
                            context={"variable": name}) from e


DEFAULT_SETTINGS = SerializerSettings.from_env()
