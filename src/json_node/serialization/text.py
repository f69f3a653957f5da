"""JSON text reading and writing with depth limits and date handling."""

import io
import json
import logging
import re
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..settings import DEFAULT_SETTINGS, SerializerSettings
from ..types import ErrorType, JsonNodeError, JsonSerializable
from ..utils.validation import ValidationUtils


_ISO_DATETIME = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,7}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})?$"
)


def parse_iso_datetime(text: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date-time string.

    The UTC offset is kept when present (``Z`` means UTC); strings without an
    offset give a naive datetime. Fractions longer than microseconds are
    truncated.

    Args:
        text: Candidate date-time string

    Returns:
        Parsed datetime, or None if ``text`` is not a date-time
    """
    match = _ISO_DATETIME.match(text)
    if match is None:
        return None

    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    offset = match.group("offset") or ""
    if offset == "Z":
        offset = "+00:00"

    try:
        return datetime.fromisoformat(f"{match.group('base')}.{fraction}{offset}")
    except ValueError:
        return None


def as_datetime(value: date) -> datetime:
    """Widen a calendar date to a naive midnight datetime; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def _reject_constant(name: str) -> Any:
    raise JsonNodeError(
        f"JSON parsing failed: {name} is not a valid JSON number",
        ErrorType.SYNTAX,
        context={"token": name}
    )


def _decode(content: bytes) -> str:
    try:
        return bytes(content).decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise JsonNodeError(
            f"JSON parsing failed: invalid UTF-8 at byte {e.start}",
            ErrorType.SYNTAX,
            context={"position": e.start}
        ) from e


def is_binary_stream(stream: Any) -> bool:
    """Check whether ``stream`` expects bytes rather than text."""
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in getattr(stream, "mode", "")


class JsonTextWriter:
    """
    Writes JSON objects as text.

    Enum members are written by name and dates in ISO-8601 form. Structures
    nested deeper than the configured maximum depth are rejected.
    """

    def __init__(self, settings: Optional[SerializerSettings] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the writer.

        Args:
            settings: Serializer settings (defaults to the process-wide preset)
            logger: Optional logger instance
        """
        self.settings = settings or DEFAULT_SETTINGS
        self.logger = logger or logging.getLogger(__name__)

    def dumps(self, data: Any) -> str:
        """
        Serialize data to JSON text.

        Args:
            data: JSON data to serialize

        Returns:
            JSON text

        Raises:
            JsonNodeError: If the data is too deep or not JSON serializable
        """
        prepared = self._prepare(data, 0)

        try:
            text = json.dumps(
                prepared,
                indent=self.settings.indent,
                separators=self.settings.separators,
                ensure_ascii=self.settings.ensure_ascii,
                allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise JsonNodeError(f"Data is not JSON serializable: {e}", ErrorType.CONVERSION) from e

        self.logger.debug(f"Serialized JSON text of {len(text)} characters")
        return text

    def write(self, data: Any, sink: Any) -> Any:
        """
        Serialize data into a text or binary sink.

        Binary sinks receive UTF-8 bytes and are rewound to the start when
        they support seeking, so they can be read back immediately.

        Args:
            data: JSON data to serialize
            sink: Writable text or binary stream

        Returns:
            The sink
        """
        text = self.dumps(data)

        if is_binary_stream(sink):
            sink.write(text.encode("utf-8"))
            sink.flush()
            if getattr(sink, "seekable", None) and sink.seekable():
                sink.seek(0)
        else:
            sink.write(text)
            sink.flush()

        return sink

    def _prepare(self, value: Any, depth: int) -> Any:
        if isinstance(value, (dict, list, tuple)):
            depth += 1
            if depth > self.settings.max_depth:
                raise JsonNodeError(
                    f"The max depth of {self.settings.max_depth} has been exceeded",
                    ErrorType.DEPTH_EXCEEDED,
                    context={"max_depth": self.settings.max_depth}
                )
            if isinstance(value, dict):
                return {key: self._prepare(item, depth) for key, item in value.items()}
            return [self._prepare(item, depth) for item in value]

        if isinstance(value, Enum):
            return value.name
        if isinstance(value, (datetime, date)):
            return as_datetime(value).isoformat()
        if isinstance(value, JsonSerializable):
            return self._prepare(value.to_json_node(None).raw, depth)
        return value


class JsonTextReader:
    """
    Reads JSON objects from text.

    Date-time strings are parsed into datetimes that keep their UTC offset.
    Documents nested deeper than the configured maximum depth are rejected.
    """

    def __init__(self, settings: Optional[SerializerSettings] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the reader.

        Args:
            settings: Serializer settings (defaults to the process-wide preset)
            logger: Optional logger instance
        """
        self.settings = settings or DEFAULT_SETTINGS
        self.logger = logger or logging.getLogger(__name__)

    def loads(self, text: str) -> Dict[str, Any]:
        """
        Parse JSON text into a JSON object.

        Args:
            text: JSON text

        Returns:
            Parsed JSON object

        Raises:
            JsonNodeError: If the text is malformed, too deep or not an object
        """
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise JsonNodeError(
                f"JSON parsing failed: {e.msg} at line {e.lineno}, column {e.colno}",
                ErrorType.SYNTAX,
                context={"line": e.lineno, "column": e.colno}
            ) from e
        except ValueError as e:
            raise JsonNodeError(f"JSON parsing failed: {e}", ErrorType.SYNTAX) from e
        except RecursionError as e:
            raise JsonNodeError(
                f"The max depth of {self.settings.max_depth} has been exceeded",
                ErrorType.DEPTH_EXCEEDED,
                context={"max_depth": self.settings.max_depth}
            ) from e

        ValidationUtils.ensure_max_depth(data, self.settings.max_depth)

        if not isinstance(data, dict):
            raise JsonNodeError(
                f"Root element must be an object, got {type(data).__name__}",
                ErrorType.STRUCTURE
            )

        if self.settings.parse_dates:
            data = self._parse_dates(data)

        self.logger.debug(f"Parsed JSON object with {len(data)} properties")
        return data

    def read(self, source: Union[str, bytes, bytearray, Any]) -> Dict[str, Any]:
        """
        Parse JSON from a string, bytes, or a readable text or binary stream.

        Args:
            source: JSON source

        Returns:
            Parsed JSON object
        """
        if isinstance(source, str):
            return self.loads(source)

        if isinstance(source, (bytes, bytearray)):
            return self.loads(_decode(source))

        content = source.read()
        if isinstance(content, (bytes, bytearray)):
            content = _decode(content)
        return self.loads(content)

    def _parse_dates(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: self._parse_dates(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._parse_dates(item) for item in value]
        if isinstance(value, str):
            parsed = parse_iso_datetime(value)
            return value if parsed is None else parsed
        return value
