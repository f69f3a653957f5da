"""Conversion between typed Python values and JSON values."""

import collections.abc
import dataclasses
import logging
import types
import typing
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Type, TypeVar, Union

from ..settings import MAX_DEPTH
from ..types import ErrorType, JsonNodeError, JsonSerializable
from ..utils.naming import to_camel_case
from .map_converter import JsonConverter, MappingKeyPreservingConverter
from .text import as_datetime, parse_iso_datetime


E = TypeVar("E", bound=Enum)

_NONE_TYPE = type(None)

_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))

_SEQUENCE_ORIGINS = (
    list, tuple, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Iterable, collections.abc.Collection,
    collections.abc.Set, collections.abc.MutableSet,
)

_MAPPING_ORIGINS = (
    dict, collections.abc.Mapping, collections.abc.MutableMapping,
)


def parse_enum(enum_type: Type[E], raw: Any) -> E:
    """
    Parse a JSON token as a member of ``enum_type``.

    Member names are tried first, then member values, then the token text
    read as an integer value.

    Args:
        enum_type: Enum class
        raw: JSON token (usually a string)

    Returns:
        Enum member

    Raises:
        JsonNodeError: If the token does not name a member
    """
    if isinstance(raw, enum_type):
        return raw

    text = raw if isinstance(raw, str) else str(raw)
    try:
        return enum_type[text.strip()]
    except KeyError:
        pass

    candidates = [raw]
    try:
        candidates.append(int(text))
    except ValueError:
        pass

    for candidate in candidates:
        try:
            return enum_type(candidate)
        except (ValueError, TypeError):
            continue

    raise JsonNodeError(
        f"Requested value '{text}' was not found in {enum_type.__name__}",
        ErrorType.INVALID_ENUM_VALUE,
        context={"enum_type": enum_type.__name__, "value": raw}
    )


def nullable_enum_base(target_type: Any) -> Optional[Type[Enum]]:
    """Return ``E`` when ``target_type`` is ``Optional[E]`` for an Enum ``E``."""
    if typing.get_origin(target_type) not in _UNION_ORIGINS:
        return None

    args = [arg for arg in typing.get_args(target_type) if arg is not _NONE_TYPE]
    if len(args) == 1 and isinstance(args[0], type) and issubclass(args[0], Enum):
        return args[0]
    return None


class ObjectGraphSerializer:
    """
    Converts typed Python values to JSON values and back.

    Structural names (dataclass fields and public attributes) go through
    ``property_name``, which camel-cases them when ``camel_case`` is set.
    Values whose type a registered converter claims are handed to that
    converter first.
    """

    def __init__(self, camel_case: bool = False,
                 max_depth: int = MAX_DEPTH,
                 converters: Optional[Sequence[JsonConverter]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the serializer.

        Args:
            camel_case: Camel-case structural property names on the JSON side
            max_depth: Maximum container nesting depth of produced JSON
            converters: Converters consulted before the default conversion
            logger: Optional logger instance
        """
        self.camel_case = camel_case
        self.max_depth = max_depth
        self.converters: Tuple[JsonConverter, ...] = tuple(converters or ())
        self.logger = logger or logging.getLogger(__name__)

    def property_name(self, name: str) -> str:
        """Map a structural name to its JSON property name."""
        return to_camel_case(name) if self.camel_case else name

    def enter_container(self, depth: int) -> int:
        """
        Account for one more level of container nesting.

        Args:
            depth: Depth of the enclosing container

        Returns:
            Depth of the new container

        Raises:
            JsonNodeError: If the new depth exceeds ``max_depth``
        """
        depth += 1
        if depth > self.max_depth:
            raise JsonNodeError(
                f"The max depth of {self.max_depth} has been exceeded",
                ErrorType.DEPTH_EXCEEDED,
                context={"max_depth": self.max_depth}
            )
        return depth

    # Writing

    def to_json(self, value: Any) -> Any:
        """
        Convert a typed value into a JSON value.

        Args:
            value: Value to convert

        Returns:
            JSON value (dict, list or scalar)
        """
        self.logger.debug(f"Converting {type(value).__name__} to JSON (camel_case={self.camel_case})")
        return self.write(value, 0)

    def write(self, value: Any, depth: int) -> Any:
        """
        Convert a value nested inside a container of the given depth.

        Args:
            value: Value to convert
            depth: Depth of the enclosing container

        Returns:
            JSON value
        """
        if isinstance(value, Enum):
            return value.name

        if value is None or isinstance(value, (str, bool, int, float)):
            return value

        if isinstance(value, (datetime, date)):
            return as_datetime(value)

        if isinstance(value, JsonSerializable):
            return value.to_json_node(None).raw

        converter = self._find_converter(type(value), writing=True)
        if converter is not None:
            return converter.write(value, self, depth)

        if isinstance(value, collections.abc.Mapping):
            depth = self.enter_container(depth)
            return {
                self.property_name(str(key)): self.write(item, depth)
                for key, item in value.items()
            }

        if isinstance(value, (list, tuple, set, frozenset)) or _is_iterator(value):
            depth = self.enter_container(depth)
            return [self.write(item, depth) for item in value]

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            depth = self.enter_container(depth)
            return {
                self.property_name(field.name): self.write(getattr(value, field.name), depth)
                for field in dataclasses.fields(value)
            }

        if hasattr(value, "__dict__"):
            depth = self.enter_container(depth)
            return {
                self.property_name(name): self.write(item, depth)
                for name, item in vars(value).items()
                if not name.startswith("_")
            }

        raise JsonNodeError(
            f"Cannot convert value of type {type(value).__name__} to JSON",
            ErrorType.CONVERSION,
            context={"value_type": type(value).__name__}
        )

    # Reading

    def from_json(self, raw: Any, target_type: Any = None) -> Any:
        """
        Convert a JSON value into ``target_type``.

        Args:
            raw: JSON value
            target_type: Requested type; None or ``Any`` returns ``raw`` as is

        Returns:
            Converted value

        Raises:
            JsonNodeError: If ``raw`` cannot be converted
        """
        if target_type is None or target_type is Any or target_type is object:
            return raw

        origin = typing.get_origin(target_type)
        args = typing.get_args(target_type)

        if origin in _UNION_ORIGINS:
            return self._read_union(raw, target_type, args)

        if raw is None:
            return None

        if origin in _SEQUENCE_ORIGINS or target_type in (list, tuple, set, frozenset):
            return self._read_sequence(raw, target_type, origin or target_type, args)

        if origin in _MAPPING_ORIGINS or target_type is dict:
            return self._read_mapping(raw, target_type, args)

        if not isinstance(target_type, type):
            raise self._conversion_error(raw, target_type)

        converter = self._find_converter(target_type, writing=False)
        if converter is not None:
            return converter.read(raw, target_type, self)

        return self._read_class(raw, target_type)

    def _read_union(self, raw: Any, target_type: Any, args: Tuple[Any, ...]) -> Any:
        if raw is None:
            if _NONE_TYPE in args:
                return None
            raise self._conversion_error(raw, target_type)

        options = [arg for arg in args if arg is not _NONE_TYPE]
        if len(options) == 1:
            return self.from_json(raw, options[0])

        for option in options:
            try:
                return self.from_json(raw, option)
            except JsonNodeError:
                continue
        raise self._conversion_error(raw, target_type)

    def _read_sequence(self, raw: Any, target_type: Any, origin: Any,
                       args: Tuple[Any, ...]) -> Any:
        if not isinstance(raw, list):
            raise self._conversion_error(raw, target_type)

        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            return tuple(self.from_json(item, item_type) for item, item_type in zip(raw, args))

        item_type = args[0] if args else None
        items = [self.from_json(item, item_type) for item in raw]

        if origin is tuple:
            return tuple(items)
        if origin in (set, collections.abc.Set, collections.abc.MutableSet):
            return set(items)
        if origin is frozenset:
            return frozenset(items)
        return items

    def _read_mapping(self, raw: Any, target_type: Any, args: Tuple[Any, ...]) -> Dict[str, Any]:
        if not isinstance(raw, dict):
            raise self._conversion_error(raw, target_type)

        converter = self._find_converter(dict, writing=False)
        if converter is not None:
            return converter.read(raw, target_type, self)

        value_type = args[1] if len(args) == 2 else None
        return {key: self.from_json(item, value_type) for key, item in raw.items()}

    def _read_class(self, raw: Any, target_type: type) -> Any:
        from ..json_node import JsonNode

        if issubclass(target_type, JsonNode):
            if not isinstance(raw, dict):
                raise self._conversion_error(raw, target_type)
            return target_type(raw)

        if issubclass(target_type, Enum):
            return parse_enum(target_type, raw)

        if target_type is bool:
            return self._read_bool(raw)

        if issubclass(target_type, (datetime, date)):
            return self._read_date(raw, target_type)

        if target_type in (int, float, str):
            return self._read_scalar(raw, target_type)

        if isinstance(raw, dict):
            if dataclasses.is_dataclass(target_type):
                return self._read_dataclass(raw, target_type)
            return self._read_annotated(raw, target_type)

        if isinstance(raw, target_type):
            return raw

        raise self._conversion_error(raw, target_type)

    def _read_bool(self, raw: Any) -> bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int):
            return raw != 0
        if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
            return raw.strip().lower() == "true"
        raise self._conversion_error(raw, bool)

    def _read_scalar(self, raw: Any, target_type: type) -> Any:
        if isinstance(raw, (dict, list)):
            raise self._conversion_error(raw, target_type)

        if target_type is str:
            if isinstance(raw, Enum):
                return raw.name
            if isinstance(raw, (datetime, date)):
                return raw.isoformat()
            return raw if isinstance(raw, str) else str(raw)

        if target_type is int:
            if isinstance(raw, float):
                if not raw.is_integer():
                    raise self._conversion_error(raw, int)
                return int(raw)
            if isinstance(raw, (bool, int)):
                return int(raw)

        if target_type is float and isinstance(raw, (bool, int, float)):
            return float(raw)

        if isinstance(raw, str):
            try:
                return target_type(raw.strip())
            except ValueError as e:
                raise self._conversion_error(raw, target_type) from e

        raise self._conversion_error(raw, target_type)

    def _read_date(self, raw: Any, target_type: type) -> Any:
        if isinstance(raw, str):
            parsed = parse_iso_datetime(raw)
            if parsed is None:
                try:
                    parsed = datetime.fromisoformat(raw)
                except ValueError as e:
                    raise self._conversion_error(raw, target_type) from e
            raw = parsed

        if isinstance(raw, datetime):
            return raw if issubclass(target_type, datetime) else raw.date()
        if isinstance(raw, date) and not issubclass(target_type, datetime):
            return raw
        raise self._conversion_error(raw, target_type)

    def _read_dataclass(self, raw: Dict[str, Any], target_type: type) -> Any:
        hints = _type_hints(target_type)
        kwargs = {}
        for field in dataclasses.fields(target_type):
            if not field.init:
                continue
            found, item = self._lookup(raw, field.name)
            if found:
                kwargs[field.name] = self.from_json(item, hints.get(field.name))

        try:
            return target_type(**kwargs)
        except TypeError as e:
            raise self._conversion_error(raw, target_type) from e

    def _read_annotated(self, raw: Dict[str, Any], target_type: type) -> Any:
        hints = _type_hints(target_type)
        if not hints:
            raise self._conversion_error(raw, target_type)

        try:
            instance = target_type()
        except TypeError as e:
            raise self._conversion_error(raw, target_type) from e

        for name, hint in hints.items():
            if name.startswith("_") or typing.get_origin(hint) is typing.ClassVar:
                continue
            found, item = self._lookup(raw, name)
            if found:
                setattr(instance, name, self.from_json(item, hint))
        return instance

    def _lookup(self, raw: Dict[str, Any], name: str) -> Tuple[bool, Any]:
        key = self.property_name(name)
        if key in raw:
            return True, raw[key]
        if name in raw:
            return True, raw[name]
        return False, None

    def _find_converter(self, value_type: type, writing: bool) -> Optional[JsonConverter]:
        for converter in self.converters:
            if not converter.can_convert(value_type):
                continue
            if writing and converter.can_write:
                return converter
            if not writing and converter.can_read:
                return converter
        return None

    @staticmethod
    def _conversion_error(raw: Any, target_type: Any) -> JsonNodeError:
        type_name = getattr(target_type, "__name__", repr(target_type))
        return JsonNodeError(
            f"Cannot convert JSON value of type {type(raw).__name__} to {type_name}",
            ErrorType.CONVERSION,
            context={"target_type": type_name}
        )


def _is_iterator(value: Any) -> bool:
    return isinstance(value, collections.abc.Iterator)


def _type_hints(target_type: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(target_type)
    except (NameError, TypeError):
        return dict(getattr(target_type, "__annotations__", {}))


DEFAULT_SERIALIZER = ObjectGraphSerializer(
    converters=[MappingKeyPreservingConverter()]
)

CAMEL_CASE_SERIALIZER = ObjectGraphSerializer(
    camel_case=True,
    converters=[MappingKeyPreservingConverter()]
)
