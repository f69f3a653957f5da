"""JsonNode: typed add/get access over a single JSON object."""

import itertools
import logging
from datetime import date
from typing import (
    Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union
)
from enum import Enum

from .serialization.object_graph import (
    CAMEL_CASE_SERIALIZER,
    DEFAULT_SERIALIZER,
    nullable_enum_base,
    parse_enum,
)
from .serialization.text import JsonTextReader, JsonTextWriter, as_datetime
from .settings import DEFAULT_SETTINGS
from .types import ErrorType, JsonNodeError, JsonSerializable
from .utils.comparison import EQUALITY_COMPARER
from .utils.lazy_sequence import LazySequence


logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


class JsonNode(JsonSerializable):
    """
    Wrapper over a JSON object providing typed add/get access and
    serialization.

    Nodes are built with the ``add_*`` methods, which skip absent values (and,
    for primitives, values equal to a given default) so that defaults never
    reach the serialized output. Properties are added at most once; there is
    no update or removal. The ``get_*`` methods never fail on a missing
    property and return a default, an empty sequence or None instead.
    """

    def __init__(self, raw: Optional[Dict[str, Any]] = None):
        """
        Initialize the node.

        Args:
            raw: Parsed JSON object to wrap; the node takes ownership of it
        """
        if raw is None:
            raw = {}
        elif not isinstance(raw, dict):
            raise JsonNodeError(
                f"JsonNode must wrap a JSON object, got {type(raw).__name__}",
                ErrorType.STRUCTURE
            )
        self._obj = raw
        self.config: Any = None

    @classmethod
    def from_object(cls, value: Any, use_camel_case: bool = False) -> "JsonNode":
        """
        Build a node from a typed value.

        Args:
            value: Dataclass, object, mapping or serializable value
            use_camel_case: Camel-case structural property names; mapping
                keys are always kept as they are

        Returns:
            JsonNode wrapping the converted object
        """
        serializer = CAMEL_CASE_SERIALIZER if use_camel_case else DEFAULT_SERIALIZER
        converted = serializer.to_json(value)
        if not isinstance(converted, dict):
            raise JsonNodeError(
                f"Value of type {type(value).__name__} does not convert to a JSON object",
                ErrorType.STRUCTURE,
                context={"value_type": type(value).__name__}
            )
        return cls(converted)

    @property
    def raw(self) -> Dict[str, Any]:
        """The wrapped JSON object."""
        return self._obj

    @property
    def is_empty(self) -> bool:
        return not self._obj

    def to_object(self, target_type: Any, use_camel_case: bool = False) -> Any:
        """
        Convert the wrapped object into ``target_type``.

        Args:
            target_type: Dataclass, annotated class, mapping type or JsonNode
            use_camel_case: Expect camel-cased property names on the JSON side

        Returns:
            Converted value
        """
        serializer = CAMEL_CASE_SERIALIZER if use_camel_case else DEFAULT_SERIALIZER
        return serializer.from_json(self._obj, target_type)

    def to_json_node(self, config: Optional[Any] = None) -> "JsonNode":
        return self

    def has_values(self, prop_name: str) -> bool:
        """
        Check whether a property holds something.

        Returns:
            True if the property exists and holds a non-empty container or a
            non-null scalar
        """
        value = self._obj.get(prop_name)
        if isinstance(value, (dict, list)):
            return len(value) > 0
        return value is not None

    # Add methods

    def add_primitive(self, prop_name: str, value: Any, default_value: Any = None) -> None:
        """
        Add a scalar value unless it is None or equal to ``default_value``.

        Booleans are never treated as equal to numbers, so ``False`` is still
        written when the default is ``0``. Calendar dates are stored as naive
        midnight datetimes.
        """
        if value is None:
            return
        if _is_default(value, default_value):
            return
        if isinstance(value, date):
            value = as_datetime(value)
        self._add_raw(prop_name, value)

    def add_enum(self, prop_name: str, value: Optional[Enum]) -> None:
        """Add an enum member by name, skipping None."""
        if value is None:
            return
        if not isinstance(value, Enum):
            raise TypeError(f"add_enum expects an Enum member, got {type(value).__name__}")
        self._add_raw(prop_name, value.name)

    def add_serializable(self, prop_name: str, item: Optional[JsonSerializable]) -> None:
        """Add the object produced by ``item.to_json_node()``, skipping None."""
        if item is None:
            return
        node = item.to_json_node(None)
        self._add_raw(prop_name, node._obj)

    def add_array(self, prop_name: str, items: Optional[Iterable[T]],
                  func: Optional[Callable[[T], "JsonNode"]] = None) -> None:
        """
        Add a JSON array, skipping None and empty sequences.

        Args:
            prop_name: Property name
            items: Scalars, JsonNodes or serializable values
            func: Optional function turning each item into a JsonNode
        """
        if items is None:
            return
        items = list(items)
        if not items:
            return
        self._add_raw(prop_name, self.to_json_array(items, func))

    def add_map(self, prop_name: str, mapping: Optional[Mapping[Any, Any]]) -> None:
        """Add a JSON object built from ``mapping``, skipping None and empty mappings."""
        if mapping is None or not mapping:
            return
        node = self.build_map_node(mapping)
        self._add_raw(prop_name, node._obj)

    def add_node(self, prop_name: str, node: Optional["JsonNode"]) -> None:
        """Add another node's object, skipping None and empty nodes."""
        if node is None or node.is_empty:
            return
        self._add_raw(prop_name, node._obj)

    def _add_raw(self, prop_name: str, value: Any) -> None:
        if prop_name in self._obj:
            raise JsonNodeError(
                f"Can not add property {prop_name} to JsonNode. "
                f"Property with the same name already exists",
                ErrorType.DUPLICATE_KEY,
                context={"property": prop_name}
            )
        self._obj[prop_name] = value

    # Get methods

    def get(self, prop_name: str, target_type: Any = None, default_value: Any = None) -> Any:
        """
        Read a property, converted to ``target_type`` when one is given.

        ``Optional[E]`` for an enum ``E`` is read by parsing the raw token as
        a plain ``E``.

        Args:
            prop_name: Property name
            target_type: Requested type (None returns the raw JSON value)
            default_value: Returned when the property is missing

        Returns:
            Converted value, or ``default_value``
        """
        if prop_name not in self._obj:
            return default_value

        value = self._obj[prop_name]
        enum_type = nullable_enum_base(target_type)
        if enum_type is not None:
            if value is None:
                return None
            return parse_enum(enum_type, value)
        return DEFAULT_SERIALIZER.from_json(value, target_type)

    def get_token(self, prop_name: str, token_type: Optional[type] = None) -> Any:
        """
        Return the raw JSON value of a property, or None if missing.

        Raises:
            JsonNodeError: If ``token_type`` is given and the value is not
                an instance of it
        """
        value = self._obj.get(prop_name)
        if value is None or token_type is None:
            return value
        if not isinstance(value, token_type):
            raise JsonNodeError(
                f"Property {prop_name} holds {type(value).__name__}, "
                f"expected {token_type.__name__}",
                ErrorType.STRUCTURE,
                context={"property": prop_name}
            )
        return value

    def get_enum(self, prop_name: str, enum_type: Type[E],
                 default_value: Optional[E] = None) -> Optional[E]:
        value = self._obj.get(prop_name)
        if value is None:
            return default_value
        return parse_enum(enum_type, value)

    def get_nullable_enum(self, prop_name: str, enum_type: Type[E]) -> Optional[E]:
        return self.get_enum(prop_name, enum_type, None)

    def get_array(self, *prop_names: str, element_type: Any = None) -> LazySequence:
        """
        Read an array lazily from the first of ``prop_names`` that is present.

        Args:
            prop_names: Candidate property names, tried in order
            element_type: Type each element is converted to

        Returns:
            Restartable lazy sequence; empty if no property is present
        """
        items = next(
            (token for token in (self.get_token(name, list) for name in prop_names)
             if token is not None),
            None
        )
        if items is None:
            return LazySequence.empty()
        return LazySequence(items, lambda item: DEFAULT_SERIALIZER.from_json(item, element_type))

    def get_typed_array(self, prop_name: str, element_types: Iterable[Any]) -> LazySequence:
        """
        Read an array converting each element to the type at the same position.

        Stops at the end of the shorter of the array and ``element_types``.
        """
        items = self.get_token(prop_name, list)
        if items is None:
            return LazySequence.empty()
        pairs = list(zip(items, itertools.islice(element_types, len(items))))
        return LazySequence(pairs, lambda pair: DEFAULT_SERIALIZER.from_json(*pair))

    def get_map(self, prop_name: str, value_type: Any = None) -> Dict[str, Any]:
        """Read an object property as a dict, empty if missing."""
        mapping = self.get_token(prop_name, dict)
        if mapping is None:
            return {}
        return {
            key: DEFAULT_SERIALIZER.from_json(value, value_type)
            for key, value in mapping.items()
        }

    def get_map_with_types(self, prop_name: str,
                           type_selector: Callable[[str], Any]) -> Optional[Dict[str, Any]]:
        """
        Read an object property as a dict, choosing each value's type by key.

        Returns:
            Converted dict, or None if the property is missing (an empty
            object gives an empty dict)
        """
        mapping = self.get_token(prop_name, dict)
        if mapping is None:
            return None
        return {
            key: DEFAULT_SERIALIZER.from_json(value, type_selector(key))
            for key, value in mapping.items()
        }

    def get_node(self, prop_name: str) -> Optional["JsonNode"]:
        item = self.get_token(prop_name, dict)
        if item is None:
            return None
        return JsonNode(item)

    def get_node_array(self, prop_name: str) -> LazySequence:
        items = self.get_token(prop_name, list)
        if items is None:
            return LazySequence.empty()
        return LazySequence(items, JsonNode)

    def get_node_map(self, prop_name: str) -> Optional[Dict[str, "JsonNode"]]:
        mapping = self.get_token(prop_name, dict)
        if mapping is None:
            return None
        return {key: JsonNode(value) for key, value in mapping.items()}

    def get_node_array_map(self, prop_name: str) -> Optional[Dict[str, LazySequence]]:
        """Read an object whose values are arrays of objects, wrapping each element."""
        mapping = self.get_token(prop_name, dict)
        if mapping is None:
            return None
        result = {}
        for key, items in mapping.items():
            if not isinstance(items, list):
                raise JsonNodeError(
                    f"Property {prop_name}.{key} holds {type(items).__name__}, expected list",
                    ErrorType.STRUCTURE,
                    context={"property": prop_name, "key": key}
                )
            result[key] = LazySequence(items, JsonNode)
        return result

    # Serialize/Deserialize

    def serialize(self) -> str:
        """Serialize the wrapped object to JSON text."""
        return JsonTextWriter().dumps(self._obj)

    def serialize_to(self, sink: Any) -> Any:
        """
        Serialize the wrapped object into a text or binary stream.

        Binary streams are rewound to the start after writing.

        Returns:
            The sink
        """
        return JsonTextWriter().write(self._obj, sink)

    @classmethod
    def deserialize_from(cls, source: Union[str, bytes, Any]) -> "JsonNode":
        """
        Parse JSON from a string, bytes, or a text or binary stream.

        Returns:
            JsonNode wrapping the parsed object
        """
        try:
            return cls(JsonTextReader().read(source))
        except JsonNodeError as e:
            logger.error(f"Failed to deserialize JsonNode: {e.error_type.value} - {e}")
            raise

    # Other methods

    @staticmethod
    def build_map_node(mapping: Mapping[Any, Any]) -> "JsonNode":
        """
        Build a node whose keys are the mapping's keys, taken verbatim.

        Values follow the element conversion rule; None values become JSON
        null.
        """
        node = JsonNode()
        for key, value in mapping.items():
            name = key if isinstance(key, str) else (key.name if isinstance(key, Enum) else str(key))
            node._add_raw(name, _convert_value(value))
        return node

    @staticmethod
    def to_json_array(items: Iterable[T],
                      func: Optional[Callable[[T], "JsonNode"]] = None) -> List[Any]:
        """Convert items to a JSON array, through ``func`` when given."""
        if func is not None:
            return [func(item)._obj for item in items]
        return [_convert_value(item) for item in items]

    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, JsonNode):
            return NotImplemented
        return EQUALITY_COMPARER.equals(self._obj, other._obj)

    def __hash__(self) -> int:
        return EQUALITY_COMPARER.hash(self._obj)

    def __str__(self) -> str:
        return JsonTextWriter(DEFAULT_SETTINGS.with_indent(2)).dumps(self._obj)

    def __repr__(self) -> str:
        return f"JsonNode({self._obj!r})"


def _is_default(value: Any, default_value: Any) -> bool:
    if default_value is None:
        return False
    if isinstance(value, bool) != isinstance(default_value, bool):
        return False
    return value == default_value


def _convert_value(value: Any) -> Any:
    # JsonNode -> its object, sequence of JsonNodes -> array of objects,
    # serializable -> its node's object, anything else -> default conversion.
    if isinstance(value, JsonNode):
        return value._obj

    if isinstance(value, (list, tuple)) and value and all(isinstance(v, JsonNode) for v in value):
        return [v._obj for v in value]

    if isinstance(value, JsonSerializable):
        return value.to_json_node(None)._obj

    return DEFAULT_SERIALIZER.to_json(value)
