"""Converters plugged into the object graph serializer."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, TYPE_CHECKING

from ..types import ErrorType, JsonNodeError

if TYPE_CHECKING:
    from .object_graph import ObjectGraphSerializer


class JsonConverter(ABC):
    """Abstract interface for custom value conversion."""

    @abstractmethod
    def can_convert(self, value_type: type) -> bool:
        """Check whether this converter handles values of ``value_type``."""
        pass

    @property
    def can_read(self) -> bool:
        return True

    @property
    def can_write(self) -> bool:
        return True

    @abstractmethod
    def read(self, raw: Any, target_type: Any, serializer: "ObjectGraphSerializer") -> Any:
        """Convert a JSON value into ``target_type``."""
        pass

    @abstractmethod
    def write(self, value: Any, serializer: "ObjectGraphSerializer", depth: int) -> Any:
        """Convert ``value`` into a JSON value."""
        pass


class MappingKeyPreservingConverter(JsonConverter):
    """
    Writes mappings with their keys taken verbatim as property names.

    Mapping keys are user data rather than code identifiers, so the
    serializer's property naming (camel-casing, for example) must not touch
    them. Values are still written through the serializer and follow its
    rules. This converter only writes; reading mappings is left to the
    serializer's default handling.
    """

    def can_convert(self, value_type: type) -> bool:
        return isinstance(value_type, type) and issubclass(value_type, Mapping)

    @property
    def can_read(self) -> bool:
        return False

    def read(self, raw: Any, target_type: Any, serializer: "ObjectGraphSerializer") -> Any:
        raise JsonNodeError(
            f"{type(self).__name__} cannot read JSON values",
            ErrorType.UNSUPPORTED_OPERATION,
            context={"target_type": target_type}
        )

    def write(self, value: Any, serializer: "ObjectGraphSerializer", depth: int) -> Dict[str, Any]:
        depth = serializer.enter_container(depth)

        result = {}
        for key, item in value.items():
            result[self.key_to_string(key)] = serializer.write(item, depth)
        return result

    @staticmethod
    def key_to_string(key: Any) -> str:
        """Convert a mapping key to its property name."""
        if isinstance(key, str):
            return key
        if isinstance(key, Enum):
            return key.name
        return str(key)
