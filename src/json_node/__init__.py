"""
JsonNode - typed add/get access over JSON objects.

Builds and reads the JSON object graphs exchanged by an entity-data client:
typed add methods that omit absent and default values, typed get methods that
tolerate missing properties, and (de)serialization with a fixed nesting limit.
"""

from .json_node import JsonNode
from .serialization import (
    CAMEL_CASE_SERIALIZER,
    DEFAULT_SERIALIZER,
    MappingKeyPreservingConverter,
    ObjectGraphSerializer,
)
from .settings import DEFAULT_SETTINGS, SerializerSettings
from .types import ErrorType, JsonNodeError, JsonSerializable

__version__ = "1.0.0"
__all__ = [
    "JsonNode",
    "JsonSerializable",
    "JsonNodeError",
    "ErrorType",
    "ObjectGraphSerializer",
    "MappingKeyPreservingConverter",
    "DEFAULT_SERIALIZER",
    "CAMEL_CASE_SERIALIZER",
    "SerializerSettings",
    "DEFAULT_SETTINGS",
]
