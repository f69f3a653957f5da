"""Object graph conversion and JSON text reading/writing."""

from .map_converter import JsonConverter, MappingKeyPreservingConverter
from .object_graph import (
    ObjectGraphSerializer,
    DEFAULT_SERIALIZER,
    CAMEL_CASE_SERIALIZER,
    parse_enum,
)
from .text import JsonTextReader, JsonTextWriter, parse_iso_datetime

__all__ = [
    "JsonConverter",
    "MappingKeyPreservingConverter",
    "ObjectGraphSerializer",
    "DEFAULT_SERIALIZER",
    "CAMEL_CASE_SERIALIZER",
    "parse_enum",
    "JsonTextReader",
    "JsonTextWriter",
    "parse_iso_datetime",
]
