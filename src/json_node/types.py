"""Core type definitions for JsonNode."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .json_node import JsonNode


JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, Dict[str, Any], List[Any]]


class ErrorType(Enum):
    """Enumeration of error types."""
    SYNTAX = "syntax"
    STRUCTURE = "structure"
    DEPTH_EXCEEDED = "depth_exceeded"
    DUPLICATE_KEY = "duplicate_key"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    CONVERSION = "conversion"


class JsonNodeError(Exception):
    """Custom exception for JSON node building, reading and (de)serialization."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


# Abstract base classes for interfaces

class JsonSerializable(ABC):
    """Abstract interface for types that shape their own JSON form."""

    @abstractmethod
    def to_json_node(self, config: Optional[Any] = None) -> "JsonNode":
        """Convert this instance to a JsonNode."""
        pass
