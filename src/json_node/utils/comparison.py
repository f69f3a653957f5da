"""Deep structural equality for parsed JSON values."""

from datetime import date, datetime
from enum import Enum
from typing import Any


class JsonEqualityComparer:
    """
    Compares JSON values structurally.

    Object key order is ignored, array order is significant. Booleans are
    never equal to numbers, while integers and floats compare numerically.
    Hashes are consistent with ``equals``.
    """

    def equals(self, left: Any, right: Any) -> bool:
        """
        Check whether two JSON values are deep-equal.

        Args:
            left: First JSON value
            right: Second JSON value

        Returns:
            True if both values have the same structure and content
        """
        if left is right:
            return True

        if isinstance(left, dict):
            if not isinstance(right, dict) or len(left) != len(right):
                return False
            for key, value in left.items():
                if key not in right or not self.equals(value, right[key]):
                    return False
            return True

        if isinstance(left, (list, tuple)):
            if not isinstance(right, (list, tuple)) or len(left) != len(right):
                return False
            return all(self.equals(a, b) for a, b in zip(left, right))

        if isinstance(right, (dict, list, tuple)):
            return False

        if isinstance(left, bool) or isinstance(right, bool):
            return isinstance(left, bool) and isinstance(right, bool) and left == right

        return self._scalar_key(left) == self._scalar_key(right)

    def hash(self, value: Any) -> int:
        """
        Compute a hash consistent with ``equals``.

        Args:
            value: JSON value

        Returns:
            Hash of the value's deep structure
        """
        if isinstance(value, dict):
            return hash(("object", frozenset(
                (key, self.hash(item)) for key, item in value.items()
            )))

        if isinstance(value, (list, tuple)):
            return hash(("array", tuple(self.hash(item) for item in value)))

        if isinstance(value, bool):
            return hash(("bool", value))

        return hash(self._scalar_key(value))

    @staticmethod
    def _scalar_key(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, (datetime, date)):
            return ("date", value)
        return value


EQUALITY_COMPARER = JsonEqualityComparer()
