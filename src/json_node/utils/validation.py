"""Validation utilities for JSON nesting depth."""

from typing import Any

from ..types import ErrorType, JsonNodeError


class ValidationUtils:
    """Utility class for validating JSON data structures."""

    @staticmethod
    def calculate_max_depth(data: Any, current_depth: int = 0) -> int:
        """
        Calculate maximum container nesting depth.

        A scalar has depth 0, ``{}`` and ``[]`` have depth 1, ``{"a": {}}`` has
        depth 2.

        Args:
            data: Parsed JSON data
            current_depth: Depth of the enclosing container

        Returns:
            Maximum nesting depth
        """
        if not isinstance(data, (dict, list)):
            return current_depth

        depth = current_depth + 1
        max_child_depth = depth

        children = data.values() if isinstance(data, dict) else data
        for child in children:
            child_depth = ValidationUtils.calculate_max_depth(child, depth)
            max_child_depth = max(max_child_depth, child_depth)

        return max_child_depth

    @staticmethod
    def ensure_max_depth(data: Any, max_depth: int, current_depth: int = 0) -> None:
        """
        Verify that no container in ``data`` is nested deeper than ``max_depth``.

        Stops at the first container past the limit, so cyclic or very deep
        structures fail without walking them completely.

        Args:
            data: JSON data to check
            max_depth: Maximum allowed nesting depth
            current_depth: Depth of the enclosing container

        Raises:
            JsonNodeError: If the depth limit is exceeded
        """
        if not isinstance(data, (dict, list)):
            return

        depth = current_depth + 1
        if depth > max_depth:
            raise JsonNodeError(
                f"The max depth of {max_depth} has been exceeded",
                ErrorType.DEPTH_EXCEEDED,
                context={"max_depth": max_depth}
            )

        children = data.values() if isinstance(data, dict) else data
        for child in children:
            ValidationUtils.ensure_max_depth(child, max_depth, depth)
