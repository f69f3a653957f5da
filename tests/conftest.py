"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path

from json_node import JsonNode


def _nested_object(depth: int) -> dict:
    data = {}
    for _ in range(depth - 1):
        data = {"child": data}
    return data


@pytest.fixture
def nested_object():
    """Factory building JSON objects whose containers are nested ``depth`` levels deep."""
    return _nested_object


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def customer_json():
    """Sample customer entity JSON for testing."""
    return {
        "customerId": 42,
        "companyName": "Alfreds Futterkiste",
        "entityState": "Modified",
        "tags": ["gold", "eu"],
        "address": {
            "city": "Berlin",
            "postalCode": "12209"
        },
        "orders": [
            {"orderId": 1, "freight": 32.38},
            {"orderId": 2, "freight": 11.61}
        ],
        "ordersByYear": {
            "1997": [{"orderId": 1}],
            "1998": [{"orderId": 2}, {"orderId": 3}]
        },
        "contacts": {
            "sales": {"name": "Maria Anders"},
            "billing": {"name": "Ana Trujillo"}
        },
        "discontinued": None
    }


@pytest.fixture
def customer_node(customer_json):
    """JsonNode wrapping the sample customer entity."""
    return JsonNode(customer_json)
