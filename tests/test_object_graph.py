"""Tests for object graph conversion, camel-casing and map-key preservation."""

import pytest
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from json_node import (
    JsonNode,
    JsonNodeError,
    ErrorType,
    ObjectGraphSerializer,
    MappingKeyPreservingConverter,
    CAMEL_CASE_SERIALIZER,
    DEFAULT_SERIALIZER,
)


class EntityState(Enum):
    Unchanged = 1
    Added = 2
    Modified = 3


@dataclass
class Address:
    city: str
    postal_code: Optional[str] = None


@dataclass
class Customer:
    customer_id: int
    company_name: str
    entity_state: EntityState = EntityState.Unchanged
    address: Optional[Address] = None
    tags: List[str] = field(default_factory=list)
    custom_data: Dict[str, int] = field(default_factory=dict)


@dataclass
class Holder:
    FooBar: int
    lookup: Dict[str, int]


class Product:
    """Annotated plain class."""

    product_id: int
    unit_price: float

    def __init__(self):
        self.product_id = 0
        self.unit_price = 0.0


class TestFromObject:
    """Tests for JsonNode.from_object."""

    def test_without_camel_case(self):
        """Test that field names are kept as they are."""
        customer = Customer(1, "Alfreds", address=Address("Berlin"))

        node = JsonNode.from_object(customer, False)

        assert node.raw == {
            "customer_id": 1,
            "company_name": "Alfreds",
            "entity_state": "Unchanged",
            "address": {"city": "Berlin", "postal_code": None},
            "tags": [],
            "custom_data": {}
        }

    def test_with_camel_case(self):
        """Test that structural names are camel-cased but mapping keys are not."""
        customer = Customer(
            1, "Alfreds",
            address=Address("Berlin", "12209"),
            tags=["gold"],
            custom_data={"Loyalty_Points": 10, "VIPLevel": 2}
        )

        node = JsonNode.from_object(customer, True)

        assert node.raw == {
            "customerId": 1,
            "companyName": "Alfreds",
            "entityState": "Unchanged",
            "address": {"city": "Berlin", "postalCode": "12209"},
            "tags": ["gold"],
            "customData": {"Loyalty_Points": 10, "VIPLevel": 2}
        }

    def test_map_keys_preserved_pascal_property_camel_cased(self):
        """Test map keys stay verbatim while FooBar becomes fooBar."""
        node = JsonNode.from_object(Holder(FooBar=1, lookup={"Foo": 1, "barBaz": 2}), True)

        assert node.serialize() == '{"fooBar":1,"lookup":{"Foo":1,"barBaz":2}}'

    def test_mapping_root_keys_preserved(self):
        """Test that a mapping converted directly keeps its keys."""
        node = JsonNode.from_object({"Foo": 1, "barBaz": 2}, True)

        assert list(node.raw) == ["Foo", "barBaz"]

    def test_plain_objects(self):
        """Test objects converted through their public attributes."""
        product = Product()
        product.product_id = 7
        product.unit_price = 18.0
        product._cache = "hidden"

        node = JsonNode.from_object(product, True)

        assert node.raw == {"productId": 7, "unitPrice": 18.0}

    def test_non_object_value_fails(self):
        """Test that values that are not objects are rejected."""
        with pytest.raises(JsonNodeError) as exc_info:
            JsonNode.from_object([1, 2], False)

        assert exc_info.value.error_type == ErrorType.STRUCTURE

    def test_depth_limit(self, nested_object):
        """Test that deep object graphs are rejected."""
        with pytest.raises(JsonNodeError) as exc_info:
            JsonNode.from_object(nested_object(129), False)

        assert exc_info.value.error_type == ErrorType.DEPTH_EXCEEDED
        assert JsonNode.from_object(nested_object(128), False) == JsonNode(nested_object(128))


class TestToObject:
    """Tests for JsonNode.to_object."""

    def test_round_trip_with_camel_case(self):
        """Test to_object reverses from_object in camel-case mode."""
        customer = Customer(
            5, "Ernst Handel",
            entity_state=EntityState.Modified,
            address=Address("Graz", "8010"),
            tags=["a", "b"],
            custom_data={"Foo": 1}
        )

        node = JsonNode.from_object(customer, True)

        assert node.to_object(Customer, True) == customer

    def test_round_trip_without_camel_case(self):
        """Test to_object reverses from_object without camel-casing."""
        customer = Customer(6, "Folk och fä", address=Address("Bräcke"))

        assert JsonNode.from_object(customer).to_object(Customer) == customer

    def test_defaults_for_missing_fields(self):
        """Test that missing properties fall back to field defaults."""
        node = JsonNode({"customerId": 1, "companyName": "x"})

        assert node.to_object(Customer, True) == Customer(1, "x")

    def test_missing_required_field(self):
        """Test that missing required fields are a conversion error."""
        node = JsonNode({"companyName": "x"})

        with pytest.raises(JsonNodeError) as exc_info:
            node.to_object(Customer, True)

        assert exc_info.value.error_type == ErrorType.CONVERSION

    def test_annotated_class(self):
        """Test converting into an annotated plain class."""
        node = JsonNode({"productId": "7", "unitPrice": 18})

        product = node.to_object(Product, True)

        assert isinstance(product, Product)
        assert product.product_id == 7
        assert product.unit_price == 18.0

    def test_mapping_and_node_targets(self):
        """Test converting into a dict and into a JsonNode."""
        node = JsonNode({"a": 1, "b": 2})

        assert node.to_object(Dict[str, float]) == {"a": 1.0, "b": 2.0}
        assert node.to_object(JsonNode) == node


class TestObjectGraphSerializer:
    """Tests for ObjectGraphSerializer directly."""

    def test_presets(self):
        """Test the process-wide presets."""
        assert CAMEL_CASE_SERIALIZER.camel_case
        assert not DEFAULT_SERIALIZER.camel_case
        assert any(isinstance(c, MappingKeyPreservingConverter) for c in CAMEL_CASE_SERIALIZER.converters)

    def test_without_converter_keys_are_renamed(self):
        """Test that without the converter mapping keys would be camel-cased."""
        serializer = ObjectGraphSerializer(camel_case=True)

        assert serializer.to_json({"Foo": 1, "bar_baz": 2}) == {"foo": 1, "barBaz": 2}

    def test_scalars_and_collections(self):
        """Test conversion of scalars, tuples, sets and generators."""
        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        serializer = ObjectGraphSerializer()

        assert serializer.to_json(None) is None
        assert serializer.to_json(EntityState.Added) == "Added"
        assert serializer.to_json(when) is when
        assert serializer.to_json((1, 2)) == [1, 2]
        assert serializer.to_json(x for x in "ab") == ["a", "b"]
        assert serializer.to_json(frozenset([3])) == [3]

    def test_unsupported_value(self):
        """Test values with no JSON form."""
        with pytest.raises(JsonNodeError) as exc_info:
            DEFAULT_SERIALIZER.to_json(object())

        assert exc_info.value.error_type == ErrorType.CONVERSION

    def test_from_json_types(self):
        """Test typed reads of nested generic types."""
        serializer = ObjectGraphSerializer()

        assert serializer.from_json([1, 2], Tuple[int, ...]) == (1, 2)
        assert serializer.from_json([1, "x"], Tuple[int, str]) == (1, "x")
        assert serializer.from_json({"a": [1]}, Dict[str, List[float]]) == {"a": [1.0]}
        assert serializer.from_json(None, Optional[int]) is None
        assert serializer.from_json("true", bool) is True
        assert serializer.from_json(2.0, int) == 2
        assert serializer.from_json("2024-01-01T00:00:00Z", datetime) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_from_json_failures(self):
        """Test impossible typed reads."""
        with pytest.raises(JsonNodeError):
            DEFAULT_SERIALIZER.from_json(2.5, int)
        with pytest.raises(JsonNodeError):
            DEFAULT_SERIALIZER.from_json("maybe", bool)
        with pytest.raises(JsonNodeError):
            DEFAULT_SERIALIZER.from_json({"a": 1}, List[int])


class TestMappingKeyPreservingConverter:
    """Tests for MappingKeyPreservingConverter."""

    def setup_method(self):
        """Set up test fixtures."""
        self.converter = MappingKeyPreservingConverter()

    def test_can_convert_mappings_only(self):
        """Test the types the converter claims."""
        assert self.converter.can_convert(dict)
        assert not self.converter.can_convert(list)
        assert not self.converter.can_convert(str)

    def test_is_write_only(self):
        """Test that the converter refuses to read."""
        assert not self.converter.can_read
        assert self.converter.can_write

        with pytest.raises(JsonNodeError) as exc_info:
            self.converter.read({"a": 1}, dict, CAMEL_CASE_SERIALIZER)

        assert exc_info.value.error_type == ErrorType.UNSUPPORTED_OPERATION

    def test_write_keeps_keys_and_converts_values(self):
        """Test that keys stay verbatim and values go through the serializer."""
        result = self.converter.write(
            {"Some_Key": Address("Lyon"), 3: EntityState.Added},
            CAMEL_CASE_SERIALIZER,
            0
        )

        assert result == {
            "Some_Key": {"city": "Lyon", "postalCode": None},
            "3": "Added"
        }

    def test_reading_mappings_falls_back_to_default(self):
        """Test that readers skip the write-only converter."""
        assert CAMEL_CASE_SERIALIZER.from_json({"Foo": 1}, Dict[str, int]) == {"Foo": 1}
