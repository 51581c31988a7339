"""
Unit tests for boolean, array, mixed, identifier and specialised generators
"""
import re
from decimal import Decimal

import pytest

from docfactory.generators import (
    ArrayGenerator,
    BigIntGenerator,
    BooleanGenerator,
    BufferGenerator,
    Decimal128Generator,
    MapGenerator,
    MixedGenerator,
    ObjectGenerator,
    ObjectIdGenerator,
    UUIDGenerator,
    new_object_id,
)
from docfactory.generators.array import TAGS
from docfactory.generators.boolean import probability_for
from docfactory.models import FieldType, ValidationConstraints
from docfactory.schema import ObjectId
from docfactory.values import ValueSource

from conftest import make_context


class TestBooleanGenerator:
    """Test cases for BooleanGenerator"""

    def test_probabilities_by_name(self):
        """Field names shift the probability of True"""
        assert probability_for("isActive") == 0.8
        assert probability_for("isAdmin") == 0.1
        assert probability_for("flag") == 0.5

    def test_active_is_mostly_true(self, source):
        """isActive is true most of the time"""
        context = make_context(source, "isActive", FieldType.BOOLEAN)

        values = [BooleanGenerator().produce(context) for _ in range(400)]

        assert 0.65 < sum(values) / len(values) < 0.95


class TestArrayGenerator:
    """Test cases for ArrayGenerator"""

    def setup_method(self):
        """Set up the generator"""
        self.generator = ArrayGenerator()

    def test_enum_elements_are_closed(self, source):
        """Every element of an enum array is a declared value"""
        constraints = ValidationConstraints(enum_values=["red", "green", "blue"])
        context = make_context(source, "tags", FieldType.ARRAY, constraints)

        for _ in range(20):
            value = self.generator.produce(context)
            assert 1 <= len(value) <= 3
            assert set(value) <= {"red", "green", "blue"}

    def test_tags_from_vocabulary(self, source):
        """Tag arrays draw from the tag vocabulary without repeats"""
        value = self.generator.produce(make_context(source, "tags", FieldType.ARRAY))

        assert 1 <= len(value) <= 5
        assert set(value) <= set(TAGS)
        assert len(set(value)) == len(value)

    def test_typed_items(self, source):
        """Item types drive elements when the name says nothing"""
        context = make_context(source, "values", FieldType.ARRAY, item_type=FieldType.NUMBER)

        value = self.generator.produce(context)

        assert all(isinstance(v, int) for v in value)

    def test_object_id_items(self, source):
        """Arrays of identifiers hold valid identifiers"""
        context = make_context(source, "refs", FieldType.ARRAY, item_type=FieldType.OBJECTID)

        assert all(ObjectId.is_valid(v) for v in self.generator.produce(context))


class TestMixedGenerator:
    """Test cases for MixedGenerator"""

    def test_named_shapes(self, source):
        """metadata and settings get structured shapes"""
        generator = MixedGenerator()

        metadata = generator.produce(make_context(source, "metadata", FieldType.MIXED))
        settings = generator.produce(make_context(source, "settings", FieldType.MIXED))

        assert {"version", "createdBy", "tags", "lastModified", "source"} <= set(metadata)
        assert settings["theme"] in ("light", "dark", "auto")

    def test_required_never_null(self, source):
        """Required free-form fields are never None"""
        context = make_context(source, "blob", FieldType.MIXED, ValidationConstraints(required=True))

        assert all(MixedGenerator().produce(context) is not None for _ in range(100))


class TestObjectIdGenerator:
    """Test cases for identifier generation"""

    def test_format(self, source):
        """Identifiers are 24 lowercase hex characters"""
        value = ObjectIdGenerator().produce(make_context(source, "owner", FieldType.OBJECTID))

        assert re.match(r"^[0-9a-f]{24}$", value)
        assert ObjectIdGenerator().validate(value, ValidationConstraints())

    def test_unique_within_source(self, source):
        """Successive identifiers differ"""
        ids = {new_object_id(source) for _ in range(1000)}

        assert len(ids) == 1000

    def test_reproducible_with_seed(self):
        """Equal seeds give equal identifiers"""
        first = [new_object_id(ValueSource(seed=7)) for _ in range(1)]
        second = [new_object_id(ValueSource(seed=7)) for _ in range(1)]

        assert first == second

    def test_timestamp_prefix(self, source):
        """The first eight characters encode the reference time"""
        value = new_object_id(source)

        assert int(value[:8], 16) == int(source.now().timestamp())


class TestSpecializedGenerators:
    """Test cases for object, buffer, map, uuid, decimal and bigint generators"""

    def test_object_address_shape(self, source):
        """Address objects carry street and city"""
        value = ObjectGenerator().produce(make_context(source, "address", FieldType.OBJECT))

        assert isinstance(value, dict)
        assert ObjectGenerator().validate(value, ValidationConstraints())

    def test_buffer(self, source):
        """Buffers are bytes"""
        value = BufferGenerator().produce(make_context(source, "avatar", FieldType.BUFFER))

        assert isinstance(value, bytes)

    def test_map(self, source):
        """Maps are string-keyed dicts"""
        value = MapGenerator().produce(make_context(source, "labels", FieldType.MAP))

        assert isinstance(value, dict)
        assert all(isinstance(k, str) for k in value)

    def test_uuid_v4(self, source):
        """UUIDs are version 4"""
        value = UUIDGenerator().produce(make_context(source, "token", FieldType.UUID))

        assert UUIDGenerator().validate(value, ValidationConstraints())
        assert value[14] == "4"

    def test_decimal128_parses(self, source):
        """Decimal values are numeric strings"""
        value = Decimal128Generator().produce(make_context(source, "balance", FieldType.DECIMAL128))

        Decimal(value)
        assert Decimal128Generator().validate(value, ValidationConstraints())

    def test_bigint(self, source):
        """Big integers are ints within 64 bits"""
        value = BigIntGenerator().produce(make_context(source, "counter", FieldType.BIGINT))

        assert isinstance(value, int)
        assert -(2 ** 63) <= value < 2 ** 63

    @pytest.mark.parametrize("generator, field_type, choices", [
        (UUIDGenerator(), FieldType.UUID,
         ["6f1c2a3e-8b4d-4e7f-9a0b-1c2d3e4f5a6b", "0e9d8c7b-6a5f-4e3d-8c1b-0a9f8e7d6c5b"]),
        (ObjectIdGenerator(), FieldType.OBJECTID, ["0123456789abcdef01234567"]),
        (Decimal128Generator(), FieldType.DECIMAL128, ["1.50", "2.75"]),
        (BigIntGenerator(), FieldType.BIGINT, [9007199254740993, 9007199254740995]),
        (BufferGenerator(), FieldType.BUFFER, [b"\x00\x01", b"\xff"]),
        (MapGenerator(), FieldType.MAP, [{"tier": "gold"}, {"tier": "silver"}]),
        (ObjectGenerator(), FieldType.OBJECT, [{"kind": "a"}]),
    ])
    def test_enum_is_closed(self, source, generator, field_type, choices):
        """Declared enums restrict every specialised type to the declared set"""
        constraints = ValidationConstraints(enum_values=choices)
        context = make_context(source, "value", field_type, constraints)

        assert generator.can_handle(field_type, constraints, "value")
        for _ in range(10):
            assert generator.produce(context) in choices
