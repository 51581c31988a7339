"""
Generators for objects, binary data, maps, UUIDs, decimals and big integers
"""
import re
from typing import Any, Dict

from ..models import FieldType, GenerationContext
from .base import BaseGenerator
from .mixed import settings

UUID_V4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)
DECIMAL_RE = re.compile(r"^-?\d+(\.\d+)?$")
JPEG_HEADER = bytes([0xFF, 0xD8, 0xFF, 0xE0])

INT64_MAX = 2 ** 63 - 1


class ObjectGenerator(BaseGenerator):
    name = "object"
    priority = 50
    supported_types = (FieldType.OBJECT,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> Dict[str, Any]:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        faker = context.faker
        name = context.field_name.lower()
        if "address" in name:
            return {
                "street": faker.street_address(),
                "city": faker.city(),
                "state": faker.state(),
                "zipCode": faker.postcode(),
                "country": faker.country(),
            }
        if "contact" in name:
            return {"email": faker.email(), "phone": faker.phone_number(), "website": faker.url()}
        if "profile" in name:
            return {
                "firstName": faker.first_name(),
                "lastName": faker.last_name(),
                "avatar": faker.image_url(width=200, height=200),
                "bio": faker.paragraph(),
            }
        if "settings" in name or "config" in name:
            return settings(context)
        return {
            "id": faker.uuid4(),
            "name": " ".join(faker.words(context.value_source.uniform_int(1, 3))),
            "value": faker.sentence(),
            "createdAt": context.value_source.past(30),
        }

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, dict)


class BufferGenerator(BaseGenerator):
    name = "buffer"
    priority = 50
    supported_types = (FieldType.BUFFER,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> bytes:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        name = context.field_name.lower()
        if "image" in name or "photo" in name:
            return JPEG_HEADER + context.faker.pystr(min_chars=100, max_chars=100).encode("ascii")
        if "file" in name or "document" in name:
            return "\n".join(context.faker.paragraphs(3)).encode("utf-8")
        size = context.value_source.uniform_int(10, 500)
        return context.faker.pystr(min_chars=size, max_chars=size).encode("ascii")

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, (bytes, bytearray))


class MapGenerator(BaseGenerator):
    name = "map"
    priority = 50
    supported_types = (FieldType.MAP,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> Dict[str, Any]:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        source, faker = context.value_source, context.faker
        name = context.field_name.lower()
        if "settings" in name or "preferences" in name:
            return {
                "theme": source.choice(["light", "dark"]),
                "language": source.choice(["en", "es", "fr"]),
                "notifications": source.chance(0.5),
            }
        if "metadata" in name or "meta" in name:
            return {
                "version": f"{source.uniform_int(0, 9)}.{source.uniform_int(0, 20)}.{source.uniform_int(0, 50)}",
                "author": faker.name(),
                "created": source.past(30).isoformat(),
            }
        if "attributes" in name or "properties" in name:
            return {
                "color": faker.color_name(),
                "size": source.choice(["small", "medium", "large"]),
                "weight": source.uniform_float(0.1, 10, 2),
            }

        result: Dict[str, Any] = {}
        for _ in range(source.uniform_int(2, 6)):
            kind = source.choice(["string", "number", "boolean"])
            key = faker.word()
            if kind == "string":
                result[key] = " ".join(faker.words(source.uniform_int(1, 3)))
            elif kind == "number":
                result[key] = source.uniform_float(0, 1000, 2)
            else:
                result[key] = source.chance(0.5)
        return result

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, dict) and all(isinstance(k, str) for k in value)


class UUIDGenerator(BaseGenerator):
    name = "uuid"
    priority = 50
    supported_types = (FieldType.UUID,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> str:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        return context.faker.uuid4()

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, str) and bool(UUID_V4_RE.match(value))


class Decimal128Generator(BaseGenerator):
    """High-precision decimals rendered as plain digit strings"""

    name = "decimal128"
    priority = 50
    supported_types = (FieldType.DECIMAL128,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> str:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        source = context.value_source
        name = context.field_name.lower()
        if any(k in name for k in ("price", "amount", "cost", "fee")):
            return f"{source.random.uniform(0.01, 99999.99):.4f}"
        if any(k in name for k in ("measurement", "scientific", "precision", "calculation")):
            return f"{source.random.uniform(0.000001, 9999999.999999):.8f}"
        return f"{source.random.uniform(0.01, 9999.99):.6f}"

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, str) and bool(DECIMAL_RE.match(value))


class BigIntGenerator(BaseGenerator):
    name = "bigint"
    priority = 50
    supported_types = (FieldType.BIGINT,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> int:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        source = context.value_source
        name = context.field_name.lower()
        if "id" in name or "identifier" in name:
            return source.uniform_int(10 ** 12, 10 ** 16 - 1)
        if "timestamp" in name or "time" in name:
            millis = int(source.now().timestamp() * 1000)
            return millis + source.uniform_int(-86400000, 86400000)
        if "size" in name or "bytes" in name or "length" in name:
            return source.uniform_int(1024, 10 * 1024 ** 3)
        return source.uniform_int(10 ** 6, INT64_MAX)

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)
