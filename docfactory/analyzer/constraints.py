"""
Type classification, constraint extraction and relationship detection
"""
import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..models import FieldType, Relationship, RelationshipKind, ValidationConstraints
from ..schema.base import BigInt, Map, Mixed, ObjectId, SchemaAdapter, SchemaField

# Checked in order: bool and BigInt subclass int
_TYPE_CLASSES = [
    (bool, FieldType.BOOLEAN),
    (BigInt, FieldType.BIGINT),
    (ObjectId, FieldType.OBJECTID),
    (str, FieldType.STRING),
    (int, FieldType.NUMBER),
    (float, FieldType.NUMBER),
    (datetime, FieldType.DATE),
    (date, FieldType.DATE),
    (Decimal, FieldType.DECIMAL128),
    (uuid.UUID, FieldType.UUID),
    ((bytes, bytearray), FieldType.BUFFER),
    (Map, FieldType.MAP),
    (dict, FieldType.OBJECT),
    ((list, tuple, set), FieldType.ARRAY),
    (SchemaAdapter, FieldType.OBJECT),
    (Mixed, FieldType.MIXED),
]

_TYPE_NAMES = {
    "string": FieldType.STRING,
    "number": FieldType.NUMBER,
    "boolean": FieldType.BOOLEAN,
    "date": FieldType.DATE,
    "objectid": FieldType.OBJECTID,
    "array": FieldType.ARRAY,
    "buffer": FieldType.BUFFER,
    "map": FieldType.MAP,
    "decimal128": FieldType.DECIMAL128,
    "bigint": FieldType.BIGINT,
    "uuid": FieldType.UUID,
    "object": FieldType.OBJECT,
    "mixed": FieldType.MIXED,
}


def classify_type(declared: Any) -> FieldType:
    """Map a declared type to a FieldType, defaulting to MIXED"""
    if isinstance(declared, str):
        return _TYPE_NAMES.get(declared.lower(), FieldType.MIXED)
    if isinstance(declared, list):
        return FieldType.ARRAY
    if isinstance(declared, SchemaAdapter):
        return FieldType.OBJECT
    if isinstance(declared, type):
        for cls, field_type in _TYPE_CLASSES:
            if issubclass(declared, cls):
                return field_type
    return FieldType.MIXED


def _unwrap(option: Any) -> Any:
    """Options may be declared as (value, message)"""
    if isinstance(option, (tuple, list)) and len(option) == 2 and isinstance(option[1], str):
        return option[0]
    return option


def extract_constraints(field: SchemaField) -> ValidationConstraints:
    """Read declared constraints from a field's options"""
    opts = field.options
    constraints = ValidationConstraints(
        required=bool(_unwrap(opts.get("required", False))),
        unique=bool(opts.get("unique", False)),
        min=_unwrap(opts.get("min")),
        max=_unwrap(opts.get("max")),
        min_length=_unwrap(opts.get("min_length", opts.get("minlength"))),
        max_length=_unwrap(opts.get("max_length", opts.get("maxlength"))),
    )

    match = _unwrap(opts.get("match"))
    if match is not None:
        constraints.match = getattr(match, "pattern", match)

    declared_enum = opts.get("enum")
    if isinstance(declared_enum, type) and issubclass(declared_enum, enum.Enum):
        constraints.enum_values = [member.value for member in declared_enum]
    elif declared_enum:
        constraints.enum_values = list(declared_enum)

    if "default" in opts:
        constraints.has_default = True
        constraints.default_value = opts["default"]

    validator = opts.get("validate")
    if isinstance(validator, dict):
        constraints.custom_validator = validator.get("validator")
        constraints.custom_message = validator.get("message")
    elif isinstance(validator, (tuple, list)):
        constraints.custom_validator = validator[0]
        constraints.custom_message = validator[1] if len(validator) > 1 else None
    elif callable(validator):
        constraints.custom_validator = validator

    return constraints


def detect_relationship(field: SchemaField, path: Optional[str] = None) -> Optional[Relationship]:
    """
    Detect how a field relates to other documents

    A declared ``ref`` wins, then an embedded schema, then an array of
    sub-schemas.
    """
    ref = field.options.get("ref")
    if ref:
        target = ref if isinstance(ref, str) else getattr(ref, "__name__", str(ref))
        return Relationship(RelationshipKind.REFERENCE, target=target, is_array=field.is_array)
    if field.nested is not None and not field.is_array:
        return Relationship(RelationshipKind.EMBEDDED, target=field.nested.name)
    if field.nested is not None:
        return Relationship(RelationshipKind.SUBDOCUMENT, target=field.nested.name, is_array=True)
    return None
