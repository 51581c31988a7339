"""
Schema sources understood by the analyzer
"""
from typing import Any

from pydantic import BaseModel

from ..exceptions import ConfigurationError
from .base import BigInt, Map, Mixed, ObjectId, SchemaAdapter, SchemaField
from .definition import Schema
from .pydantic_adapter import PydanticSchema


def resolve_schema(obj: Any) -> SchemaAdapter:
    """Turn a schema-like object into a SchemaAdapter"""
    if isinstance(obj, SchemaAdapter):
        return obj
    if isinstance(obj, type) and issubclass(obj, BaseModel):
        return PydanticSchema(obj)
    if isinstance(obj, dict):
        return Schema(obj)
    raise ConfigurationError(f"Cannot introspect schema of type {type(obj).__name__}")


__all__ = [
    'BigInt',
    'Map',
    'Mixed',
    'ObjectId',
    'PydanticSchema',
    'Schema',
    'SchemaAdapter',
    'SchemaField',
    'resolve_schema',
]
