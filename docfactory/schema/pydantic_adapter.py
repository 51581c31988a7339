"""
Schema adapter for pydantic models
"""
import enum
import types
import typing
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, Union

from pydantic import BaseModel

from .base import Map, Mixed, SchemaAdapter, SchemaField

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)

# annotated_types constraint attribute -> schema option
_METADATA_OPTIONS = {
    "ge": "min",
    "gt": "min",
    "le": "max",
    "lt": "max",
    "min_length": "min_length",
    "max_length": "max_length",
    "pattern": "match",
}


class PydanticSchema(SchemaAdapter):
    """Exposes the fields of a pydantic BaseModel class"""

    def __init__(self, model: Type[BaseModel], name: Optional[str] = None):
        self.model = model
        self.name = name or model.__name__

    def __repr__(self) -> str:
        return f"PydanticSchema({self.model.__name__})"

    def identity(self) -> Type[BaseModel]:
        return self.model

    def iter_fields(self) -> Iterator[SchemaField]:
        for field_name, info in self.model.model_fields.items():
            yield self._field(field_name, info)

    def _field(self, field_name: str, info) -> SchemaField:
        annotation = _strip_optional(info.annotation)
        options: Dict[str, Any] = {"required": info.is_required()}

        if info.default_factory is not None:
            options["default"] = info.default_factory
        elif not info.is_required() and info.default is not None:
            options["default"] = info.default

        for item in info.metadata:
            for attr, option in _METADATA_OPTIONS.items():
                value = getattr(item, attr, None)
                if value is not None:
                    options[option] = value

        extra = info.json_schema_extra
        if isinstance(extra, dict):
            options.update(extra)
        if info.description:
            options["description"] = info.description
        if info.examples:
            options["examples"] = list(info.examples)

        declared, enum_values = _declared_type(annotation)
        if enum_values:
            options["enum"] = enum_values

        origin = typing.get_origin(annotation)
        if origin in (list, set, tuple, List):
            args = typing.get_args(annotation)
            item = _strip_optional(args[0]) if args else Mixed
            item_type, item_enum = _declared_type(item)
            if item_enum:
                options["enum"] = item_enum
            nested = PydanticSchema(item) if _is_model(item) else None
            options["type"] = [item_type]
            return SchemaField(field_name, list, options, is_array=True,
                               item_type=item_type, nested=nested)

        if _is_model(annotation):
            nested = PydanticSchema(annotation)
            options["type"] = nested
            return SchemaField(field_name, SchemaAdapter, options, nested=nested)

        options["type"] = declared
        return SchemaField(field_name, declared, options)


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _strip_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in _UNION_TYPES:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
        return Mixed
    return annotation


def _declared_type(annotation: Any) -> Tuple[Any, List[Any]]:
    """Map an annotation to a declared type plus enum values, if any"""
    origin = typing.get_origin(annotation)

    if origin is typing.Literal:
        values = list(typing.get_args(annotation))
        return (type(values[0]) if values else str), values

    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        values = [member.value for member in annotation]
        return (type(values[0]) if values else str), values

    if origin in (dict, Dict):
        return Map, []

    if annotation is Any:
        return Mixed, []

    return annotation, []
