"""
Dict-based document schema definitions
"""
from typing import Any, Dict, Iterator, Optional

from ..exceptions import ConfigurationError
from .base import Mixed, SchemaAdapter, SchemaField


class Schema(SchemaAdapter):
    """
    Document schema declared as a dict

    Example:
        Schema({
            "name": {"type": str, "required": True},
            "age": {"type": int, "min": 18, "max": 65},
            "tags": [str],
            "profile": {"bio": str},
            "owner": {"type": ObjectId, "ref": "User"},
        }, name="Account")
    """

    def __init__(self, definition: Dict[str, Any], name: Optional[str] = None):
        if not isinstance(definition, dict):
            raise ConfigurationError(f"Schema definition must be a dict, got {type(definition).__name__}")
        self.definition = definition
        self.name = name

    def __repr__(self) -> str:
        return f"Schema(name={self.name!r}, paths={self.paths})"

    def identity(self) -> Dict[str, Any]:
        # Schemas wrapping the same definition dict share cached analyses
        return self.definition

    def iter_fields(self) -> Iterator[SchemaField]:
        yield from self._walk(self.definition, "")

    def _walk(self, definition: Dict[str, Any], prefix: str) -> Iterator[SchemaField]:
        for key, entry in definition.items():
            path = f"{prefix}{key}"

            if isinstance(entry, list):
                yield self._array_field(path, entry, {})
            elif isinstance(entry, SchemaAdapter):
                yield SchemaField(path, Schema, {"type": entry}, nested=entry)
            elif isinstance(entry, dict):
                declared = entry.get("type")
                if declared is None or isinstance(declared, dict):
                    # plain nesting flattens into dotted paths
                    yield from self._walk(entry, f"{path}.")
                elif isinstance(declared, list):
                    yield self._array_field(path, declared, entry)
                elif isinstance(declared, SchemaAdapter):
                    yield SchemaField(path, Schema, dict(entry), nested=declared)
                else:
                    yield SchemaField(path, declared, dict(entry))
            else:
                yield SchemaField(path, entry, {"type": entry})

    def _array_field(self, path: str, items: list, options: Dict[str, Any]) -> SchemaField:
        options = dict(options)
        item = items[0] if items else Mixed
        nested = None

        if isinstance(item, SchemaAdapter):
            nested = item
        elif isinstance(item, dict) and "type" in item and not isinstance(item["type"], dict):
            # [{"type": ObjectId, "ref": "Item"}] declares options on the elements
            for key, value in item.items():
                if key != "type":
                    options.setdefault(key, value)
            item = item["type"]
            if isinstance(item, SchemaAdapter):
                nested = item
        elif isinstance(item, dict):
            nested = Schema(item)

        options["type"] = [item]
        return SchemaField(path, list, options, is_array=True, item_type=item, nested=nested)
