"""
Schema introspection interface
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$")


class ObjectId(str):
    """Declared type for 24-character hex document identifiers"""

    @staticmethod
    def is_valid(value: Any) -> bool:
        return isinstance(value, str) and bool(OBJECT_ID_RE.match(value))


class Mixed:
    """Declared type for free-form values"""


class Map(dict):
    """Declared type for string-keyed maps"""


class BigInt(int):
    """Declared type for 64-bit integers"""


@dataclass
class SchemaField:
    """One declared path of a schema: (path, declared_type, options)"""
    path: str
    declared_type: Any
    options: Dict[str, Any] = field(default_factory=dict)
    is_array: bool = False
    item_type: Any = None
    nested: Optional['SchemaAdapter'] = None

    @property
    def name(self) -> str:
        return self.path.split('.')[-1]


class SchemaAdapter(ABC):
    """Interface every schema source exposes to the analyzer"""

    name: Optional[str] = None

    @abstractmethod
    def iter_fields(self) -> Iterator[SchemaField]:
        """
        Enumerate declared fields in declaration order

        Returns:
            Iterator of SchemaField triples; nested schemas are exposed
            through SchemaField.nested rather than flattened
        """
        pass

    def fields(self) -> List[SchemaField]:
        return list(self.iter_fields())

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.iter_fields()]

    def identity(self) -> Any:
        """Object whose identity keys analysis caches"""
        return self
