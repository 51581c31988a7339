"""
Data models for schema analysis and document generation
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, TYPE_CHECKING

from pydantic import BaseModel

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .values import ValueSource


class FieldType(str, Enum):
    """Normalised field types"""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECTID = "objectid"
    ARRAY = "array"
    OBJECT = "object"
    MIXED = "mixed"
    BUFFER = "buffer"
    MAP = "map"
    DECIMAL128 = "decimal128"
    BIGINT = "bigint"
    UUID = "uuid"


class RelationshipKind(str, Enum):
    REFERENCE = "reference"
    EMBEDDED = "embedded"
    SUBDOCUMENT = "subdocument"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


@dataclass
class ValidationConstraints:
    """Constraints declared on a field, exactly as the schema states them"""
    required: bool = False
    unique: bool = False
    min: Optional[Any] = None
    max: Optional[Any] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    match: Optional[str] = None
    enum_values: List[Any] = field(default_factory=list)
    has_default: bool = False
    default_value: Any = None
    custom_validator: Optional[Callable[[Any], bool]] = None
    custom_message: Optional[str] = None

    @property
    def has_enum(self) -> bool:
        return bool(self.enum_values)

    @property
    def has_range(self) -> bool:
        return self.min is not None or self.max is not None


@dataclass
class Relationship:
    """How a field links to other records"""
    kind: RelationshipKind
    target: Optional[str] = None
    is_array: bool = False

    def __post_init__(self):
        if self.kind == RelationshipKind.REFERENCE and not self.target:
            raise ConfigurationError("Reference relationships require a target model name")


@dataclass
class PatternMatch:
    """A named field-name pattern that matched"""
    name: str
    confidence: float
    category: str
    generator: Optional[str] = None


@dataclass
class SemanticMatch:
    semantic: Optional[str] = None
    confidence: float = 0.0


@dataclass
class FieldAnalysis:
    """Analysis of a single schema path"""
    path: str
    type: FieldType
    required: bool = False
    unique: bool = False
    is_array: bool = False
    item_type: Optional[FieldType] = None
    has_default: bool = False
    default_value: Any = None
    constraints: ValidationConstraints = field(default_factory=ValidationConstraints)
    relationship: Optional[Relationship] = None
    patterns: List[str] = field(default_factory=list)
    pattern_matches: List[PatternMatch] = field(default_factory=list)
    semantic: Optional[str] = None
    semantic_confidence: float = 0.0
    generator_hint: Optional[str] = None
    auto_generate: bool = True
    nested_analysis: Optional['SchemaAnalysis'] = None
    description: Optional[str] = None
    examples: List[Any] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Last segment of the path"""
        return self.path.split('.')[-1]


@dataclass(frozen=True)
class SchemaAnalysis:
    """Aggregate analysis for one schema"""
    fields: Dict[str, FieldAnalysis]
    required_fields: List[str]
    unique_fields: List[str]
    relationship_fields: List[str]
    complexity: Complexity
    depth: int = 1
    model_name: Optional[str] = None

    @property
    def field_count(self) -> int:
        return len(self.fields)

    @property
    def relationship_count(self) -> int:
        return len(self.relationship_fields)

    def get(self, path: str) -> Optional[FieldAnalysis]:
        return self.fields.get(path)


@dataclass
class GenerationContext:
    """Per-field request handed to a generator"""
    field_path: str
    record_index: int
    total_count: int
    value_source: 'ValueSource'
    field_analysis: Optional[FieldAnalysis] = None
    constraints: Optional[ValidationConstraints] = None
    existing_values: Set[Any] = field(default_factory=set)
    related_values: Dict[str, Any] = field(default_factory=dict)
    model_name: Optional[str] = None

    @property
    def field_name(self) -> str:
        return self.field_path.split('.')[-1]

    @property
    def random(self):
        return self.value_source.random

    @property
    def faker(self):
        return self.value_source.faker

    def sibling(self, fragment: str) -> Any:
        """
        Find a value already generated for this record in the same parent
        whose field name contains ``fragment``

        Args:
            fragment: lowercase substring of the sibling field name

        Returns:
            The sibling value, or None when no sibling matches
        """
        parent = self.field_path.rpartition('.')[0]
        for path, value in self.related_values.items():
            if path == self.field_path or path.rpartition('.')[0] != parent:
                continue
            if fragment in path.split('.')[-1].lower():
                return value
        return None


class BatchFailure(BaseModel):
    """A persistence batch that could not be written"""
    batch_index: int
    size: int
    message: str


class FactoryResult(BaseModel):
    """Outcome of a bulk create"""
    documents: List[Dict[str, Any]] = []
    success_count: int = 0
    failed_count: int = 0
    errors: List[BatchFailure] = []
    execution_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.failed_count == 0
