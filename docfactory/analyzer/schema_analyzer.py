"""
SchemaAnalyzer - walks a schema and produces per-field analysis
"""
import json
import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..config import FactorySettings
from ..models import Complexity, FieldAnalysis, FieldType, SchemaAnalysis
from ..schema import SchemaAdapter, SchemaField, resolve_schema
from .constraints import classify_type, detect_relationship, extract_constraints
from .patterns import (
    DEFAULT_PATTERNS,
    DEFAULT_SEMANTICS,
    PatternDefinition,
    SemanticDefinition,
    analyze_semantics,
    recognize_patterns,
)

logger = logging.getLogger(__name__)

# Primary key and version counter are never generated
IDENTITY_FIELDS = frozenset({"_id", "__v"})

# Oldest analyses are evicted first
MAX_CACHED_ANALYSES = 256

DOMAIN_KEYWORDS = [
    ("user", ["username", "email", "password", "profile", "avatar"]),
    ("product", ["price", "sku", "inventory", "category", "brand"]),
    ("order", ["total", "quantity", "shipping", "payment", "status"]),
]


@dataclass
class AnalysisOptions:
    """Options that change the shape of an analysis"""
    max_depth: int = 5
    enable_caching: bool = True
    include_descriptions: bool = True
    include_examples: bool = False
    infer_relationships: bool = True

    @classmethod
    def from_settings(cls, settings: FactorySettings) -> 'AnalysisOptions':
        return cls(
            max_depth=settings.max_depth,
            enable_caching=settings.enable_caching,
            include_descriptions=settings.include_descriptions,
            include_examples=settings.include_examples,
            infer_relationships=settings.infer_relationships,
        )

    def cache_token(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def complexity_for(field_count: int, relationship_count: int, depth: int) -> Complexity:
    if field_count <= 5 and relationship_count <= 1 and depth <= 2:
        return Complexity.SIMPLE
    if field_count <= 15 and relationship_count <= 5 and depth <= 4:
        return Complexity.MODERATE
    return Complexity.COMPLEX


def infer_domain(analysis: SchemaAnalysis) -> str:
    """Coarse business domain guessed from field names"""
    names = [path.lower() for path in analysis.fields]
    for domain, keywords in DOMAIN_KEYWORDS:
        if any(k in name for name in names for k in keywords):
            return domain
    return "custom"


class SchemaAnalyzer:
    """
    Analyzes schemas field by field: type, constraints, relationships,
    name patterns and semantics
    """

    def __init__(self, config: Optional[FactorySettings] = None):
        self.config = config or FactorySettings.from_env()
        self.patterns: List[PatternDefinition] = list(DEFAULT_PATTERNS)
        self.semantics: List[SemanticDefinition] = list(DEFAULT_SEMANTICS)
        self._cache: Dict[Tuple[int, str, str], Tuple[Any, SchemaAnalysis]] = {}
        self._lock = threading.RLock()
        logger.info("SchemaAnalyzer initialized")

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self):
        with self._lock:
            self._cache.clear()
        logger.debug("Schema analysis cache cleared")

    def add_pattern(self, definition: PatternDefinition):
        with self._lock:
            self.patterns.append(definition)
            self._cache.clear()

    def add_semantic(self, definition: SemanticDefinition):
        with self._lock:
            self.semantics.append(definition)
            self._cache.clear()

    def analyze(self, schema: Any, model_name: Optional[str] = None,
                options: Optional[AnalysisOptions] = None) -> SchemaAnalysis:
        """
        Analyze a schema

        Args:
            schema: Schema, PydanticSchema, pydantic model class or dict
            model_name: Name used for the cache key and reporting
            options: Analysis options, defaults to the analyzer config

        Returns:
            SchemaAnalysis; cached calls return the same object
        """
        adapter = resolve_schema(schema)
        options = options or AnalysisOptions.from_settings(self.config)
        model_name = model_name or adapter.name

        source = adapter.identity()
        key = (id(source), model_name or "unknown", options.cache_token())
        if options.enable_caching:
            with self._lock:
                cached = self._cache.get(key)
            if cached is not None and cached[0] is source:
                logger.debug(f"Analysis cache hit for {model_name or 'unknown'}")
                return cached[1]

        analysis = self._analyze(adapter, model_name, options, level=1)
        logger.debug(f"Analyzed {model_name or 'schema'}: {analysis.field_count} fields, "
                     f"complexity={analysis.complexity.value}, depth={analysis.depth}")

        if options.enable_caching:
            with self._lock:
                # entries hold their source so its id cannot be reused while cached
                self._cache[key] = (source, analysis)
                while len(self._cache) > MAX_CACHED_ANALYSES:
                    del self._cache[next(iter(self._cache))]
        return analysis

    def _analyze(self, adapter: SchemaAdapter, model_name: Optional[str],
                 options: AnalysisOptions, level: int) -> SchemaAnalysis:
        fields: Dict[str, FieldAnalysis] = {}
        depth = 1

        for schema_field in adapter.iter_fields():
            if schema_field.path in IDENTITY_FIELDS:
                continue
            analysis = self._analyze_field(schema_field, options, level)
            fields[schema_field.path] = analysis

            segments = len(schema_field.path.split('.'))
            depth = max(depth, segments)
            if analysis.nested_analysis is not None:
                depth = max(depth, segments + analysis.nested_analysis.depth)

        required = [p for p, f in fields.items() if f.required]
        unique = [p for p, f in fields.items() if f.unique]
        related = [p for p, f in fields.items() if f.relationship is not None]

        return SchemaAnalysis(
            fields=fields,
            required_fields=required,
            unique_fields=unique,
            relationship_fields=related,
            complexity=complexity_for(len(fields), len(related), depth),
            depth=depth,
            model_name=model_name,
        )

    def _analyze_field(self, schema_field: SchemaField, options: AnalysisOptions,
                       level: int) -> FieldAnalysis:
        field_type = classify_type(schema_field.declared_type)
        item_type = None
        if schema_field.is_array:
            field_type = FieldType.ARRAY
            item_type = classify_type(schema_field.item_type)

        constraints = extract_constraints(schema_field)
        relationship = detect_relationship(schema_field) if options.infer_relationships else None

        name = schema_field.name
        matches = recognize_patterns(name, self.patterns)
        semantic = analyze_semantics(name, field_type, self.semantics)

        nested = None
        if schema_field.nested is not None:
            if level < options.max_depth:
                nested = self._analyze(schema_field.nested, schema_field.nested.name, options, level + 1)
            else:
                logger.debug(f"Max depth {options.max_depth} reached at {schema_field.path}")

        analysis = FieldAnalysis(
            path=schema_field.path,
            type=field_type,
            required=constraints.required,
            unique=constraints.unique,
            is_array=schema_field.is_array,
            item_type=item_type,
            has_default=constraints.has_default,
            default_value=constraints.default_value,
            constraints=constraints,
            relationship=relationship,
            patterns=[m.name for m in matches],
            pattern_matches=matches,
            semantic=semantic.semantic,
            semantic_confidence=semantic.confidence,
            generator_hint=self._generator_hint(field_type, matches, semantic.semantic),
            auto_generate=not constraints.has_default and schema_field.path not in IDENTITY_FIELDS,
            nested_analysis=nested,
        )

        if options.include_descriptions:
            analysis.description = schema_field.options.get("description") or schema_field.options.get("desc")
        if options.include_examples:
            examples = schema_field.options.get("examples")
            if examples is None and "example" in schema_field.options:
                examples = [schema_field.options["example"]]
            analysis.examples = list(examples or [])

        return analysis

    @staticmethod
    def _generator_hint(field_type: FieldType, matches, semantic: Optional[str]) -> str:
        for match in matches:
            if match.generator:
                return match.generator
        if semantic:
            return f"semantic:{semantic}"
        return f"type:{field_type.value}"
