"""
docfactory - schema-driven test document factories
"""
from .analyzer import SchemaAnalyzer
from .config import FactorySettings
from .exceptions import (
    ConfigurationError,
    FactoryError,
    GenerationError,
    PersistenceError,
    RelationshipError,
    ValidationError,
)
from .factory import (
    BuilderState,
    Factory,
    FactoryDefinition,
    FactoryHooks,
    InMemorySink,
    PersistenceSink,
    SQLAlchemySink,
)
from .generators import BaseGenerator, CustomGenerator, GeneratorFactory, GeneratorRegistry, get_default_registry
from .models import (
    FactoryResult,
    FieldAnalysis,
    FieldType,
    GenerationContext,
    RelationshipKind,
    SchemaAnalysis,
    ValidationConstraints,
)
from .plugin import FactoryPlugin, ModelDefinition, ModelRegistry, get_plugin, with_factory
from .schema import BigInt, Map, Mixed, ObjectId, PydanticSchema, Schema
from .values import ValueSource

__version__ = "0.1.0"

__all__ = [
    'BaseGenerator',
    'BigInt',
    'BuilderState',
    'ConfigurationError',
    'CustomGenerator',
    'Factory',
    'FactoryDefinition',
    'FactoryError',
    'FactoryHooks',
    'FactoryPlugin',
    'FactoryResult',
    'FactorySettings',
    'FieldAnalysis',
    'FieldType',
    'GenerationContext',
    'GenerationError',
    'GeneratorFactory',
    'GeneratorRegistry',
    'InMemorySink',
    'Map',
    'Mixed',
    'ModelDefinition',
    'ModelRegistry',
    'ObjectId',
    'PersistenceError',
    'PersistenceSink',
    'PydanticSchema',
    'RelationshipError',
    'RelationshipKind',
    'SQLAlchemySink',
    'Schema',
    'SchemaAnalysis',
    'SchemaAnalyzer',
    'ValidationConstraints',
    'ValidationError',
    'ValueSource',
    'get_default_registry',
    'get_plugin',
    'with_factory',
]
