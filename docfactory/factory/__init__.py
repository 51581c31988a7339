"""
Document assembly, relationship stitching and persistence
"""
from .builder import BuilderState, Factory, FactoryDefinition, FactoryHooks
from .paths import get_path, has_path, set_path
from .persistence import InMemorySink, PersistenceSink, persist_in_batches
from .relationships import RelationshipStitcher
from .sql import SQLAlchemySink

__all__ = [
    'BuilderState',
    'Factory',
    'FactoryDefinition',
    'FactoryHooks',
    'InMemorySink',
    'PersistenceSink',
    'RelationshipStitcher',
    'SQLAlchemySink',
    'get_path',
    'has_path',
    'persist_in_batches',
    'set_path',
]
