"""
Schema analysis: patterns, constraints and the analyzer
"""
from .constraints import classify_type, detect_relationship, extract_constraints
from .patterns import (
    DEFAULT_PATTERNS,
    DEFAULT_SEMANTICS,
    PatternDefinition,
    SemanticDefinition,
    analyze_semantics,
    pattern,
    recognize_patterns,
)
from .schema_analyzer import IDENTITY_FIELDS, AnalysisOptions, SchemaAnalyzer, complexity_for, infer_domain

__all__ = [
    'AnalysisOptions',
    'DEFAULT_PATTERNS',
    'DEFAULT_SEMANTICS',
    'IDENTITY_FIELDS',
    'PatternDefinition',
    'SchemaAnalyzer',
    'SemanticDefinition',
    'analyze_semantics',
    'classify_type',
    'complexity_for',
    'detect_relationship',
    'extract_constraints',
    'infer_domain',
    'pattern',
    'recognize_patterns',
]
