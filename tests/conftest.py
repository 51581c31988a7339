"""
Shared fixtures for docfactory tests
"""
import pytest

from docfactory.config import FactorySettings
from docfactory.generators import create_default_registry
from docfactory.models import FieldAnalysis, FieldType, GenerationContext, ValidationConstraints
from docfactory.values import ValueSource


def make_context(source, path, field_type=FieldType.STRING, constraints=None, item_type=None,
                 related=None, existing=None):
    """Build a GenerationContext for calling a generator directly"""
    constraints = constraints or ValidationConstraints()
    field = FieldAnalysis(
        path=path,
        type=field_type,
        required=constraints.required,
        unique=constraints.unique,
        is_array=field_type == FieldType.ARRAY,
        item_type=item_type,
        constraints=constraints,
    )
    return GenerationContext(
        field_path=path,
        record_index=0,
        total_count=1,
        value_source=source,
        field_analysis=field,
        constraints=constraints,
        existing_values=existing if existing is not None else set(),
        related_values=related or {},
    )


@pytest.fixture
def source():
    """Seeded value source"""
    return ValueSource(seed=42)


@pytest.fixture
def settings():
    """Seeded settings"""
    return FactorySettings(seed=42)


@pytest.fixture
def registry():
    """A fresh registry with the built-in generators"""
    return create_default_registry()
