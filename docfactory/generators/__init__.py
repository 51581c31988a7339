"""
Value generators and the registry that selects between them
"""
from .array import ArrayGenerator
from .base import BaseGenerator
from .boolean import BooleanGenerator
from .date import BirthDateGenerator, DateGenerator, FutureDateGenerator, TimestampGenerator
from .mixed import MixedGenerator
from .number import AgeGenerator, NumberGenerator, PriceGenerator, RatingGenerator
from .objectid import ObjectIdGenerator, new_object_id
from .registry import (
    CustomGenerator,
    GeneratorConfig,
    GeneratorFactory,
    GeneratorRegistry,
    builtin_generators,
    create_default_registry,
    get_default_registry,
    specificity,
)
from .specialized import (
    BigIntGenerator,
    BufferGenerator,
    Decimal128Generator,
    MapGenerator,
    ObjectGenerator,
    UUIDGenerator,
)
from .string import EmailGenerator, PasswordGenerator, SlugGenerator, StringGenerator

__all__ = [
    'AgeGenerator',
    'ArrayGenerator',
    'BaseGenerator',
    'BigIntGenerator',
    'BirthDateGenerator',
    'BooleanGenerator',
    'BufferGenerator',
    'CustomGenerator',
    'DateGenerator',
    'Decimal128Generator',
    'EmailGenerator',
    'FutureDateGenerator',
    'GeneratorConfig',
    'GeneratorFactory',
    'GeneratorRegistry',
    'MapGenerator',
    'MixedGenerator',
    'NumberGenerator',
    'ObjectGenerator',
    'ObjectIdGenerator',
    'PasswordGenerator',
    'PriceGenerator',
    'RatingGenerator',
    'SlugGenerator',
    'StringGenerator',
    'TimestampGenerator',
    'UUIDGenerator',
    'builtin_generators',
    'create_default_registry',
    'get_default_registry',
    'new_object_id',
    'specificity',
]
