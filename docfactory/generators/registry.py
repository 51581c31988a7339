"""
GeneratorRegistry - catalogue of generators with priority-based selection
"""
import inspect
import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..exceptions import ConfigurationError
from ..models import FieldType, GenerationContext, ValidationConstraints
from .array import ArrayGenerator
from .base import BaseGenerator
from .boolean import BooleanGenerator
from .date import BirthDateGenerator, DateGenerator, FutureDateGenerator, TimestampGenerator
from .mixed import MixedGenerator
from .number import AgeGenerator, NumberGenerator, PriceGenerator, RatingGenerator
from .objectid import ObjectIdGenerator
from .specialized import (
    BigIntGenerator,
    BufferGenerator,
    Decimal128Generator,
    MapGenerator,
    ObjectGenerator,
    UUIDGenerator,
)
from .string import EmailGenerator, PasswordGenerator, SlugGenerator, StringGenerator

logger = logging.getLogger(__name__)

ENUM_BONUS = 10
REGEX_BONUS = 10
RANGE_BONUS = 5


@dataclass
class GeneratorConfig:
    """Registration-time overrides"""
    priority: Optional[int] = None
    enabled: bool = True
    options: Dict[str, Any] = field(default_factory=dict)


def specificity(generator: BaseGenerator, constraints: Optional[ValidationConstraints]) -> int:
    """Bonus for declared capabilities the constraints actually call for"""
    if constraints is None:
        return 0
    score = 0
    if constraints.enum_values and generator.handles_enum:
        score += ENUM_BONUS
    if constraints.match and generator.handles_regex:
        score += REGEX_BONUS
    if (constraints.has_range or constraints.min_length is not None
            or constraints.max_length is not None) and generator.handles_range:
        score += RANGE_BONUS
    return score


class GeneratorRegistry:
    """
    Named generators with a per-type candidate cache

    Mutations take the registry lock and drop the cache, so selection
    after a mutation always sees the new state.
    """

    def __init__(self, generators: Optional[Iterable[BaseGenerator]] = None):
        self._generators: Dict[str, BaseGenerator] = {}
        self._cache: Dict[FieldType, List[BaseGenerator]] = {}
        self._lock = threading.RLock()
        for generator in generators or []:
            self.register(generator.name, generator)

    def __len__(self) -> int:
        return len(self._generators)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def register(self, name: str, generator: BaseGenerator, config: Optional[GeneratorConfig] = None):
        """
        Register a generator under ``name``, replacing any previous one

        Raises:
            ConfigurationError: for a missing name or generator
        """
        if generator is None:
            raise ConfigurationError(f"Cannot register empty generator '{name}'", generator_name=name)
        if not name:
            raise ConfigurationError("Generator name is required")
        if not callable(getattr(generator, "produce", None)) or not callable(getattr(generator, "can_handle", None)):
            raise ConfigurationError(f"Generator '{name}' does not implement produce/can_handle",
                                     generator_name=name)

        with self._lock:
            generator.name = name
            if config is not None:
                if config.priority is not None:
                    generator.priority = config.priority
                generator.enabled = config.enabled
                generator.options.update(config.options)
            if name in self._generators:
                logger.warning(f"Replacing generator '{name}'")
                del self._generators[name]
            self._generators[name] = generator
            self._cache.clear()
        logger.debug(f"Registered generator '{name}' (priority={generator.priority})")

    def remove(self, name: str) -> bool:
        with self._lock:
            removed = self._generators.pop(name, None) is not None
            if removed:
                self._cache.clear()
        return removed

    def has(self, name: str) -> bool:
        return name in self._generators

    def get(self, name: str) -> Optional[BaseGenerator]:
        return self._generators.get(name)

    def names(self) -> List[str]:
        return list(self._generators)

    def clear(self):
        with self._lock:
            self._generators.clear()
            self._cache.clear()

    def set_enabled(self, name: str, enabled: bool):
        self.update_config(name, enabled=enabled)

    def update_config(self, name: str, priority: Optional[int] = None,
                      enabled: Optional[bool] = None, **options):
        with self._lock:
            generator = self._generators.get(name)
            if generator is None:
                raise ConfigurationError(f"Unknown generator '{name}'", generator_name=name)
            if priority is not None:
                generator.priority = priority
            if enabled is not None:
                generator.enabled = enabled
            generator.options.update(options)
            self._cache.clear()

    def get_all(self, field_type: FieldType) -> List[BaseGenerator]:
        """Enabled generators supporting ``field_type``, in registration order"""
        with self._lock:
            cached = self._cache.get(field_type)
            if cached is None:
                cached = [g for g in self._generators.values() if g.enabled and g.supports(field_type)]
                self._cache[field_type] = cached
            return list(cached)

    def get_best(self, field_type: FieldType, constraints: Optional[ValidationConstraints] = None,
                 field_name: Optional[str] = None) -> Optional[BaseGenerator]:
        """
        Pick the generator for a field

        Candidates are ordered by (priority, specificity) descending; equal
        keys keep registration order.

        Returns:
            The best generator, or None when nothing can handle the field
        """
        candidates = [g for g in self.get_all(field_type) if g.can_handle(field_type, constraints, field_name)]
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]
        ranked = sorted(candidates, key=lambda g: (g.priority, specificity(g, constraints)), reverse=True)
        return ranked[0]

    def get_multi_type_generators(self) -> List[BaseGenerator]:
        return [g for g in self._generators.values() if len(g.supported_types) > 1]

    def get_stats(self) -> Dict[str, Any]:
        generators = list(self._generators.values())
        by_type = Counter(t.value for g in generators for t in g.supported_types)
        return {
            "total": len(generators),
            "enabled": sum(1 for g in generators if g.enabled),
            "by_type": dict(by_type),
            "average_priority": (sum(g.priority for g in generators) / len(generators)) if generators else 0.0,
            "cached_types": len(self._cache),
        }


def builtin_generators() -> List[BaseGenerator]:
    return [
        StringGenerator(),
        EmailGenerator(),
        PasswordGenerator(),
        SlugGenerator(),
        NumberGenerator(),
        PriceGenerator(),
        AgeGenerator(),
        RatingGenerator(),
        DateGenerator(),
        TimestampGenerator(),
        BirthDateGenerator(),
        FutureDateGenerator(),
        BooleanGenerator(),
        ArrayGenerator(),
        MixedGenerator(),
        ObjectGenerator(),
        ObjectIdGenerator(),
        BufferGenerator(),
        MapGenerator(),
        UUIDGenerator(),
        Decimal128Generator(),
        BigIntGenerator(),
    ]


def create_default_registry() -> GeneratorRegistry:
    """A fresh registry holding every built-in generator"""
    return GeneratorRegistry(builtin_generators())


_default_registry: Optional[GeneratorRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> GeneratorRegistry:
    """Shared registry used when a builder is not given one"""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = create_default_registry()
        return _default_registry


class CustomGenerator(BaseGenerator):
    """Generator assembled from plain callables"""

    def __init__(self, name: str, field_types: Sequence[FieldType],
                 produce: Callable[[GenerationContext], Any],
                 can_handle: Optional[Callable[..., bool]] = None,
                 validate: Optional[Callable[[Any], bool]] = None,
                 priority: int = 10, asynchronous: Optional[bool] = None, **options):
        super().__init__(name=name, priority=priority, **options)
        self.supported_types = tuple(field_types)
        if asynchronous is None:
            asynchronous = inspect.iscoroutinefunction(produce)
        self.asynchronous = asynchronous
        self._produce = produce
        self._can_handle = can_handle
        self._validate = validate

    def can_handle(self, field_type, constraints=None, field_name=None) -> bool:
        if not self.supports(field_type):
            return False
        if self._can_handle is None:
            return not (constraints is not None and constraints.enum_values)
        return bool(self._can_handle(field_type, constraints, field_name))

    def produce(self, context: GenerationContext) -> Any:
        return self._produce(context)

    def validate_type_specific(self, value, constraints) -> bool:
        return self._validate(value) if self._validate else True


class GeneratorFactory:
    """Helpers for building ad-hoc generators"""

    @staticmethod
    def create_custom(name: str, field_types: Sequence[FieldType],
                      produce: Callable[[GenerationContext], Any],
                      can_handle: Optional[Callable[..., bool]] = None,
                      validate: Optional[Callable[[Any], bool]] = None,
                      priority: int = 10,
                      asynchronous: Optional[bool] = None) -> CustomGenerator:
        return CustomGenerator(name, field_types, produce, can_handle=can_handle,
                               validate=validate, priority=priority, asynchronous=asynchronous)

    @staticmethod
    def create_string_pattern(name: str, values: Sequence[str], priority: int = 20,
                              can_handle: Optional[Callable[..., bool]] = None) -> CustomGenerator:
        if not values:
            raise ConfigurationError(f"Generator '{name}' needs at least one value", generator_name=name)
        choices = list(values)
        return CustomGenerator(
            name, [FieldType.STRING],
            lambda ctx: ctx.value_source.choice(choices),
            can_handle=can_handle,
            validate=lambda value: value in choices,
            priority=priority,
        )

    @staticmethod
    def create_number_range(name: str, low: float, high: float, is_float: bool = False,
                            priority: int = 20,
                            can_handle: Optional[Callable[..., bool]] = None) -> CustomGenerator:
        if high < low:
            raise ConfigurationError(f"Invalid range [{low}, {high}] for generator '{name}'",
                                     generator_name=name)

        def _produce(ctx: GenerationContext):
            if is_float:
                return ctx.value_source.uniform_float(low, high, 2)
            return ctx.value_source.uniform_int(int(low), int(high))

        return CustomGenerator(
            name, [FieldType.NUMBER], _produce,
            can_handle=can_handle,
            validate=lambda value: low <= value <= high,
            priority=priority,
        )
