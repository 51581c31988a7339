"""
Number generators
"""
import logging
import re
from typing import Callable, List, Optional, Pattern, Tuple

from ..models import FieldType, GenerationContext, ValidationConstraints
from .base import BaseGenerator, compile_patterns

logger = logging.getLogger(__name__)

# (low, high, weight)
PRICE_BUCKETS = [(1, 50, 0.4), (50, 200, 0.3), (200, 1000, 0.2), (1000, 5000, 0.1)]
AGE_BUCKETS = [(18, 25, 0.2), (25, 35, 0.3), (35, 50, 0.3), (50, 70, 0.15), (70, 90, 0.05)]
QUANTITY_BUCKETS = [(1, 10, 0.5), (10, 100, 0.3), (100, 1000, 0.15), (1000, 10000, 0.05)]
PERCENTAGE_BUCKETS = [(0, 25, 0.2), (25, 50, 0.3), (50, 75, 0.3), (75, 100, 0.2)]
GRADES = list(range(60, 101, 5))

# case-sensitive so that "page" or "usage" do not count as ages
CAMEL_AGE = re.compile(r"[a-z]Age$")


def _price(ctx: GenerationContext, name: str) -> float:
    low, high = ctx.value_source.weighted_bucket(PRICE_BUCKETS)
    return ctx.value_source.uniform_float(low, high, 2)


def _age(ctx: GenerationContext, name: str) -> int:
    low, high = ctx.value_source.weighted_bucket(AGE_BUCKETS)
    return ctx.value_source.uniform_int(low, high)


def _quantity(ctx: GenerationContext, name: str) -> int:
    low, high = ctx.value_source.weighted_bucket(QUANTITY_BUCKETS)
    return ctx.value_source.uniform_int(low, high)


def _score(ctx: GenerationContext, name: str):
    source = ctx.value_source
    if "star" in name or "rating" in name:
        return source.uniform_float(1, 5, 1)
    if "percent" in name or "score" in name:
        return source.uniform_int(0, 100)
    if "grade" in name:
        return source.choice(GRADES)
    return source.uniform_int(1, 10)


def _percentage(ctx: GenerationContext, name: str) -> float:
    low, high = ctx.value_source.weighted_bucket(PERCENTAGE_BUCKETS)
    return ctx.value_source.uniform_float(low, high, 2)


def _coordinate(ctx: GenerationContext, name: str) -> float:
    source = ctx.value_source
    if "lat" in name:
        return source.uniform_float(-90, 90, 6)
    if "lng" in name or "lon" in name:
        return source.uniform_float(-180, 180, 6)
    return source.uniform_float(-1000, 1000, 2)


def _ranged(low: float, high: float, is_float: bool = False, precision: int = 1):
    def _produce(ctx: GenerationContext, name: str):
        if is_float:
            return ctx.value_source.uniform_float(low, high, precision)
        return ctx.value_source.uniform_int(low, high)
    return _produce


def _year(ctx: GenerationContext, name: str) -> int:
    return ctx.value_source.uniform_int(1900, ctx.value_source.now().year)


# Ordered (patterns, producer) table matched against the lowercased field name
NUMBER_SEMANTICS: List[Tuple[Tuple[Pattern, ...], Callable]] = [
    (compile_patterns(r"^(price|cost|amount|total|fee|charge|payment)$", r"price$", r"cost$", r"amount$"), _price),
    (compile_patterns(r"^(percent|percentage|ratio)$", r"percent"), _percentage),
    (compile_patterns(r"^(age|years)$", r"(^|_)age$") + (CAMEL_AGE,), _age),
    (compile_patterns(r"^(quantity|qty|count|num|number|stock|inventory)$", r"quantity$", r"count$"), _quantity),
    (compile_patterns(r"^(score|rating|rate|points|grade|stars)$", r"score$", r"rating$"), _score),
    (compile_patterns(r"^(lat|latitude|lng|lon|longitude|x|y|z)$", r"coordinate$"), _coordinate),
    (compile_patterns(r"weight", r"mass"), _ranged(0.1, 100, True)),
    (compile_patterns(r"height", r"length"), _ranged(0.1, 300, True)),
    (compile_patterns(r"temp"), _ranged(-40, 50, True)),
    (compile_patterns(r"year"), _year),
    (compile_patterns(r"month"), _ranged(1, 12)),
    (compile_patterns(r"day"), _ranged(1, 31)),
    (compile_patterns(r"hour"), _ranged(0, 23)),
    (compile_patterns(r"minute", r"second"), _ranged(0, 59)),
    (compile_patterns(r"size", r"bytes"), _ranged(1024, 100 * 1024 * 1024)),
    (compile_patterns(r"duration", r"timeout"), _ranged(1, 3600)),
    (compile_patterns(r"priority"), _ranged(1, 5)),
    (compile_patterns(r"level"), _ranged(1, 100)),
]


def _is_integral(value) -> bool:
    return float(value).is_integer()


class NumberGenerator(BaseGenerator):
    """Numbers from field-name semantics, declared ranges or a default range"""

    name = "number"
    priority = 10
    supported_types = (FieldType.NUMBER,)
    handles_enum = True
    handles_range = True

    default_min = 0
    default_max = 100
    precision = 2

    def produce(self, context: GenerationContext):
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)

        value = self.by_semantic(context.field_name, context)
        if value is not None and not self._in_range(value, constraints):
            value = None
        if value is None and constraints.has_range:
            value = self.by_constraints(constraints, context)
        if value is None:
            value = context.value_source.uniform_int(self.default_min, self.default_max)
        return self.apply_constraints(value, constraints)

    def by_semantic(self, field_name: str, context: GenerationContext):
        name = field_name.lower()
        for patterns, producer in NUMBER_SEMANTICS:
            if any(p.search(field_name) or p.search(name) for p in patterns):
                return producer(context, name)
        return None

    def by_constraints(self, constraints: ValidationConstraints, context: GenerationContext):
        low = constraints.min if constraints.min is not None else self.default_min
        high = constraints.max if constraints.max is not None else max(self.default_max, low)
        if high < low:
            low, high = high, low

        narrow = (high - low) <= 10
        if not _is_integral(low) or not _is_integral(high) or narrow:
            return context.value_source.uniform_float(low, high, self.precision)
        return context.value_source.uniform_int(int(low), int(high))

    @staticmethod
    def _in_range(value, constraints: ValidationConstraints) -> bool:
        if constraints.min is not None and value < constraints.min:
            return False
        if constraints.max is not None and value > constraints.max:
            return False
        return True

    @staticmethod
    def apply_constraints(value, constraints: ValidationConstraints):
        if constraints.min is not None and value < constraints.min:
            value = constraints.min
        if constraints.max is not None and value > constraints.max:
            value = constraints.max
        return value

    def validate_type_specific(self, value, constraints: ValidationConstraints) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return self._in_range(value, constraints)


class _NamedNumberGenerator(NumberGenerator):

    def can_handle(self, field_type, constraints=None, field_name=None) -> bool:
        if not self.supports(field_type):
            return False
        if constraints is not None and constraints.enum_values:
            return False
        return self.matches_name(field_name)

    def produce(self, context: GenerationContext):
        constraints = self.constraints_of(context)
        value = self.produce_named(context)
        if not self._in_range(value, constraints):
            value = self.by_constraints(constraints, context)
        return self.apply_constraints(value, constraints)

    def produce_named(self, context: GenerationContext):
        raise NotImplementedError


class PriceGenerator(_NamedNumberGenerator):
    name = "price"
    priority = 50
    field_patterns = compile_patterns(r"^(price|cost|amount|total|fee|charge|payment)$", r"price$")

    def produce_named(self, context: GenerationContext) -> float:
        return _price(context, context.field_name)


class AgeGenerator(_NamedNumberGenerator):
    name = "age"
    priority = 50
    field_patterns = compile_patterns(r"^age$", r"_age$") + (CAMEL_AGE,)

    def produce_named(self, context: GenerationContext) -> int:
        return _age(context, context.field_name)


class RatingGenerator(_NamedNumberGenerator):
    name = "rating"
    priority = 45
    field_patterns = compile_patterns(r"^(rating|score|stars|grade)$")

    def produce_named(self, context: GenerationContext):
        return _score(context, context.field_name.lower())
