"""
Date generators
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Pattern, Tuple

from ..models import FieldType, GenerationContext, ValidationConstraints
from ..values import as_datetime
from .base import BaseGenerator, compile_patterns

logger = logging.getLogger(__name__)

YEAR = 365


def _sibling_date(ctx: GenerationContext, fragment: str) -> Optional[datetime]:
    """A sibling value as a datetime, or None when it is not date-like"""
    try:
        return as_datetime(ctx.sibling(fragment))
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _created(ctx: GenerationContext) -> datetime:
    return ctx.value_source.past(2 * YEAR)


def _updated(ctx: GenerationContext) -> datetime:
    created = _sibling_date(ctx, "created")
    now = ctx.value_source.now()
    if created is None:
        return ctx.value_source.past(90)
    if created <= now:
        return ctx.value_source.date_between(created, now)
    return ctx.value_source.date_between(created, created + timedelta(days=90))


def _birth(ctx: GenerationContext) -> datetime:
    now = ctx.value_source.now()
    return ctx.value_source.date_between(now - timedelta(days=80 * YEAR), now - timedelta(days=18 * YEAR))


def _expiry(ctx: GenerationContext) -> datetime:
    now = ctx.value_source.now()
    return ctx.value_source.date_between(now + timedelta(days=30), now + timedelta(days=5 * YEAR))


def _start(ctx: GenerationContext) -> datetime:
    now = ctx.value_source.now()
    return ctx.value_source.date_between(now - timedelta(days=YEAR), now + timedelta(days=YEAR))


def _end(ctx: GenerationContext) -> datetime:
    start = _sibling_date(ctx, "start")
    if start is not None:
        return ctx.value_source.date_between(start, start + timedelta(days=2 * YEAR))
    return ctx.value_source.future(YEAR)


def _due(ctx: GenerationContext) -> datetime:
    now = ctx.value_source.now()
    return ctx.value_source.date_between(now + timedelta(days=7), now + timedelta(days=180))


# Ordered (pattern, producer) table matched against the raw field name; primary meanings first
DATE_SEMANTICS: List[Tuple[Pattern, Callable[[GenerationContext], datetime]]] = [
    (re.compile(r"created", re.IGNORECASE), _created),
    (re.compile(r"updated|modified", re.IGNORECASE), _updated),
    (re.compile(r"birth|dob", re.IGNORECASE), _birth),
    (re.compile(r"expir", re.IGNORECASE), _expiry),
    (re.compile(r"start", re.IGNORECASE), _start),
    # "end" as a word of its own: endDate, end_date, periodEnd; not weekend or calendar
    (re.compile(r"(^|_)[Ee]nd(s|ed)?($|_|[A-Z])|[a-z0-9]End(s|ed)?($|_|[A-Z])"), _end),
    (re.compile(r"due|deadline", re.IGNORECASE), _due),
    (re.compile(r"publish", re.IGNORECASE), lambda ctx: ctx.value_source.past(2 * YEAR)),
    (re.compile(r"schedul", re.IGNORECASE), lambda ctx: ctx.value_source.future(YEAR / 2)),
    (re.compile(r"login|seen|visit", re.IGNORECASE), lambda ctx: ctx.value_source.past(30)),
    (re.compile(r"register|signup|joined", re.IGNORECASE), lambda ctx: ctx.value_source.past(3 * YEAR)),
    (re.compile(r"timestamp|time", re.IGNORECASE), lambda ctx: ctx.value_source.past(7)),
]


class DateGenerator(BaseGenerator):
    """Dates in windows chosen from the field name or declared bounds"""

    name = "date"
    priority = 10
    supported_types = (FieldType.DATE,)
    handles_enum = True
    handles_range = True

    def produce(self, context: GenerationContext) -> datetime:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)

        value = self.by_semantic(context.field_name, context)
        if value is None or not self._in_range(value, constraints):
            value = self.by_constraints(constraints, context) if constraints.has_range else value
        if value is None:
            now = context.value_source.now()
            value = context.value_source.date_between(now - timedelta(days=5 * YEAR), now + timedelta(days=2 * YEAR))
        return self.apply_constraints(value, constraints)

    def by_semantic(self, name: str, context: GenerationContext) -> Optional[datetime]:
        for pattern, producer in DATE_SEMANTICS:
            if pattern.search(name):
                return producer(context)
        return None

    def by_constraints(self, constraints: ValidationConstraints, context: GenerationContext) -> datetime:
        now = context.value_source.now()
        low = as_datetime(constraints.min)
        high = as_datetime(constraints.max)
        if low is None:
            low = min(now, high) - timedelta(days=YEAR)
        if high is None:
            high = max(now, low) + timedelta(days=YEAR)
        return context.value_source.date_between(low, high)

    @staticmethod
    def _in_range(value: datetime, constraints: ValidationConstraints) -> bool:
        low, high = as_datetime(constraints.min), as_datetime(constraints.max)
        value = as_datetime(value)
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True

    @staticmethod
    def apply_constraints(value: datetime, constraints: ValidationConstraints) -> datetime:
        low, high = as_datetime(constraints.min), as_datetime(constraints.max)
        if low is not None and high is not None:
            if as_datetime(value) < low:
                return low
            if as_datetime(value) > high:
                return high
        return value

    def validate_type_specific(self, value, constraints: ValidationConstraints) -> bool:
        if not isinstance(value, datetime):
            return False
        return self._in_range(value, constraints)


class _NamedDateGenerator(DateGenerator):

    def can_handle(self, field_type, constraints=None, field_name=None) -> bool:
        if not self.supports(field_type):
            return False
        if constraints is not None and constraints.enum_values:
            return False
        return self.matches_name(field_name)

    def produce(self, context: GenerationContext) -> datetime:
        constraints = self.constraints_of(context)
        value = self.produce_named(context)
        if not self._in_range(value, constraints):
            value = self.by_constraints(constraints, context)
        return self.apply_constraints(value, constraints)

    def produce_named(self, context: GenerationContext) -> datetime:
        raise NotImplementedError


class TimestampGenerator(_NamedDateGenerator):
    name = "timestamp"
    priority = 50
    field_patterns = compile_patterns(r"^(timestamp|ts)$")

    def produce_named(self, context: GenerationContext) -> datetime:
        return context.value_source.past(30)


class BirthDateGenerator(_NamedDateGenerator):
    name = "birthdate"
    priority = 50
    field_patterns = compile_patterns(r"^(birth|birthday|born|dob|birth_?date|date_?of_?birth)$")

    def produce_named(self, context: GenerationContext) -> datetime:
        return _birth(context)


class FutureDateGenerator(_NamedDateGenerator):
    name = "futuredate"
    priority = 45
    field_patterns = compile_patterns(r"^(expiry|expires|due|deadline|schedule)$")

    def produce_named(self, context: GenerationContext) -> datetime:
        return context.value_source.future(2 * YEAR)
