"""
Boolean generator
"""
from typing import List, Tuple

from ..models import FieldType, GenerationContext
from .base import BaseGenerator

DEFAULT_PROBABILITY = 0.5

# (substrings, probability of True), first match wins
BOOLEAN_PROBABILITIES: List[Tuple[Tuple[str, ...], float]] = [
    (("active", "enabled", "visible", "published"), 0.8),
    (("verified", "confirmed", "approved", "validated"), 0.7),
    (("premium", "paid", "pro", "vip"), 0.25),
    (("admin", "staff", "moderator", "superuser"), 0.1),
    (("notification", "alert", "email", "sms"), 0.75),
    (("private", "hidden", "secret", "confidential"), 0.5),
    (("public", "open", "searchable", "discoverable"), 0.85),
    (("deleted", "banned", "blocked", "suspended"), 0.15),
    (("featured", "highlighted", "promoted", "sticky"), 0.3),
    (("terms", "agreement", "consent", "accepted"), 0.9),
    (("beta", "experimental", "preview", "testing"), 0.4),
    (("online", "available", "connected", "status"), 0.8),
]


def probability_for(field_name: str) -> float:
    name = field_name.lower()
    for keywords, probability in BOOLEAN_PROBABILITIES:
        if any(k in name for k in keywords):
            return probability
    return DEFAULT_PROBABILITY


class BooleanGenerator(BaseGenerator):
    name = "boolean"
    priority = 50
    supported_types = (FieldType.BOOLEAN,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> bool:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        return context.value_source.chance(probability_for(context.field_name))

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, bool)
