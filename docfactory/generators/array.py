"""
Array generator
"""
from typing import Any, Callable, List, Optional, Tuple

from ..models import FieldType, GenerationContext
from .base import BaseGenerator
from .objectid import new_object_id

TAGS = [
    "python", "django", "flask", "fastapi", "react", "vue", "angular",
    "mongodb", "mysql", "postgresql", "redis", "docker", "kubernetes",
    "aws", "azure", "gcp", "git", "github", "gitlab", "jenkins",
    "testing", "ci-cd", "devops", "microservices", "api", "rest",
    "graphql", "websocket", "security", "performance",
]
SKILLS = [
    "Frontend Development", "Backend Development", "Full Stack Development",
    "Mobile Development", "DevOps", "Data Analysis", "Machine Learning",
    "UI/UX Design", "Project Management", "Team Leadership",
    "Problem Solving", "Communication", "Agile Methodologies",
    "Database Design", "System Architecture", "API Development",
    "Testing", "Code Review", "Mentoring", "Technical Writing",
]
CATEGORIES = [
    "Electronics", "Clothing", "Books", "Home & Garden", "Sports",
    "Automotive", "Health & Beauty", "Toys & Games", "Music",
    "Movies & TV", "Food & Beverage", "Travel", "Education",
    "Business", "Technology", "Arts & Crafts", "Pet Supplies",
]
ROLES = [
    "admin", "user", "moderator", "editor", "viewer", "contributor",
    "manager", "developer", "designer", "analyst", "support",
]
LANGUAGES = [
    "en", "es", "fr", "de", "it", "pt", "ru", "ja", "ko", "zh",
    "ar", "hi", "tr", "pl", "nl", "sv", "da", "no", "fi",
]

MAX_ENUM_ELEMENTS = 5


def _pick(items: List[str], low: int, high: int):
    def _produce(ctx: GenerationContext) -> List[str]:
        return ctx.value_source.sample(items, ctx.value_source.uniform_int(low, high))
    return _produce


def _repeat(producer: Callable[[GenerationContext], Any], low: int, high: int):
    def _produce(ctx: GenerationContext) -> List[Any]:
        return [producer(ctx) for _ in range(ctx.value_source.uniform_int(low, high))]
    return _produce


def _comment(ctx: GenerationContext) -> dict:
    return {
        "author": ctx.faker.name(),
        "text": " ".join(ctx.faker.sentences(ctx.value_source.uniform_int(1, 3))),
        "date": ctx.value_source.past(30),
        "rating": ctx.value_source.uniform_int(1, 5),
    }


# (substrings, producer) matched against the lowercased field name in order
ARRAY_CONTENTS: List[Tuple[Tuple[str, ...], Callable[[GenerationContext], List[Any]]]] = [
    (("tag", "label"), _pick(TAGS, 1, 5)),
    (("skill", "abilit"), _pick(SKILLS, 2, 6)),
    (("email",), _repeat(lambda ctx: ctx.faker.email(), 1, 3)),
    (("phone",), _repeat(lambda ctx: ctx.faker.phone_number(), 1, 3)),
    (("url", "link"), _repeat(lambda ctx: ctx.faker.url(), 1, 4)),
    (("name", "author", "contributor"), _repeat(lambda ctx: ctx.faker.name(), 1, 5)),
    (("categor", "type"), _pick(CATEGORIES, 1, 4)),
    (("role", "permission"), _pick(ROLES, 1, 3)),
    (("language", "locale"), _pick(LANGUAGES, 1, 4)),
    (("image", "file", "photo"), _repeat(lambda ctx: ctx.faker.image_url(width=800, height=600), 1, 6)),
    (("comment", "review"), _repeat(_comment, 0, 5)),
    (("score", "rating", "price"), _repeat(lambda ctx: ctx.value_source.uniform_float(0, 100, 2), 1, 8)),
]

# element producers for arrays whose name says nothing but whose items are typed
ITEM_PRODUCERS = {
    FieldType.STRING: lambda ctx: ctx.faker.word(),
    FieldType.NUMBER: lambda ctx: ctx.value_source.uniform_int(0, 100),
    FieldType.BOOLEAN: lambda ctx: ctx.value_source.chance(0.5),
    FieldType.DATE: lambda ctx: ctx.value_source.past(365),
    FieldType.OBJECTID: lambda ctx: new_object_id(ctx.value_source),
    FieldType.UUID: lambda ctx: ctx.faker.uuid4(),
}


def mixed_element(ctx: GenerationContext) -> Any:
    kind = ctx.value_source.choice(["string", "number", "boolean", "object"])
    if kind == "string":
        return ctx.faker.word()
    if kind == "number":
        return ctx.value_source.uniform_int(1, 100)
    if kind == "boolean":
        return ctx.value_source.chance(0.5)
    return {"key": ctx.faker.word(), "value": ctx.value_source.uniform_int(1, 100)}


class ArrayGenerator(BaseGenerator):
    """Lists whose contents follow the field name or the declared item type"""

    name = "array"
    priority = 10
    supported_types = (FieldType.ARRAY,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> List[Any]:
        constraints = self.constraints_of(context)
        source = context.value_source

        if constraints.enum_values:
            count = source.uniform_int(1, min(len(constraints.enum_values), MAX_ENUM_ELEMENTS))
            return source.sample(constraints.enum_values, count)

        name = context.field_name.lower()
        for keywords, producer in ARRAY_CONTENTS:
            if any(k in name for k in keywords):
                return producer(context)

        item_type = self._item_type(context)
        if item_type in ITEM_PRODUCERS:
            return _repeat(ITEM_PRODUCERS[item_type], 1, 5)(context)
        return _repeat(mixed_element, 1, 6)(context)

    @staticmethod
    def _item_type(context: GenerationContext) -> Optional[FieldType]:
        if context.field_analysis is None:
            return None
        return context.field_analysis.item_type

    def validate_type_specific(self, value, constraints) -> bool:
        return isinstance(value, list)
