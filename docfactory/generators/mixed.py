"""
Free-form value generator
"""
from typing import Any, Dict

from ..models import FieldType, GenerationContext
from .base import BaseGenerator

METADATA_TAGS = ["important", "draft", "published", "archived", "featured"]
METADATA_SOURCES = ["user", "system", "import", "api"]
THEMES = ["light", "dark", "auto"]
SETTINGS_LANGUAGES = ["en", "fr", "es", "de", "ja"]
MIXED_KINDS = ["string", "number", "boolean", "object", "array", "null"]


def metadata(ctx: GenerationContext) -> Dict[str, Any]:
    source = ctx.value_source
    return {
        "version": f"{source.uniform_int(0, 9)}.{source.uniform_int(0, 20)}.{source.uniform_int(0, 50)}",
        "createdBy": ctx.faker.name(),
        "tags": source.sample(METADATA_TAGS, source.uniform_int(1, 3)),
        "lastModified": source.past(30),
        "source": source.choice(METADATA_SOURCES),
    }


def settings(ctx: GenerationContext) -> Dict[str, Any]:
    source = ctx.value_source
    return {
        "notifications": source.chance(0.5),
        "theme": source.choice(THEMES),
        "language": source.choice(SETTINGS_LANGUAGES),
        "timezone": ctx.faker.timezone(),
        "privacy": {
            "public": source.chance(0.5),
            "searchable": source.chance(0.5),
            "showEmail": source.chance(0.5),
        },
    }


def attributes(ctx: GenerationContext) -> Dict[str, Any]:
    source = ctx.value_source
    result: Dict[str, Any] = {}
    for _ in range(source.uniform_int(2, 6)):
        key = ctx.faker.word()
        kind = source.choice(["string", "number", "boolean", "array"])
        if kind == "string":
            result[key] = " ".join(ctx.faker.words(source.uniform_int(1, 3)))
        elif kind == "number":
            result[key] = source.uniform_int(1, 1000)
        elif kind == "boolean":
            result[key] = source.chance(0.5)
        else:
            result[key] = ctx.faker.words(source.uniform_int(1, 4))
    return result


def content(ctx: GenerationContext) -> Dict[str, Any]:
    source = ctx.value_source
    kind = source.choice(["text", "rich", "structured"])
    if kind == "text":
        return {"type": "text", "value": "\n".join(ctx.faker.paragraphs(source.uniform_int(1, 3)))}
    if kind == "rich":
        paragraph = ctx.faker.paragraph()
        return {"type": "rich", "html": f"<p>{paragraph}</p>", "plain": paragraph}
    return {
        "type": "structured",
        "title": ctx.faker.sentence(),
        "sections": [
            {"heading": ctx.faker.sentence(nb_words=3), "body": ctx.faker.paragraph()}
            for _ in range(source.uniform_int(1, 3))
        ],
    }


NAMED_SHAPES = [
    (("metadata", "meta"), metadata),
    (("settings", "config"), settings),
    (("attributes", "props"), attributes),
    (("content", "data"), content),
]


class MixedGenerator(BaseGenerator):
    """Structured shapes for well-known names, otherwise any JSON-like value"""

    name = "mixed"
    priority = 10
    supported_types = (FieldType.MIXED,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> Any:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)

        name = context.field_name.lower()
        for keywords, producer in NAMED_SHAPES:
            if any(k in name for k in keywords):
                return producer(context)
        return self.random_value(context, allow_null=not constraints.required)

    def random_value(self, context: GenerationContext, allow_null: bool = True) -> Any:
        source = context.value_source
        kinds = MIXED_KINDS if allow_null else MIXED_KINDS[:-1]
        kind = source.choice(kinds)
        if kind == "string":
            return context.faker.word()
        if kind == "number":
            return source.uniform_int(1, 1000)
        if kind == "boolean":
            return source.chance(0.5)
        if kind == "object":
            return {"key": context.faker.word(), "value": source.uniform_int(1, 100)}
        if kind == "array":
            return context.faker.words(source.uniform_int(1, 4))
        return None
