"""
String generators
"""
import logging
import re
from typing import Callable, List, Optional, Pattern, Tuple

from ..models import FieldType, GenerationContext, ValidationConstraints
from .base import BaseGenerator, compile_patterns

logger = logging.getLogger(__name__)

STATUS_VALUES = ["active", "inactive", "pending", "archived"]
CATEGORY_VALUES = [
    "Books", "Electronics", "Clothing", "Home", "Garden", "Sports",
    "Toys", "Beauty", "Grocery", "Automotive", "Health", "Music",
]
PRODUCT_ADJECTIVES = ["Ergonomic", "Rustic", "Sleek", "Handcrafted", "Practical", "Modern", "Refined"]
PRODUCT_MATERIALS = ["Steel", "Wooden", "Cotton", "Granite", "Plastic", "Rubber", "Bronze"]
PRODUCT_NOUNS = ["Chair", "Table", "Keyboard", "Shoes", "Lamp", "Gloves", "Bottle", "Backpack"]


def _address(ctx: GenerationContext, name: str) -> str:
    faker = ctx.faker
    if "street" in name:
        return faker.street_address()
    if "city" in name:
        return faker.city()
    if "state" in name:
        return faker.state()
    if "country" in name:
        return faker.country()
    if "zip" in name or "postal" in name:
        return faker.postcode()
    return faker.street_address()


def _person_name(ctx: GenerationContext, name: str) -> str:
    if name in ("title", "label"):
        return ctx.faker.sentence(nb_words=4).rstrip(".")
    if "first" in name:
        return ctx.faker.first_name()
    if "last" in name:
        return ctx.faker.last_name()
    return ctx.faker.name()


# (patterns, producer) checked in order against the lowercased field name
NAME_PATTERNS: List[Tuple[Tuple[Pattern, ...], Callable[[GenerationContext, str], str]]] = [
    (compile_patterns(r"^(email|e_mail|emailaddress|email_address)$", r"email"),
     lambda ctx, name: ctx.faker.email()),
    (compile_patterns(r"^(name|title|label)$", r"^(first|last|full)_?name$", r"^(?!user_?name$).*name$"),
     _person_name),
    (compile_patterns(r"^(url|website|site|link|homepage)$", r"url$"),
     lambda ctx, name: ctx.faker.url()),
    (compile_patterns(r"^(phone|telephone|tel|mobile|cell)$", r"^phone_?number$"),
     lambda ctx, name: ctx.faker.phone_number()),
    (compile_patterns(r"^(address|street|city|state|country|zip|postal)$", r"address$"),
     _address),
    (compile_patterns(r"^(description|desc|content|text|message|comment|body)$", r"description$"),
     lambda ctx, name: ctx.faker.paragraph()),
]

# (substrings, semantic) checked in order
SEMANTIC_KEYWORDS: List[Tuple[Tuple[str, ...], str]] = [
    (("username", "user_name"), "username"),
    (("password", "pwd"), "password"),
    (("slug",), "slug"),
    (("uuid", "guid"), "uuid"),
    (("color", "colour"), "color"),
    (("company", "organization"), "company"),
    (("product",), "product"),
    (("category", "type"), "category"),
    (("tag",), "tag"),
    (("status", "state"), "status"),
    (("currency",), "currency"),
    (("language", "lang"), "language"),
    (("timezone", "tz"), "timezone"),
]


def infer_string_semantic(field_name: str) -> Optional[str]:
    name = field_name.lower()
    for keywords, semantic in SEMANTIC_KEYWORDS:
        if any(k in name for k in keywords):
            return semantic
    return None


class StringGenerator(BaseGenerator):
    """
    Realistic strings driven by field name, then enum, regex and length
    constraints
    """

    name = "string"
    priority = 10
    supported_types = (FieldType.STRING,)
    handles_enum = True
    handles_regex = True
    handles_range = True

    default_min_length = 5
    default_max_length = 50

    def produce(self, context: GenerationContext) -> str:
        constraints = self.constraints_of(context)

        # a declared enum is a closed set
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)

        name = context.field_name.lower()
        value = self.by_pattern(name, context) or self.by_semantic(name, context)
        if not value and constraints.match:
            value = self.by_regex(constraints.match, context)
        if not value:
            value = self.generic(constraints, context)
        return self.apply_constraints(value, constraints, context)

    def by_pattern(self, name: str, context: GenerationContext) -> Optional[str]:
        for patterns, producer in NAME_PATTERNS:
            if any(p.search(name) for p in patterns):
                return producer(context, name)
        return None

    def by_semantic(self, name: str, context: GenerationContext) -> Optional[str]:
        semantic = infer_string_semantic(name)
        if semantic is None:
            return None

        faker, source = context.faker, context.value_source
        if semantic == "username":
            return faker.user_name()
        if semantic == "password":
            return faker.password(length=12)
        if semantic == "slug":
            return faker.slug(" ".join(faker.words(3)))
        if semantic == "uuid":
            return faker.uuid4()
        if semantic == "color":
            return faker.color_name()
        if semantic == "company":
            return faker.company()
        if semantic == "product":
            return " ".join([source.choice(PRODUCT_ADJECTIVES), source.choice(PRODUCT_MATERIALS),
                             source.choice(PRODUCT_NOUNS)])
        if semantic == "category":
            return source.choice(CATEGORY_VALUES)
        if semantic == "tag":
            return faker.word()
        if semantic == "status":
            return source.choice(STATUS_VALUES)
        if semantic == "currency":
            return faker.currency_code()
        if semantic == "language":
            return faker.language_code()
        if semantic == "timezone":
            return faker.timezone()
        return None

    def by_regex(self, expression: str, context: GenerationContext) -> str:
        """Best-effort values for a few recognisable regex shapes"""
        if "@" in expression:
            return context.faker.email()
        if "\\d" in expression:
            return context.faker.phone_number()
        if "http" in expression:
            return context.faker.url()
        return context.faker.word()

    def generic(self, constraints: ValidationConstraints, context: GenerationContext) -> str:
        min_length = constraints.min_length if constraints.min_length is not None else self.default_min_length
        max_length = constraints.max_length if constraints.max_length is not None else self.default_max_length
        max_length = max(max_length, min_length)
        target = context.value_source.uniform_int(min_length, max_length)

        result = ""
        while len(result) < target:
            word = context.faker.word()
            if len(result) + len(word) + 1 > target:
                break
            result = f"{result} {word}" if result else word

        if len(result) < min_length:
            result = " ".join(context.faker.words(max(1, -(-min_length // 5))))
        return result

    def apply_constraints(self, value: str, constraints: ValidationConstraints,
                          context: GenerationContext) -> str:
        result = self._fit_length(value, constraints, context)

        if constraints.match and not re.search(constraints.match, result):
            # one regeneration attempt, then the value is accepted as is
            result = self._fit_length(self.by_regex(constraints.match, context), constraints, context)
        return result

    def _fit_length(self, value: str, constraints: ValidationConstraints, context: GenerationContext) -> str:
        if constraints.min_length:
            while len(value) < constraints.min_length:
                value = f"{value} {context.faker.word()}"
        if constraints.max_length is not None and len(value) > constraints.max_length:
            value = value[:constraints.max_length]
        return value

    def validate_type_specific(self, value, constraints: ValidationConstraints) -> bool:
        if not isinstance(value, str):
            return False
        if constraints.min_length is not None and len(value) < constraints.min_length:
            return False
        if constraints.max_length is not None and len(value) > constraints.max_length:
            return False
        if constraints.match and not re.search(constraints.match, value):
            return False
        return True


class _NamedStringGenerator(StringGenerator):
    """String generator that claims fields by name and never touches enums"""

    def can_handle(self, field_type, constraints=None, field_name=None) -> bool:
        if not self.supports(field_type):
            return False
        if constraints is not None and constraints.enum_values:
            return False
        return self.matches_name(field_name)


class EmailGenerator(_NamedStringGenerator):
    name = "email"
    priority = 50
    field_patterns = compile_patterns(r"e_?mail")

    def can_handle(self, field_type, constraints=None, field_name=None) -> bool:
        if super().can_handle(field_type, constraints, field_name):
            return True
        return (self.supports(field_type) and constraints is not None
                and not constraints.enum_values and bool(constraints.match) and "@" in constraints.match)

    def produce(self, context: GenerationContext) -> str:
        constraints = self.constraints_of(context)
        return self.apply_constraints(context.faker.email(), constraints, context)


class PasswordGenerator(_NamedStringGenerator):
    name = "password"
    priority = 50
    field_patterns = compile_patterns(r"password", r"pwd", r"passwd")

    def produce(self, context: GenerationContext) -> str:
        constraints = self.constraints_of(context)
        length = max(constraints.min_length or 12, 8)
        if constraints.max_length is not None:
            length = min(length, constraints.max_length)
        return context.faker.password(length=max(length, 4), special_chars=True, digits=True,
                                      upper_case=True, lower_case=True)


class SlugGenerator(_NamedStringGenerator):
    name = "slug"
    priority = 40
    field_patterns = compile_patterns(r"slug", r"permalink")

    def produce(self, context: GenerationContext) -> str:
        constraints = self.constraints_of(context)
        slug = context.faker.slug(" ".join(context.faker.words(3)))
        return self.apply_constraints(slug, constraints, context)
