"""
Field-name pattern and semantic tables

Both tables are ordered; earlier entries win ties.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern, Sequence

from ..models import FieldType, PatternMatch, SemanticMatch

SEMANTIC_THRESHOLD = 0.5
EXACT_MATCH_BOOST = 1.5


@dataclass
class PatternDefinition:
    """A named field-name pattern"""
    name: str
    regex: Pattern
    category: str
    weight: float = 0.5
    generator: Optional[str] = None

    def matches(self, field_name: str) -> bool:
        return bool(self.regex.search(field_name.lower()))

    def confidence(self, field_name: str) -> float:
        confidence = self.weight
        if field_name.lower() == self.name.lower():
            confidence *= EXACT_MATCH_BOOST
        return min(confidence, 1.0)


@dataclass
class SemanticDefinition:
    """A business meaning scored against (field name, field type)"""
    name: str
    keywords: List[str]
    score: Callable[[str, FieldType], float]
    compatible_types: List[FieldType] = field(default_factory=list)
    domain: Optional[str] = None


def pattern(name: str, expression: str, category: str, weight: float,
            generator: Optional[str] = None) -> PatternDefinition:
    return PatternDefinition(name, re.compile(expression, re.IGNORECASE), category, weight, generator)


def keyword_score(keywords: Sequence[str], score: float) -> Callable[[str, FieldType], float]:
    """Scoring function that returns ``score`` when any keyword is contained in the name"""
    def _score(name: str, field_type: FieldType) -> float:
        return score if any(k in name for k in keywords) else 0.0
    return _score


def _identifier_score(name: str, field_type: FieldType) -> float:
    if "id" in name or "key" in name:
        return 0.8
    if field_type == FieldType.OBJECTID:
        return 0.9
    return 0.0


DEFAULT_PATTERNS: List[PatternDefinition] = [
    pattern("email", r"^(email|e_mail|emailaddress|email_address)$", "email", 0.9, "faker.email"),
    pattern("phone", r"^(phone|telephone|tel|mobile|cell|phonenumber|phone_number)$", "phone", 0.9,
            "faker.phone_number"),
    pattern("url", r"^(url|website|site|link|homepage)$", "url", 0.8, "faker.url"),
    pattern("name", r"^(name|title|label|firstname|lastname|fullname|first_name|last_name|full_name)$",
            "name", 0.8, "faker.name"),
    pattern("address", r"^(address|street|city|state|country|zip|postal|location)$", "address", 0.7,
            "faker.street_address"),
    pattern("date", r"^(date|time|created|updated|birth|born|at|on)$", "date", 0.7, "faker.date_time"),
    pattern("currency", r"^(price|cost|amount|total|fee|charge|payment|salary|wage)$", "currency", 0.8,
            "faker.pricetag"),
]

DEFAULT_SEMANTICS: List[SemanticDefinition] = [
    SemanticDefinition(
        name="identifier",
        keywords=["id", "uuid", "guid", "key", "ref"],
        score=_identifier_score,
        compatible_types=[FieldType.STRING, FieldType.OBJECTID],
        domain="system",
    ),
    SemanticDefinition(
        name="personal_info",
        keywords=["name", "email", "phone", "address", "age", "birth"],
        score=keyword_score(["name", "email", "phone", "address", "age", "birth"], 0.8),
        compatible_types=[FieldType.STRING, FieldType.NUMBER, FieldType.DATE],
        domain="user",
    ),
    SemanticDefinition(
        name="content",
        keywords=["title", "description", "content", "text", "message", "comment"],
        score=keyword_score(["title", "description", "content", "text", "message"], 0.7),
        compatible_types=[FieldType.STRING],
        domain="content",
    ),
    SemanticDefinition(
        name="financial",
        keywords=["price", "cost", "amount", "total", "fee", "payment", "salary"],
        score=keyword_score(["price", "cost", "amount", "total", "fee", "payment"], 0.8),
        compatible_types=[FieldType.NUMBER, FieldType.DECIMAL128],
        domain="finance",
    ),
]


def recognize_patterns(field_name: str,
                       patterns: Optional[Sequence[PatternDefinition]] = None) -> List[PatternMatch]:
    """
    Match a field name against the pattern table

    Args:
        field_name: Field name (last path segment)
        patterns: Pattern table, defaults to DEFAULT_PATTERNS

    Returns:
        Matches ordered by confidence, highest first; ties keep table order
    """
    table = DEFAULT_PATTERNS if patterns is None else patterns
    matches = [
        PatternMatch(
            name=p.name,
            confidence=p.confidence(field_name),
            category=p.category,
            generator=p.generator,
        )
        for p in table
        if p.matches(field_name)
    ]
    return sorted(matches, key=lambda m: m.confidence, reverse=True)


def analyze_semantics(field_name: str, field_type: FieldType,
                      semantics: Optional[Sequence[SemanticDefinition]] = None) -> SemanticMatch:
    """
    Score a field against the semantic table

    The highest score strictly above SEMANTIC_THRESHOLD wins; on equal
    scores the earlier definition is kept.
    """
    table = DEFAULT_SEMANTICS if semantics is None else semantics
    name = field_name.lower()
    best = SemanticMatch()
    for definition in table:
        score = definition.score(name, field_type)
        if score > SEMANTIC_THRESHOLD and score > best.confidence:
            best = SemanticMatch(semantic=definition.name, confidence=score)
    return best
