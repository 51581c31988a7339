"""
Unit tests for field-name patterns and semantics
"""
import pytest

from docfactory.analyzer.patterns import (
    DEFAULT_PATTERNS,
    SemanticDefinition,
    analyze_semantics,
    keyword_score,
    pattern,
    recognize_patterns,
)
from docfactory.models import FieldType


class TestRecognizePatterns:
    """Test cases for recognize_patterns"""

    def test_exact_match_is_boosted_and_clamped(self):
        """An exact name match multiplies the weight but never exceeds 1.0"""
        matches = recognize_patterns("email")

        assert matches[0].name == "email"
        assert matches[0].confidence == 1.0
        assert matches[0].generator == "faker.email"

    def test_non_exact_match_keeps_weight(self):
        """Alias names match with the plain weight"""
        matches = recognize_patterns("phone_number")

        assert [m.name for m in matches] == ["phone"]
        assert matches[0].confidence == pytest.approx(0.9)

    def test_unknown_name_has_no_matches(self):
        """Names outside the table produce no matches"""
        assert recognize_patterns("zorblax") == []

    def test_matches_are_ordered_by_confidence(self):
        """The highest confidence match comes first"""
        table = [
            pattern("low", r"^amount$", "misc", 0.3),
            pattern("high", r"amount", "currency", 0.6),
        ]

        matches = recognize_patterns("amount", table)

        assert [m.name for m in matches] == ["high", "low"]

    def test_case_insensitive(self):
        """Pattern matching ignores case"""
        assert recognize_patterns("EMAIL")[0].name == "email"

    def test_default_table_names(self):
        """The default table covers the common categories"""
        names = {p.name for p in DEFAULT_PATTERNS}
        assert {"email", "phone", "url", "name", "address", "date", "currency"} <= names


class TestAnalyzeSemantics:
    """Test cases for analyze_semantics"""

    def test_identifier_by_name(self):
        """Names containing id score as identifiers"""
        match = analyze_semantics("userId", FieldType.STRING)

        assert match.semantic == "identifier"
        assert match.confidence == pytest.approx(0.8)

    def test_identifier_by_type(self):
        """ObjectId fields are identifiers even without an id-like name"""
        match = analyze_semantics("owner", FieldType.OBJECTID)

        assert match.semantic == "identifier"
        assert match.confidence == pytest.approx(0.9)

    def test_financial(self):
        """Monetary names map to the financial semantic"""
        assert analyze_semantics("unit_price", FieldType.NUMBER).semantic == "financial"

    def test_below_threshold_is_rejected(self):
        """A score of exactly the threshold is not enough"""
        table = [SemanticDefinition("weak", ["foo"], keyword_score(["foo"], 0.5))]

        match = analyze_semantics("foo", FieldType.STRING, table)

        assert match.semantic is None
        assert match.confidence == 0.0

    def test_tie_keeps_earlier_definition(self):
        """Equal scores keep the first definition in table order"""
        table = [
            SemanticDefinition("first", ["foo"], keyword_score(["foo"], 0.7)),
            SemanticDefinition("second", ["foo"], keyword_score(["foo"], 0.7)),
        ]

        assert analyze_semantics("foo", FieldType.STRING, table).semantic == "first"
