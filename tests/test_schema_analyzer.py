"""
Unit tests for SchemaAnalyzer
"""
import gc
from datetime import datetime

import pytest

from docfactory.analyzer import AnalysisOptions, SchemaAnalyzer, complexity_for, infer_domain, pattern
from docfactory.analyzer.schema_analyzer import MAX_CACHED_ANALYSES
from docfactory.config import FactorySettings
from docfactory.exceptions import ConfigurationError
from docfactory.models import Complexity, FieldType, RelationshipKind
from docfactory.schema import ObjectId, Schema


USER_SCHEMA = {
    "_id": ObjectId,
    "__v": int,
    "name": {"type": str, "required": True},
    "email": {"type": str, "required": True, "unique": True},
    "age": {"type": int, "min": 18, "max": 65},
    "role": {"type": str, "enum": ["user", "admin"], "default": "user"},
    "createdAt": datetime,
}


class TestSchemaAnalyzer:
    """Test cases for SchemaAnalyzer"""

    def setup_method(self):
        """Set up a fresh analyzer for each test"""
        self.analyzer = SchemaAnalyzer(FactorySettings())

    def test_identity_fields_are_skipped(self):
        """Primary key and version counter never appear in the analysis"""
        analysis = self.analyzer.analyze(Schema(USER_SCHEMA, name="User"))

        assert "_id" not in analysis.fields
        assert "__v" not in analysis.fields
        assert list(analysis.fields) == ["name", "email", "age", "role", "createdAt"]

    def test_field_lists(self):
        """Required, unique and relationship lists follow the fields"""
        analysis = self.analyzer.analyze(Schema(USER_SCHEMA, name="User"))

        assert analysis.required_fields == ["name", "email"]
        assert analysis.unique_fields == ["email"]
        assert analysis.relationship_fields == []

    def test_defaults_disable_auto_generation(self):
        """A field with a default is not auto-generated"""
        analysis = self.analyzer.analyze(Schema(USER_SCHEMA, name="User"))
        role = analysis.get("role")

        assert role.has_default is True
        assert role.default_value == "user"
        assert role.auto_generate is False
        assert analysis.get("name").auto_generate is True

    def test_types_and_hints(self):
        """Types are classified and hints prefer pattern generators"""
        analysis = self.analyzer.analyze(Schema(USER_SCHEMA, name="User"))

        assert analysis.get("age").type == FieldType.NUMBER
        assert analysis.get("createdAt").type == FieldType.DATE
        assert analysis.get("email").generator_hint == "faker.email"
        assert analysis.get("email").patterns == ["email"]
        assert analysis.get("createdAt").generator_hint == "type:date"

    def test_nested_paths_and_depth(self):
        """Plain nesting flattens to dotted paths and increases depth"""
        schema = Schema({"profile": {"bio": str, "social": {"twitter": str}}})

        analysis = self.analyzer.analyze(schema)

        assert list(analysis.fields) == ["profile.bio", "profile.social.twitter"]
        assert analysis.depth == 3
        assert analysis.get("profile.social.twitter").name == "twitter"

    def test_relationships_and_nested_analysis(self):
        """References, embedded and subdocument fields are detected"""
        address = Schema({"city": str, "zip": str}, name="Address")
        schema = Schema({
            "owner": {"type": ObjectId, "ref": "User"},
            "home": address,
            "history": [address],
        }, name="Account")

        analysis = self.analyzer.analyze(schema)

        assert analysis.get("owner").relationship.kind == RelationshipKind.REFERENCE
        assert analysis.get("home").relationship.kind == RelationshipKind.EMBEDDED
        assert analysis.get("history").relationship.kind == RelationshipKind.SUBDOCUMENT
        assert list(analysis.get("home").nested_analysis.fields) == ["city", "zip"]
        assert analysis.relationship_count == 3
        assert analysis.depth == 2

    def test_max_depth_stops_recursion(self):
        """Nested schemas beyond max_depth are not analyzed"""
        inner = Schema({"value": str}, name="Inner")
        schema = Schema({"child": inner})

        analysis = self.analyzer.analyze(schema, options=AnalysisOptions(max_depth=1))

        assert analysis.get("child").nested_analysis is None

    def test_relationship_inference_can_be_disabled(self):
        """Relationships are omitted when inference is off"""
        schema = Schema({"owner": {"type": ObjectId, "ref": "User"}})

        analysis = self.analyzer.analyze(schema, options=AnalysisOptions(infer_relationships=False))

        assert analysis.get("owner").relationship is None

    def test_cache_returns_same_object(self):
        """Repeated analysis of one schema hits the cache"""
        schema = Schema(USER_SCHEMA, name="User")

        first = self.analyzer.analyze(schema)
        second = self.analyzer.analyze(schema)

        assert first is second
        assert self.analyzer.cache_size == 1

    def test_cache_keys_include_options(self):
        """Different options produce separate cache entries"""
        schema = Schema(USER_SCHEMA, name="User")

        first = self.analyzer.analyze(schema)
        second = self.analyzer.analyze(schema, options=AnalysisOptions(include_examples=True))

        assert first is not second
        assert self.analyzer.cache_size == 2

    def test_caching_disabled(self):
        """With caching off every call re-analyzes"""
        schema = Schema(USER_SCHEMA, name="User")
        options = AnalysisOptions(enable_caching=False)

        assert self.analyzer.analyze(schema, options=options) is not self.analyzer.analyze(schema, options=options)
        assert self.analyzer.cache_size == 0

    def test_add_pattern_clears_cache(self):
        """Custom patterns apply to subsequent analyses"""
        schema = Schema({"sku": str}, name="Product")
        self.analyzer.analyze(schema)

        self.analyzer.add_pattern(pattern("sku", r"^sku$", "product", 0.6, "custom.sku"))
        analysis = self.analyzer.analyze(schema)

        assert analysis.get("sku").generator_hint == "custom.sku"

    def test_transient_dict_schemas_get_their_own_analysis(self):
        """Short-lived dict schemas never receive another schema's cached analysis"""
        for i in range(50):
            analysis = self.analyzer.analyze({f"field_{i}": {"type": str}})
            gc.collect()

            assert list(analysis.fields) == [f"field_{i}"]

    def test_schemas_sharing_a_definition_share_the_cache(self):
        """Wrapping one definition dict repeatedly reuses its analysis"""
        definition = {"title": str, "views": int}

        first = self.analyzer.analyze(Schema(definition))
        second = self.analyzer.analyze(Schema(definition))

        assert first is second
        assert self.analyzer.cache_size == 1

    def test_cache_is_bounded(self):
        """The oldest analyses are evicted once the cache is full"""
        for i in range(MAX_CACHED_ANALYSES + 10):
            self.analyzer.analyze({f"field_{i}": str})

        assert self.analyzer.cache_size == MAX_CACHED_ANALYSES

    def test_descriptions_and_examples(self):
        """Descriptions and examples are copied when enabled"""
        schema = Schema({"title": {"type": str, "description": "Headline", "examples": ["Hello"]}})

        analysis = self.analyzer.analyze(schema, options=AnalysisOptions(include_examples=True))

        assert analysis.get("title").description == "Headline"
        assert analysis.get("title").examples == ["Hello"]

    def test_analysis_is_immutable(self):
        """SchemaAnalysis cannot be reassigned after construction"""
        analysis = self.analyzer.analyze(Schema(USER_SCHEMA, name="User"))

        with pytest.raises(AttributeError):
            analysis.depth = 10

    def test_unsupported_schema(self):
        """Objects that are not schemas are rejected"""
        with pytest.raises(ConfigurationError):
            self.analyzer.analyze(42)


class TestComplexity:
    """Test cases for complexity and domain helpers"""

    @pytest.mark.parametrize("fields, relationships, depth, expected", [
        (5, 1, 2, Complexity.SIMPLE),
        (6, 1, 2, Complexity.MODERATE),
        (15, 5, 4, Complexity.MODERATE),
        (16, 0, 1, Complexity.COMPLEX),
        (3, 0, 5, Complexity.COMPLEX),
    ])
    def test_complexity_thresholds(self, fields, relationships, depth, expected):
        """Complexity follows the field, relationship and depth thresholds"""
        assert complexity_for(fields, relationships, depth) == expected

    def test_infer_domain(self):
        """Field names hint at the business domain"""
        analyzer = SchemaAnalyzer(FactorySettings())

        assert infer_domain(analyzer.analyze(Schema(USER_SCHEMA, name="User"))) == "user"
        assert infer_domain(analyzer.analyze(Schema({"price": float, "sku": str}))) == "product"
        assert infer_domain(analyzer.analyze(Schema({"foo": str}))) == "custom"
