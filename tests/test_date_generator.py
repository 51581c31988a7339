"""
Unit tests for date generators
"""
from datetime import datetime, timedelta, timezone

from docfactory.generators import BirthDateGenerator, DateGenerator, FutureDateGenerator, TimestampGenerator
from docfactory.models import FieldType, ValidationConstraints
from docfactory.values import SEEDED_REFERENCE_TIME

from conftest import make_context

NOW = SEEDED_REFERENCE_TIME


class TestDateGenerator:
    """Test cases for DateGenerator"""

    def setup_method(self):
        """Set up the generator"""
        self.generator = DateGenerator()

    def test_created_in_past(self, source):
        """createdAt lies in the two years before now"""
        context = make_context(source, "createdAt", FieldType.DATE)

        for _ in range(20):
            value = self.generator.produce(context)
            assert NOW - timedelta(days=731) <= value <= NOW

    def test_updated_after_created(self, source):
        """updatedAt follows a sibling createdAt"""
        created = NOW - timedelta(days=10)
        context = make_context(source, "updatedAt", FieldType.DATE, related={"createdAt": created})

        for _ in range(20):
            assert created <= self.generator.produce(context) <= NOW

    def test_end_after_start(self, source):
        """endDate follows a sibling startDate in the same parent"""
        start = NOW + timedelta(days=3)
        context = make_context(source, "event.endDate", FieldType.DATE, related={"event.startDate": start})

        for _ in range(20):
            assert self.generator.produce(context) >= start

    def test_modified_follows_created(self, source):
        """lastModified is ordered after a sibling createdAt"""
        created = NOW - timedelta(days=10)
        context = make_context(source, "lastModified", FieldType.DATE, related={"createdAt": created})

        for _ in range(20):
            assert created <= self.generator.produce(context) <= NOW

    def test_updated_after_future_created(self, source):
        """A createdAt after the reference time still precedes updatedAt"""
        created = NOW + timedelta(days=400)
        context = make_context(source, "updatedAt", FieldType.DATE, related={"createdAt": created})

        for _ in range(20):
            assert self.generator.produce(context) >= created

    def test_unparseable_sibling_is_ignored(self, source):
        """A createdAt that is not date-like falls back to the plain window"""
        context = make_context(source, "updatedAt", FieldType.DATE, related={"createdAt": "yesterday"})

        assert NOW - timedelta(days=90) <= self.generator.produce(context) <= NOW

    def test_end_needs_a_word_boundary(self, source):
        """Names merely containing "end" do not follow a start sibling"""
        start = datetime(2000, 1, 1, tzinfo=timezone.utc)
        for name in ("weekend", "attendedAt", "calendar"):
            context = make_context(source, name, FieldType.DATE, related={"startDate": start})

            for _ in range(10):
                assert self.generator.produce(context) > start + timedelta(days=2 * 365)

        for name in ("endDate", "end_date", "periodEnd", "endsAt"):
            context = make_context(source, name, FieldType.DATE, related={"startDate": start})

            assert start <= self.generator.produce(context) <= start + timedelta(days=2 * 365)

    def test_sibling_in_other_parent_is_ignored(self, source):
        """Siblings are matched only within the same parent path"""
        context = make_context(source, "b.updatedAt", FieldType.DATE,
                               related={"a.createdAt": NOW + timedelta(days=400)})

        assert context.sibling("created") is None

    def test_declared_bounds(self, source):
        """Values honour declared bounds"""
        low = datetime(2020, 1, 1, tzinfo=timezone.utc)
        high = datetime(2020, 12, 31, tzinfo=timezone.utc)
        constraints = ValidationConstraints(min=low, max=high)
        context = make_context(source, "createdAt", FieldType.DATE, constraints)

        for _ in range(20):
            value = self.generator.produce(context)
            assert low <= value <= high
            assert self.generator.validate(value, constraints)

    def test_naive_bounds_are_treated_as_utc(self, source):
        """Naive datetimes in constraints are compared as UTC"""
        constraints = ValidationConstraints(min=datetime(2030, 1, 1), max=datetime(2030, 2, 1))
        context = make_context(source, "when", FieldType.DATE, constraints)

        value = self.generator.produce(context)

        assert datetime(2030, 1, 1, tzinfo=timezone.utc) <= value <= datetime(2030, 2, 1, tzinfo=timezone.utc)

    def test_enum_is_closed(self, source):
        """Enum dates come only from the declared set"""
        choices = [datetime(2021, 1, 1, tzinfo=timezone.utc), datetime(2022, 1, 1, tzinfo=timezone.utc)]
        context = make_context(source, "createdAt", FieldType.DATE, ValidationConstraints(enum_values=choices))

        assert all(self.generator.produce(context) in choices for _ in range(10))

    def test_validate_rejects_strings(self):
        """Only datetimes are valid dates"""
        assert self.generator.validate("2020-01-01", ValidationConstraints()) is False


class TestNamedDateGenerators:
    """Test cases for timestamp, birth date and future date generators"""

    def test_birth_date_is_adult(self, source):
        """Birth dates are 18 to 80 years back"""
        context = make_context(source, "dob", FieldType.DATE)

        value = BirthDateGenerator().produce(context)

        assert NOW - timedelta(days=80 * 365) <= value <= NOW - timedelta(days=18 * 365)

    def test_future_date(self, source):
        """Deadlines lie in the future"""
        assert FutureDateGenerator().produce(make_context(source, "deadline", FieldType.DATE)) >= NOW

    def test_timestamp_claims_by_name(self):
        """TimestampGenerator claims timestamp-like names only"""
        generator = TimestampGenerator()

        assert generator.can_handle(FieldType.DATE, ValidationConstraints(), "timestamp") is True
        assert generator.can_handle(FieldType.DATE, ValidationConstraints(), "lastModified") is False
        assert generator.can_handle(FieldType.DATE, ValidationConstraints(), "createdAt") is False
