"""
Unit tests for persistence sinks and batched bulk creation
"""
import threading
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine
from sqlalchemy.pool import StaticPool

from docfactory.config import FactorySettings
from docfactory.exceptions import ConfigurationError, PersistenceError
from docfactory.factory import BuilderState, Factory, InMemorySink, PersistenceSink, SQLAlchemySink, persist_in_batches
from docfactory.generators import create_default_registry
from docfactory.schema import ObjectId, Schema

ARTICLE = Schema({
    "title": {"type": str, "required": True},
    "views": {"type": int, "min": 0, "max": 1000},
}, name="Article")


class TestInMemorySink:
    """Test cases for InMemorySink"""

    @pytest.mark.asyncio
    async def test_assigns_identifiers(self):
        """Inserted documents receive identifiers and keep their order"""
        sink = InMemorySink()

        saved = await sink.insert_many([{"n": 1}, {"n": 2}])

        assert [d["n"] for d in saved] == [1, 2]
        assert all(ObjectId.is_valid(d["_id"]) for d in saved)
        assert await sink.find(limit=1) == [saved[0]]

    @pytest.mark.asyncio
    async def test_keeps_existing_identifier(self):
        """Documents that already have an _id keep it"""
        sink = InMemorySink()

        saved = await sink.insert_many([{"_id": "given"}])

        assert saved[0]["_id"] == "given"


class TestPersistInBatches:
    """Test cases for persist_in_batches"""

    @pytest.mark.asyncio
    async def test_batches(self):
        """Documents are inserted in fixed-size batches"""
        sink = InMemorySink()
        documents = [{"n": i} for i in range(250)]

        result = await persist_in_batches(sink, documents, batch_size=100)

        assert sink.insert_calls == 3
        assert result.success_count == 250
        assert result.success is True

    @pytest.mark.asyncio
    async def test_ordered_flag_follows_mode(self):
        """continue_on_error switches the sink to unordered inserts"""
        sink = AsyncMock(spec=PersistenceSink)
        sink.insert_many.side_effect = lambda records, ordered: records

        await persist_in_batches(sink, [{"n": 1}, {"n": 2}, {"n": 3}], batch_size=2, continue_on_error=True)

        assert sink.insert_many.await_count == 2
        sink.insert_many.assert_awaited_with([{"n": 3}], ordered=False)

    @pytest.mark.asyncio
    async def test_abort_on_first_failure(self):
        """By default the first failed batch aborts with a partial result"""
        sink = InMemorySink(fail_batches={1})

        with pytest.raises(PersistenceError) as exc_info:
            await persist_in_batches(sink, [{"n": i} for i in range(30)], batch_size=10)

        assert exc_info.value.result.success_count == 10
        assert exc_info.value.result.failed_count == 10
        assert sink.insert_calls == 2

    @pytest.mark.asyncio
    async def test_continue_on_error_reports_failures(self):
        """Failed batches are skipped and reported"""
        sink = InMemorySink(fail_batches={1})

        result = await persist_in_batches(sink, [{"n": i} for i in range(30)], batch_size=10,
                                          continue_on_error=True)

        assert result.success_count == 20
        assert result.failed_count == 10
        assert [e.batch_index for e in result.errors] == [1]
        assert result.success is False
        assert len(sink) == 20


class TestBulkCreate:
    """Test cases for Factory.bulk_create"""

    def setup_method(self):
        """Set up settings and a registry"""
        self.settings = FactorySettings(seed=9, max_batch_size=50)
        self.registry = create_default_registry()

    def factory(self, sink=None):
        return Factory(ARTICLE, settings=self.settings, registry=self.registry, sink=sink)

    @pytest.mark.asyncio
    async def test_bulk_create(self):
        """bulk_create persists every document and reports timing"""
        sink = InMemorySink()

        result = await self.factory(sink).bulk_create(120, batch_size=40)

        assert result.success_count == 120
        assert sink.insert_calls == 3
        assert result.execution_time >= 0

    @pytest.mark.asyncio
    async def test_batch_size_capped(self):
        """Batch sizes above max_batch_size are capped"""
        sink = InMemorySink()

        await self.factory(sink).bulk_create(120, batch_size=100)

        assert sink.insert_calls == 3

    @pytest.mark.asyncio
    async def test_create_requires_sink(self):
        """create() without a sink is a configuration error"""
        with pytest.raises(ConfigurationError):
            await self.factory().create()

    @pytest.mark.asyncio
    async def test_state_after_create(self):
        """A successful create ends in PERSISTED"""
        factory = self.factory(InMemorySink())

        await factory.create(2)

        assert factory.state == BuilderState.PERSISTED

    @pytest.mark.asyncio
    async def test_failure_marks_factory_failed(self):
        """An aborted bulk insert leaves the factory FAILED"""
        factory = self.factory(InMemorySink(fail_batches={0}))

        with pytest.raises(PersistenceError):
            await factory.create(5)

        assert factory.state == BuilderState.FAILED

    @pytest.mark.asyncio
    async def test_continue_on_error(self):
        """Partial success is reported when continuing past failures"""
        sink = InMemorySink(fail_batches={0})

        result = await self.factory(sink).bulk_create(20, batch_size=10, continue_on_error=True)

        assert result.success_count == 10
        assert result.failed_count == 10


class TestSQLAlchemySink:
    """Test cases for SQLAlchemySink"""

    def setup_method(self):
        """Create an in-memory SQLite table"""
        self.engine = create_engine("sqlite://", poolclass=StaticPool,
                                    connect_args={"check_same_thread": False})
        metadata = MetaData()
        self.table = Table(
            "articles", metadata,
            Column("_id", String(24), primary_key=True),
            Column("title", String(200), nullable=False),
            Column("views", Integer),
        )
        metadata.create_all(self.engine)

    @pytest.mark.asyncio
    async def test_insert_and_find(self):
        """Rows round-trip through the table with generated identifiers"""
        sink = SQLAlchemySink(self.engine, self.table)

        saved = await sink.insert_many([{"title": "a", "views": 1, "ignored": True}, {"title": "b", "views": 2}])
        rows = await sink.find(limit=10)

        assert [r["title"] for r in rows] == ["a", "b"]
        assert all(ObjectId.is_valid(r["_id"]) for r in rows)
        assert saved[0]["_id"] == rows[0]["_id"]

    @pytest.mark.asyncio
    async def test_factory_create(self):
        """Factories persist into SQL tables"""
        sink = SQLAlchemySink(self.engine, self.table)
        factory = Factory(ARTICLE, settings=FactorySettings(seed=4), registry=create_default_registry(), sink=sink)

        await factory.create(7)

        assert len(await sink.find()) == 7

    @pytest.mark.asyncio
    async def test_statements_run_off_the_event_loop_thread(self):
        """Blocking engine calls are handed to the executor"""
        sink = SQLAlchemySink(self.engine, self.table)
        threads = []
        insert_rows = sink._insert_rows

        def record_thread(rows):
            threads.append(threading.get_ident())
            insert_rows(rows)

        with patch.object(sink, "_insert_rows", side_effect=record_thread):
            await sink.insert_many([{"title": "a", "views": 1}])

        assert threads and threads[0] != threading.get_ident()
        assert len(await sink.find()) == 1
