"""
SQLAlchemy-backed persistence sink
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Table, select
from sqlalchemy.engine import Engine

from ..generators.objectid import new_object_id
from ..values import ValueSource
from .persistence import PersistenceSink

logger = logging.getLogger(__name__)


class SQLAlchemySink(PersistenceSink):
    """
    Writes documents as rows of a SQLAlchemy Core table

    Keys without a matching column are dropped. When the table has an
    ``_id`` column, missing identifiers are generated. Statements run on
    the default executor so a synchronous engine does not block the
    event loop; SQLite engines need ``check_same_thread=False``.
    """

    def __init__(self, engine: Engine, table: Table, value_source: Optional[ValueSource] = None):
        self.engine = engine
        self.table = table
        self.value_source = value_source or ValueSource()
        self._columns = set(table.columns.keys())

    def _row(self, record: Dict[str, Any]) -> Dict[str, Any]:
        row = {k: v for k, v in record.items() if k in self._columns}
        if "_id" in self._columns and row.get("_id") is None:
            row["_id"] = str(new_object_id(self.value_source))
        dropped = set(record) - self._columns
        if dropped:
            logger.debug(f"Dropping keys without columns in {self.table.name}: {sorted(dropped)}")
        return row

    def _insert_rows(self, rows: List[Dict[str, Any]]):
        with self.engine.begin() as conn:
            conn.execute(self.table.insert(), rows)

    def _select_rows(self, limit: Optional[int]) -> List[Dict[str, Any]]:
        query = select(self.table)
        if limit is not None:
            query = query.limit(limit)
        with self.engine.connect() as conn:
            return [dict(row) for row in conn.execute(query).mappings().all()]

    async def insert_many(self, records: List[Dict[str, Any]], ordered: bool = True) -> List[Dict[str, Any]]:
        rows = [self._row(r) for r in records]
        if not rows:
            return []
        await asyncio.get_running_loop().run_in_executor(None, self._insert_rows, rows)
        return [{**record, **row} for record, row in zip(records, rows)]

    async def find(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return await asyncio.get_running_loop().run_in_executor(None, self._select_rows, limit)
