"""
Persistence sinks and batched bulk inserts
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Set

from ..exceptions import PersistenceError
from ..generators.objectid import new_object_id
from ..models import BatchFailure, FactoryResult
from ..values import ValueSource

logger = logging.getLogger(__name__)


class PersistenceSink(ABC):
    """Where created documents are stored"""

    @abstractmethod
    async def insert_many(self, records: List[Dict[str, Any]], ordered: bool = True) -> List[Dict[str, Any]]:
        """
        Insert records

        Args:
            records: Documents to insert
            ordered: Stop at the first failing record

        Returns:
            The saved documents, including assigned identifiers
        """
        pass

    @abstractmethod
    async def find(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Read existing documents

        Args:
            limit: Maximum number of documents to return

        Returns:
            Saved documents in insertion order
        """
        pass


class InMemorySink(PersistenceSink):
    """List-backed sink; assigns ``_id`` to every inserted document"""

    def __init__(self, value_source: Optional[ValueSource] = None,
                 fail_batches: Optional[Iterable[int]] = None):
        self.value_source = value_source or ValueSource()
        self.records: List[Dict[str, Any]] = []
        self.fail_batches: Set[int] = set(fail_batches or [])
        self.insert_calls = 0

    def __len__(self) -> int:
        return len(self.records)

    async def insert_many(self, records: List[Dict[str, Any]], ordered: bool = True) -> List[Dict[str, Any]]:
        call = self.insert_calls
        self.insert_calls += 1
        if call in self.fail_batches:
            raise PersistenceError(f"Insert rejected for batch {call}")

        saved = []
        for record in records:
            document = dict(record)
            document.setdefault("_id", new_object_id(self.value_source))
            saved.append(document)
        self.records.extend(saved)
        return [dict(d) for d in saved]

    async def find(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        records = self.records if limit is None else self.records[:limit]
        return [dict(r) for r in records]


async def persist_in_batches(sink: PersistenceSink, documents: List[Dict[str, Any]],
                             batch_size: int = 100, continue_on_error: bool = False) -> FactoryResult:
    """
    Insert documents in fixed-size batches

    Args:
        sink: Target sink
        documents: Documents to insert
        batch_size: Documents per insert call
        continue_on_error: Record failed batches instead of aborting

    Returns:
        FactoryResult with saved documents and per-batch failures

    Raises:
        PersistenceError: on the first failed batch unless continue_on_error
    """
    started = time.perf_counter()
    result = FactoryResult()
    ordered = not continue_on_error

    for batch_index, offset in enumerate(range(0, len(documents), batch_size)):
        batch = documents[offset:offset + batch_size]
        try:
            saved = await sink.insert_many(batch, ordered=ordered)
        except Exception as e:
            result.failed_count += len(batch)
            result.errors.append(BatchFailure(batch_index=batch_index, size=len(batch), message=str(e)))
            if not continue_on_error:
                result.execution_time = time.perf_counter() - started
                logger.error(f"Batch {batch_index} failed, aborting: {e}")
                raise PersistenceError(f"Batch {batch_index} failed: {e}", result=result,
                                       details={"batch_index": batch_index}) from e
            logger.warning(f"Skipping failed batch {batch_index} ({len(batch)} documents): {e}")
            continue

        result.documents.extend(saved)
        result.success_count += len(saved)
        logger.debug(f"Persisted batch {batch_index} ({len(saved)} documents)")

    result.execution_time = time.perf_counter() - started
    return result
