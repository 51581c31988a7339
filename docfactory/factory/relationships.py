"""
RelationshipStitcher - resolves and links related documents
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from ..exceptions import RelationshipError
from ..models import FieldAnalysis, RelationshipKind
from .paths import set_path

if TYPE_CHECKING:
    from .builder import Factory

logger = logging.getLogger(__name__)


class RelationshipStitcher:
    """
    Links ``with_related`` fields for one generation run

    Reference targets are cached per (target model, field) for the whole
    run so every parent document links to the same related records.
    """

    def __init__(self, factory: 'Factory'):
        self.factory = factory
        self._cache: Dict[Tuple[str, str], List[Any]] = {}

    def clear_cache(self):
        self._cache.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "entries": len(self._cache),
            "keys": [f"{target}_{field}" for target, field in self._cache],
            "cached_ids": sum(len(v) for v in self._cache.values()),
        }

    def _field(self, field_name: str) -> FieldAnalysis:
        analysis = self.factory.analysis.get(field_name)
        if analysis is None or analysis.relationship is None:
            raise RelationshipError(f"No relationship metadata for field '{field_name}'", field_path=field_name)
        return analysis

    @staticmethod
    def _write(document: Dict[str, Any], field: FieldAnalysis, values: List[Any]):
        if field.relationship.is_array or field.is_array:
            set_path(document, field.path, list(values))
        else:
            set_path(document, field.path, values[0] if values else None)

    async def stitch(self, document: Dict[str, Any], field_name: str, count: int, record_index: int = 0):
        """Link ``count`` related records into ``document`` on the asynchronous path"""
        field = self._field(field_name)
        relationship = field.relationship

        if relationship.kind == RelationshipKind.REFERENCE:
            ids = await self._resolve_references(field, count)
            self._write(document, field, ids)
            return

        nested = self._nested_analysis(field)
        docs = [await self.factory._assemble_async(nested, record_index, count, prefix=field.path)
                for _ in range(count)]
        self._write(document, field, docs)

    def stitch_sync(self, document: Dict[str, Any], field_name: str, count: int, record_index: int = 0):
        """Embedded and subdocument links for the synchronous path"""
        field = self._field(field_name)
        if field.relationship.kind == RelationshipKind.REFERENCE:
            raise RelationshipError(
                f"Reference field '{field_name}' needs persisted targets; use create()",
                field_path=field_name, record_index=record_index,
            )
        nested = self._nested_analysis(field)
        docs = [self.factory._assemble_sync(nested, record_index, count, prefix=field.path)
                for _ in range(count)]
        self._write(document, field, docs)

    @staticmethod
    def _nested_analysis(field: FieldAnalysis):
        if field.nested_analysis is None:
            raise RelationshipError(f"Field '{field.path}' has no nested schema to embed", field_path=field.path)
        return field.nested_analysis

    async def _resolve_references(self, field: FieldAnalysis, count: int) -> List[Any]:
        target = field.relationship.target
        key = (target, field.path)
        cached = self._cache.get(key)
        if cached is not None and len(cached) >= count:
            return cached[:count]

        model = self.factory.models.get(target) if self.factory.models is not None else None
        if model is None:
            raise RelationshipError(f"Cannot resolve target model '{target}' for field '{field.path}'",
                                    field_path=field.path)
        if model.sink is None:
            raise RelationshipError(f"Target model '{target}' has no persistence sink", field_path=field.path)

        existing = await model.sink.find(limit=count * 2)
        if len(existing) >= count:
            chosen = self.factory.value_source.sample(existing, count)
        else:
            needed = count - len(existing)
            logger.debug(f"Creating {needed} '{target}' documents for {field.path}")
            created = await self.factory.spawn(model)._create_documents(needed)
            chosen = existing + created

        ids = [doc.get("_id") for doc in chosen]
        if any(i is None for i in ids):
            raise RelationshipError(f"Target model '{target}' returned documents without '_id'",
                                    field_path=field.path)
        self._cache[key] = ids
        return ids
