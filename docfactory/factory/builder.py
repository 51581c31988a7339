"""
Factory - assembles documents from a schema analysis
"""
import copy
import inspect
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Set, Union

from pydantic import BaseModel

from ..analyzer import IDENTITY_FIELDS, SchemaAnalyzer
from ..config import FactorySettings
from ..exceptions import ConfigurationError, FactoryError, GenerationError, PersistenceError, ValidationError
from ..generators import BaseGenerator, GeneratorRegistry, get_default_registry
from ..generators.base import hashable
from ..models import FactoryResult, FieldAnalysis, GenerationContext, SchemaAnalysis
from ..schema import resolve_schema
from ..values import ValueSource
from .paths import get_path, has_path, set_path
from .persistence import PersistenceSink, persist_in_batches
from .relationships import RelationshipStitcher

if TYPE_CHECKING:
    from ..plugin import ModelDefinition, ModelRegistry

logger = logging.getLogger(__name__)

_UNSET = object()

Document = Dict[str, Any]


class BuilderState(str, Enum):
    CONFIGURED = "configured"
    GENERATING = "generating"
    ASSEMBLED = "assembled"
    PERSISTED = "persisted"
    FAILED = "failed"


@dataclass
class FactoryHooks:
    """Pass-through lifecycle callbacks; awaitables are awaited on async paths"""
    before_build: Optional[Callable[['Factory'], Any]] = None
    after_build: Optional[Callable[[List[Document]], Any]] = None
    after_create: Optional[Callable[[List[Document]], Any]] = None


@dataclass
class FactoryDefinition:
    """Per-model defaults and named traits"""
    defaults: Dict[str, Any] = field(default_factory=dict)
    traits: Dict[str, Union[Dict[str, Any], Callable[[Document], Any]]] = field(default_factory=dict)
    hooks: FactoryHooks = field(default_factory=FactoryHooks)


@dataclass
class _Run:
    """State shared by every record of one generation run"""
    total: int
    stitcher: RelationshipStitcher
    existing: Dict[str, Set[Any]] = field(default_factory=dict)

    def seen(self, path: str) -> Set[Any]:
        return self.existing.setdefault(path, set())


def _check_count(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{what} must not be negative, got {value}")
    return value


def _collapse(documents: List[Any], count: int) -> Union[Any, List[Any]]:
    return documents[0] if count == 1 else documents


class Factory:
    """
    Builds documents for one schema

    Configuration calls chain; ``build``/``make`` generate synchronously,
    ``build_async`` generates on the asynchronous path and ``create``
    additionally persists through the sink. A count of 1 returns the
    document itself rather than a one-element list.
    """

    def __init__(self, schema: Any, model_name: Optional[str] = None, count: int = 1,
                 registry: Optional[GeneratorRegistry] = None,
                 analyzer: Optional[SchemaAnalyzer] = None,
                 value_source: Optional[ValueSource] = None,
                 sink: Optional[PersistenceSink] = None,
                 models: Optional['ModelRegistry'] = None,
                 definition: Optional[FactoryDefinition] = None,
                 model_class: Optional[type] = None,
                 settings: Optional[FactorySettings] = None,
                 stats: Optional[Counter] = None):
        self.settings = settings or FactorySettings.from_env()
        self.schema = resolve_schema(schema)
        self.model_name = model_name or self.schema.name
        self.registry = registry if registry is not None else get_default_registry()
        self.analyzer = analyzer or SchemaAnalyzer(self.settings)
        self.value_source = value_source or ValueSource(seed=self.settings.seed, locale=self.settings.locale)
        self.sink = sink
        self.models = models
        self.definition = definition or FactoryDefinition()
        self.model_class = model_class
        self.stats = stats

        self.state = BuilderState.CONFIGURED
        self.last_error: Optional[Exception] = None
        self._count = _check_count(count, "count")
        self._overrides: Dict[str, Any] = dict(self.definition.defaults)
        self._related: Dict[str, int] = {}
        self._traits: List[str] = []
        self._analysis: Optional[SchemaAnalysis] = None
        self._run: Optional[_Run] = None

    def __repr__(self) -> str:
        return f"Factory(model={self.model_name!r}, count={self._count}, state={self.state.value})"

    @property
    def analysis(self) -> SchemaAnalysis:
        if self._analysis is None:
            self._analysis = self.analyzer.analyze(self.schema, self.model_name)
        return self._analysis

    @property
    def overrides(self) -> Dict[str, Any]:
        return dict(self._overrides)

    @property
    def traits(self) -> List[str]:
        return list(self._traits)

    @property
    def related(self) -> Dict[str, int]:
        return dict(self._related)

    # Configuration

    def _configure(self):
        if self.state in (BuilderState.GENERATING, BuilderState.FAILED):
            raise ConfigurationError(f"Cannot configure a factory in state '{self.state.value}'")
        self.state = BuilderState.CONFIGURED

    def count(self, n: int) -> 'Factory':
        self._configure()
        self._count = _check_count(n, "count")
        return self

    def with_(self, field_or_values: Union[str, Dict[str, Any]], value: Any = _UNSET) -> 'Factory':
        """
        Override generated values

        Args:
            field_or_values: A field path, or a dict of path -> value
            value: Value for a single field path
        """
        self._configure()
        if isinstance(field_or_values, dict):
            self._overrides.update(field_or_values)
        elif isinstance(field_or_values, str):
            if value is _UNSET:
                raise ConfigurationError(f"Override for '{field_or_values}' needs a value",
                                         field_path=field_or_values)
            self._overrides[field_or_values] = value
        else:
            raise ConfigurationError(f"Overrides must be a field name or a dict, got {type(field_or_values).__name__}")
        return self

    def with_related(self, field_name: str, count: int = 1) -> 'Factory':
        self._configure()
        self._related[field_name] = _check_count(count, "related count")
        return self

    def trait(self, name: str) -> 'Factory':
        self._configure()
        if name not in self._traits:
            self._traits.append(name)
        return self

    # Synchronous path

    def build(self, count: Optional[int] = None) -> Union[Document, List[Document]]:
        """Generate plain documents without suspending"""
        n = self._resolve_count(count)
        return _collapse(self._build_documents(n), n)

    def make(self, count: Optional[int] = None) -> Union[Any, List[Any]]:
        """Like build, but instantiates the model class when one is attached"""
        n = self._resolve_count(count)
        return _collapse([self._instantiate(d) for d in self._build_documents(n)], n)

    def _build_documents(self, n: int) -> List[Document]:
        self._begin(n)
        try:
            self._call_hook(self.definition.hooks.before_build, self)
            documents = [self._assemble_sync(self.analysis, i, n, top_level=True) for i in range(n)]
            self._call_hook(self.definition.hooks.after_build, documents)
        except FactoryError as e:
            self._fail(e)
            raise
        except Exception as e:
            self._fail(e)
            raise GenerationError(f"Build of {self.model_name or 'document'} failed: {e}") from e
        finally:
            self._run = None

        self._record("built", n)
        self.state = BuilderState.ASSEMBLED
        logger.info(f"Built {n} {self.model_name or 'document'} document(s)")
        return documents

    def _assemble_sync(self, analysis: SchemaAnalysis, index: int, total: int,
                       prefix: str = "", top_level: bool = False) -> Document:
        record: Document = {}
        if top_level:
            self._apply_traits(record, index)

        # overrides and trait values are visible to sibling-aware generators
        related: Dict[str, Any] = dict(self._overrides) if top_level else {}
        for path, field_analysis in analysis.fields.items():
            full_path = f"{prefix}.{path}" if prefix else path
            action = self._plan(field_analysis, record, top_level)
            if action == "skip":
                if has_path(record, path):
                    related[full_path] = get_path(record, path)
                continue
            if action == "default":
                value = self._default_value(field_analysis)
            elif field_analysis.nested_analysis is not None:
                value = self._nested_sync(field_analysis, index, total, full_path)
            else:
                generator = self._select(field_analysis, full_path, index, sync=True)
                context = self._context(field_analysis, full_path, index, total, related)
                value = self._produce_sync(generator, field_analysis, context)
            set_path(record, path, value)
            related[full_path] = value

        if top_level:
            self._merge_overrides(record)
            for field_name, n in self._related.items():
                self._run.stitcher.stitch_sync(record, field_name, n, index)
        return record

    def _nested_sync(self, field_analysis: FieldAnalysis, index: int, total: int, full_path: str):
        if field_analysis.is_array:
            n = self.value_source.uniform_int(1, 3)
            return [self._assemble_sync(field_analysis.nested_analysis, index, total, prefix=full_path)
                    for _ in range(n)]
        return self._assemble_sync(field_analysis.nested_analysis, index, total, prefix=full_path)

    def _produce_sync(self, generator: BaseGenerator, field_analysis: FieldAnalysis,
                      context: GenerationContext) -> Any:
        try:
            if field_analysis.unique:
                value = generator.generate_unique(context, self.settings.unique_max_attempts)
            else:
                value = generator.produce(context)
        except FactoryError:
            raise
        except Exception as e:
            logger.exception(f"Generator '{generator.name}' failed for {context.field_path}")
            raise GenerationError(
                f"Generator '{generator.name}' failed: {e}",
                field_path=context.field_path,
                record_index=context.record_index,
                generator_name=generator.name,
            ) from e
        self._check_value(generator, field_analysis, context, value)
        return value

    # Asynchronous path

    async def build_async(self, count: Optional[int] = None) -> Union[Document, List[Document]]:
        """Generate documents on the asynchronous path without persisting"""
        n = self._resolve_count(count)
        return _collapse(await self._generate_async(n), n)

    async def create(self, count: Optional[int] = None) -> Union[Document, List[Document]]:
        """Generate and persist documents"""
        n = self._resolve_count(count)
        return _collapse(await self._create_documents(n), n)

    async def _create_documents(self, n: int) -> List[Document]:
        result = await self.bulk_create(n)
        return result.documents

    async def bulk_create(self, count: Optional[int] = None, batch_size: Optional[int] = None,
                          continue_on_error: Optional[bool] = None) -> FactoryResult:
        """
        Generate and persist documents in batches

        Args:
            count: Number of documents, defaults to the configured count
            batch_size: Documents per insert, capped at max_batch_size
            continue_on_error: Skip failed batches instead of aborting

        Returns:
            FactoryResult describing saved documents and failed batches
        """
        if self.sink is None:
            raise ConfigurationError(f"Factory for {self.model_name or 'document'} has no persistence sink")
        n = self._resolve_count(count)
        batch_size = _check_count(batch_size or self.settings.default_batch_size, "batch size")
        if batch_size == 0:
            raise ConfigurationError("batch size must be positive")
        batch_size = min(batch_size, self.settings.max_batch_size)
        if continue_on_error is None:
            continue_on_error = self.settings.continue_on_error

        documents = await self._generate_async(n)
        try:
            result = await persist_in_batches(self.sink, documents, batch_size, continue_on_error)
        except PersistenceError as e:
            self._fail(e)
            raise

        await self._call_hook_async(self.definition.hooks.after_create, result.documents)
        self._record("created", result.success_count)
        self.state = BuilderState.PERSISTED
        logger.info(f"Created {result.success_count}/{n} {self.model_name or 'document'} document(s) "
                    f"in {result.execution_time:.3f}s ({result.failed_count} failed)")
        return result

    async def _generate_async(self, n: int) -> List[Document]:
        self._begin(n)
        try:
            await self._call_hook_async(self.definition.hooks.before_build, self)
            documents = []
            for i in range(n):
                documents.append(await self._assemble_async(self.analysis, i, n, top_level=True))
            await self._call_hook_async(self.definition.hooks.after_build, documents)
        except FactoryError as e:
            self._fail(e)
            raise
        except Exception as e:
            self._fail(e)
            raise GenerationError(f"Build of {self.model_name or 'document'} failed: {e}") from e
        finally:
            self._run = None

        self._record("built", n)
        self.state = BuilderState.ASSEMBLED
        return documents

    async def _assemble_async(self, analysis: SchemaAnalysis, index: int, total: int,
                              prefix: str = "", top_level: bool = False) -> Document:
        record: Document = {}
        if top_level:
            self._apply_traits(record, index)

        # overrides and trait values are visible to sibling-aware generators
        related: Dict[str, Any] = dict(self._overrides) if top_level else {}
        for path, field_analysis in analysis.fields.items():
            full_path = f"{prefix}.{path}" if prefix else path
            action = self._plan(field_analysis, record, top_level)
            if action == "skip":
                if has_path(record, path):
                    related[full_path] = get_path(record, path)
                continue
            if action == "default":
                value = self._default_value(field_analysis)
            elif field_analysis.nested_analysis is not None:
                value = await self._nested_async(field_analysis, index, total, full_path)
            else:
                generator = self._select(field_analysis, full_path, index, sync=False)
                context = self._context(field_analysis, full_path, index, total, related)
                value = await self._produce_async(generator, field_analysis, context)
            set_path(record, path, value)
            related[full_path] = value

        if top_level:
            self._merge_overrides(record)
            for field_name, n in self._related.items():
                await self._run.stitcher.stitch(record, field_name, n, index)
        return record

    async def _nested_async(self, field_analysis: FieldAnalysis, index: int, total: int, full_path: str):
        if field_analysis.is_array:
            n = self.value_source.uniform_int(1, 3)
            return [await self._assemble_async(field_analysis.nested_analysis, index, total, prefix=full_path)
                    for _ in range(n)]
        return await self._assemble_async(field_analysis.nested_analysis, index, total, prefix=full_path)

    async def _produce_async(self, generator: BaseGenerator, field_analysis: FieldAnalysis,
                             context: GenerationContext) -> Any:
        try:
            if field_analysis.unique:
                value = await self._unique_async(generator, context)
            else:
                value = await self._resolve(generator.produce(context))
        except FactoryError:
            raise
        except Exception as e:
            logger.exception(f"Generator '{generator.name}' failed for {context.field_path}")
            raise GenerationError(
                f"Generator '{generator.name}' failed: {e}",
                field_path=context.field_path,
                record_index=context.record_index,
                generator_name=generator.name,
            ) from e
        self._check_value(generator, field_analysis, context, value)
        return value

    async def _unique_async(self, generator: BaseGenerator, context: GenerationContext) -> Any:
        attempts = self.settings.unique_max_attempts
        for _ in range(attempts):
            value = await self._resolve(generator.produce(context))
            key = hashable(value)
            if key not in context.existing_values:
                context.existing_values.add(key)
                return value
        raise GenerationError(
            f"Could not generate a unique value after {attempts} attempts",
            field_path=context.field_path,
            record_index=context.record_index,
            generator_name=generator.name,
        )

    @staticmethod
    async def _resolve(value: Any) -> Any:
        if inspect.isawaitable(value):
            return await value
        return value

    # Shared steps

    def _resolve_count(self, count: Optional[int]) -> int:
        return self._count if count is None else _check_count(count, "count")

    def _begin(self, n: int):
        if self.state == BuilderState.FAILED:
            raise ConfigurationError("Factory failed previously; create a new factory")
        if self.state == BuilderState.GENERATING and self._run is not None:
            raise ConfigurationError("Factory is already generating")
        self.state = BuilderState.GENERATING
        self._run = _Run(total=n, stitcher=RelationshipStitcher(self))

    def _record(self, key: str, n: int):
        if self.stats is not None:
            self.stats[key] += n

    def _fail(self, error: Exception):
        self.state = BuilderState.FAILED
        self.last_error = error
        logger.error(f"Generation for {self.model_name or 'document'} failed: {error}")

    def _plan(self, field_analysis: FieldAnalysis, record: Document, top_level: bool) -> str:
        path = field_analysis.path
        if path in IDENTITY_FIELDS:
            return "skip"
        if top_level and self._overridden(path):
            return "skip"
        if has_path(record, path):
            return "skip"
        if field_analysis.has_default:
            return "default"
        if not field_analysis.auto_generate:
            return "skip"
        return "generate"

    def _overridden(self, path: str) -> bool:
        return any(path == key or path.startswith(f"{key}.") for key in self._overrides)

    @staticmethod
    def _default_value(field_analysis: FieldAnalysis) -> Any:
        default = field_analysis.default_value
        if callable(default):
            return default()
        return copy.deepcopy(default)

    def _select(self, field_analysis: FieldAnalysis, full_path: str, index: int, sync: bool) -> BaseGenerator:
        generator = self.registry.get_best(field_analysis.type, field_analysis.constraints, field_analysis.name)
        if generator is None:
            raise GenerationError(
                f"No generator can handle type '{field_analysis.type.value}'",
                field_path=full_path,
                record_index=index,
            )
        if sync and generator.asynchronous:
            raise GenerationError(
                f"Generator '{generator.name}' is asynchronous; use build_async() or create()",
                field_path=full_path,
                record_index=index,
                generator_name=generator.name,
            )
        return generator

    def _context(self, field_analysis: FieldAnalysis, full_path: str, index: int, total: int,
                 related: Dict[str, Any]) -> GenerationContext:
        return GenerationContext(
            field_path=full_path,
            record_index=index,
            total_count=total,
            value_source=self.value_source,
            field_analysis=field_analysis,
            constraints=field_analysis.constraints,
            existing_values=self._run.seen(full_path),
            related_values=related,
            model_name=self.model_name,
        )

    def _check_value(self, generator: BaseGenerator, field_analysis: FieldAnalysis,
                     context: GenerationContext, value: Any):
        if generator.validate(value, field_analysis.constraints):
            return
        message = field_analysis.constraints.custom_message or "value does not satisfy field constraints"
        logger.warning(f"Validation failed for {context.field_path} (record {context.record_index}, "
                       f"generator {generator.name}): {message}")
        if self.settings.validate_by_default:
            raise GenerationError(
                f"Generated value for '{context.field_path}' is invalid: {message}",
                field_path=context.field_path,
                record_index=context.record_index,
                generator_name=generator.name,
            ) from ValidationError(message, field_path=context.field_path)

    def _apply_traits(self, record: Document, index: int):
        for name in self._traits:
            trait = self.definition.traits.get(name)
            if trait is None:
                raise ConfigurationError(f"Unknown trait '{name}'", record_index=index,
                                         details={"available": sorted(self.definition.traits)})
            values = trait(record) if callable(trait) else trait
            if isinstance(values, dict):
                for path, value in values.items():
                    set_path(record, path, value)

    def _merge_overrides(self, record: Document):
        for key, value in self._overrides.items():
            if '.' in key:
                set_path(record, key, value)
            else:
                record[key] = value

    def _instantiate(self, document: Document) -> Any:
        if self.model_class is None:
            return document
        if isinstance(self.model_class, type) and issubclass(self.model_class, BaseModel):
            return self.model_class.model_validate(document)
        return self.model_class(**document)

    def spawn(self, model: 'ModelDefinition') -> 'Factory':
        """A factory for another model sharing this factory's registry, analyzer and value source"""
        return Factory(
            model.schema,
            model_name=model.name,
            registry=self.registry,
            analyzer=self.analyzer,
            value_source=self.value_source,
            sink=model.sink,
            models=self.models,
            definition=model.definition,
            model_class=model.model_class,
            settings=self.settings,
            stats=self.stats,
        )

    @staticmethod
    def _call_hook(hook: Optional[Callable], argument: Any):
        if hook is None:
            return
        result = hook(argument)
        if inspect.isawaitable(result):
            if hasattr(result, "close"):
                result.close()
            raise ConfigurationError("Asynchronous hooks need build_async() or create()")

    @staticmethod
    async def _call_hook_async(hook: Optional[Callable], argument: Any):
        if hook is None:
            return
        result = hook(argument)
        if inspect.isawaitable(result):
            await result
