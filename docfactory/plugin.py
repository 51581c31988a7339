"""
Plugin surface - model registry and per-class factory accessors
"""
import logging
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .analyzer import SchemaAnalyzer
from .config import FactorySettings
from .exceptions import ConfigurationError
from .factory import Factory, FactoryDefinition, PersistenceSink
from .generators import GeneratorRegistry, get_default_registry
from .schema import PydanticSchema
from .values import ValueSource

logger = logging.getLogger(__name__)


@dataclass
class ModelDefinition:
    """A named schema with optional sink, defaults/traits and model class"""
    name: str
    schema: Any
    sink: Optional[PersistenceSink] = None
    definition: Optional[FactoryDefinition] = None
    model_class: Optional[type] = None


class ModelRegistry:
    """Model definitions by name; reference targets are resolved here"""

    def __init__(self):
        self._models: Dict[str, ModelDefinition] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def register(self, model: ModelDefinition):
        if not model.name:
            raise ConfigurationError("Model name is required")
        with self._lock:
            if model.name in self._models:
                logger.warning(f"Replacing model definition '{model.name}'")
            self._models[model.name] = model

    def get(self, name: str) -> Optional[ModelDefinition]:
        return self._models.get(name)

    def names(self) -> List[str]:
        return list(self._models)

    def clear(self):
        with self._lock:
            self._models.clear()


class FactoryPlugin:
    """
    Shared factory state: models, generators, analyzer and value source

    Classes attached through the plugin gain a ``factory`` classmethod
    and nothing else.
    """

    def __init__(self, settings: Optional[FactorySettings] = None,
                 registry: Optional[ModelRegistry] = None,
                 generator_registry: Optional[GeneratorRegistry] = None):
        self.settings = settings or FactorySettings.from_env()
        self.registry = registry if registry is not None else ModelRegistry()
        self.generator_registry = generator_registry if generator_registry is not None else get_default_registry()
        self.analyzer = SchemaAnalyzer(self.settings)
        self.value_source = ValueSource(seed=self.settings.seed, locale=self.settings.locale)
        self.enabled = True
        self.stats: Counter = Counter()
        self._attached: Dict[type, str] = {}
        logger.info("FactoryPlugin initialized")

    def enable(self):
        self.enabled = True

    def disable(self):
        self.enabled = False

    def reset(self):
        """Forget models, attachments, cached analyses and counters"""
        for cls in list(self._attached):
            if "factory" in vars(cls):
                delattr(cls, "factory")
        self._attached.clear()
        self.registry.clear()
        self.analyzer.clear_cache()
        self.stats.clear()
        self.enabled = True
        logger.info("FactoryPlugin reset")

    def set_seed(self, seed: int):
        self.value_source.seed(seed)

    def register_model(self, name: str, schema: Any, sink: Optional[PersistenceSink] = None,
                       definition: Optional[FactoryDefinition] = None,
                       model_class: Optional[type] = None) -> ModelDefinition:
        model = ModelDefinition(name=name, schema=schema, sink=sink, definition=definition,
                                model_class=model_class)
        self.registry.register(model)
        logger.debug(f"Registered model '{name}'")
        return model

    def factory_for(self, name: str, count: int = 1) -> Factory:
        """
        A new factory for a registered model

        Args:
            name: Registered model name
            count: Default record count

        Returns:
            Factory sharing this plugin's generators, analyzer and value source
        """
        if not self.enabled:
            raise ConfigurationError("Factory plugin is disabled")
        model = self.registry.get(name)
        if model is None:
            raise ConfigurationError(f"Unknown model '{name}'", details={"models": self.registry.names()})
        return Factory(
            model.schema,
            model_name=model.name,
            count=count,
            registry=self.generator_registry,
            analyzer=self.analyzer,
            value_source=self.value_source,
            sink=model.sink,
            models=self.registry,
            definition=model.definition,
            model_class=model.model_class,
            settings=self.settings,
            stats=self.stats,
        )

    def attach(self, cls: type, schema: Any = None, sink: Optional[PersistenceSink] = None,
               name: Optional[str] = None, definition: Optional[FactoryDefinition] = None) -> type:
        """
        Register ``cls`` as a model and give it a ``factory(count=1)`` classmethod

        Pydantic models are introspected when no schema is passed.
        """
        if schema is None:
            if isinstance(cls, type) and issubclass(cls, BaseModel):
                schema = PydanticSchema(cls)
            else:
                raise ConfigurationError(f"No schema given for {cls.__name__}")
        if hasattr(cls, "factory") and cls not in self._attached:
            raise ConfigurationError(f"{cls.__name__} already defines 'factory'")

        model_name = name or cls.__name__
        self.register_model(model_name, schema, sink=sink, definition=definition, model_class=cls)

        plugin = self

        def factory(klass, count: int = 1) -> Factory:
            return plugin.factory_for(model_name, count)

        cls.factory = classmethod(factory)
        self._attached[cls] = model_name
        logger.debug(f"Attached factory to {cls.__name__} as '{model_name}'")
        return cls

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "models": len(self.registry),
            "generators": len(self.generator_registry),
            "cached_analyses": self.analyzer.cache_size,
            "documents_built": self.stats["built"],
            "documents_created": self.stats["created"],
        }


_plugin: Optional[FactoryPlugin] = None
_plugin_lock = threading.Lock()


def get_plugin() -> FactoryPlugin:
    """Shared plugin used by ``with_factory``"""
    global _plugin
    with _plugin_lock:
        if _plugin is None:
            _plugin = FactoryPlugin()
        return _plugin


def with_factory(schema: Any = None, sink: Optional[PersistenceSink] = None, name: Optional[str] = None,
                 definition: Optional[FactoryDefinition] = None):
    """Class decorator attaching the shared plugin's factory accessor"""
    def decorator(cls: type) -> type:
        return get_plugin().attach(cls, schema=schema, sink=sink, name=name, definition=definition)
    return decorator
