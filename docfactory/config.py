"""
Configuration for document factories
"""
import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class FactorySettings:
    """Runtime settings shared by analyzers, builders and persistence"""

    # Persistence
    default_batch_size: int = 100
    max_batch_size: int = 10000
    continue_on_error: bool = False

    # Generation
    validate_by_default: bool = False
    unique_max_attempts: int = 100
    locale: str = "en_US"
    seed: Optional[int] = None

    # Schema analysis
    enable_caching: bool = True
    max_depth: int = 5
    include_descriptions: bool = True
    include_examples: bool = False
    infer_relationships: bool = True

    def __post_init__(self):
        if self.default_batch_size <= 0:
            raise ValueError("default_batch_size must be positive")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.default_batch_size = min(self.default_batch_size, self.max_batch_size)

    @classmethod
    def from_env(cls) -> 'FactorySettings':
        """Create settings from environment variables"""
        seed = os.getenv("DOCFACTORY_SEED")
        return cls(
            default_batch_size=int(os.getenv("DOCFACTORY_BATCH_SIZE", "100")),
            max_batch_size=int(os.getenv("DOCFACTORY_MAX_BATCH_SIZE", "10000")),
            continue_on_error=_env_bool("DOCFACTORY_CONTINUE_ON_ERROR", "false"),

            validate_by_default=_env_bool("DOCFACTORY_VALIDATE_BY_DEFAULT", "false"),
            unique_max_attempts=int(os.getenv("DOCFACTORY_UNIQUE_MAX_ATTEMPTS", "100")),
            locale=os.getenv("DOCFACTORY_LOCALE", "en_US"),
            seed=int(seed) if seed else None,

            enable_caching=_env_bool("DOCFACTORY_ENABLE_CACHING", "true"),
            max_depth=int(os.getenv("DOCFACTORY_MAX_DEPTH", "5")),
            include_descriptions=_env_bool("DOCFACTORY_INCLUDE_DESCRIPTIONS", "true"),
            include_examples=_env_bool("DOCFACTORY_INCLUDE_EXAMPLES", "false"),
            infer_relationships=_env_bool("DOCFACTORY_INFER_RELATIONSHIPS", "true"),
        )
