"""
Error hierarchy for document factories
"""
from typing import Any, Dict, Optional


class FactoryError(Exception):
    """Base error for everything raised by docfactory"""

    code = "FACTORY_ERROR"

    def __init__(
        self,
        message: str,
        field_path: Optional[str] = None,
        record_index: Optional[int] = None,
        generator_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field_path = field_path
        self.record_index = record_index
        self.generator_name = generator_name
        self.details = details or {}

    def context(self) -> Dict[str, Any]:
        """Context needed to reproduce the failure"""
        ctx = {
            "field_path": self.field_path,
            "record_index": self.record_index,
            "generator_name": self.generator_name,
        }
        return {k: v for k, v in ctx.items() if v is not None}

    def __str__(self) -> str:
        ctx = self.context()
        if not ctx:
            return self.message
        parts = ", ".join(f"{k}={v}" for k, v in ctx.items())
        return f"{self.message} ({parts})"


class ConfigurationError(FactoryError):
    """Invalid registration, count or factory setup"""
    code = "CONFIGURATION_ERROR"


class GenerationError(FactoryError):
    """A field value could not be produced"""
    code = "GENERATION_ERROR"


class ValidationError(FactoryError):
    """A generated value does not satisfy its field constraints"""
    code = "VALIDATION_ERROR"


class RelationshipError(FactoryError):
    """A relationship could not be resolved"""
    code = "RELATIONSHIP_ERROR"


class PersistenceError(FactoryError):
    """Bulk insert failed"""

    code = "PERSISTENCE_ERROR"

    def __init__(self, message: str, result: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.result = result
