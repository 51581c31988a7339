"""
Base generator contract
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Pattern, Sequence, Tuple

from ..exceptions import GenerationError
from ..models import FieldType, GenerationContext, ValidationConstraints

logger = logging.getLogger(__name__)


def compile_patterns(*expressions: str) -> Tuple[Pattern, ...]:
    return tuple(re.compile(e, re.IGNORECASE) for e in expressions)


class BaseGenerator(ABC):
    """
    A named value producer for one or more field types

    Subclasses set ``supported_types`` and implement ``produce``. The
    capability flags feed the registry's specificity ordering, and
    ``asynchronous`` marks generators whose ``produce`` returns an
    awaitable and so cannot serve the synchronous build path.
    """

    name: str = "base"
    priority: int = 0
    supported_types: Tuple[FieldType, ...] = ()
    asynchronous: bool = False

    handles_enum: bool = False
    handles_regex: bool = False
    handles_range: bool = False

    # Field-name patterns used by specialised generators to claim a field
    field_patterns: Sequence[Pattern] = ()

    def __init__(self, name: Optional[str] = None, priority: Optional[int] = None,
                 enabled: bool = True, **options):
        if name is not None:
            self.name = name
        if priority is not None:
            self.priority = priority
        self.enabled = enabled
        self.options = dict(options)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"

    def supports(self, field_type: FieldType) -> bool:
        return field_type in self.supported_types

    def can_handle(self, field_type: FieldType, constraints: Optional[ValidationConstraints] = None,
                   field_name: Optional[str] = None) -> bool:
        return self.supports(field_type)

    def matches_name(self, field_name: Optional[str]) -> bool:
        if not field_name:
            return False
        return any(p.search(field_name) for p in self.field_patterns)

    @abstractmethod
    def produce(self, context: GenerationContext) -> Any:
        """
        Produce one value for the field described by ``context``

        Returns:
            The value, or an awaitable of it when ``asynchronous`` is set
        """
        pass

    def validate(self, value: Any, constraints: Optional[ValidationConstraints] = None) -> bool:
        """Check required, enum, custom validator, then type-specific rules"""
        if constraints is None:
            return True
        if value is None:
            return not constraints.required
        if constraints.enum_values:
            values = value if isinstance(value, list) else [value]
            if any(v not in constraints.enum_values for v in values):
                return False
        if constraints.custom_validator is not None:
            try:
                if not constraints.custom_validator(value):
                    return False
            except Exception as e:
                logger.debug(f"Custom validator raised for {self.name}: {e}")
                return False
        return self.validate_type_specific(value, constraints)

    def validate_type_specific(self, value: Any, constraints: ValidationConstraints) -> bool:
        return True

    def generate_unique(self, context: GenerationContext, max_attempts: int = 100) -> Any:
        """
        Produce a value not yet present in ``context.existing_values``

        Raises:
            GenerationError: when every attempt collides
        """
        for _ in range(max_attempts):
            value = self.produce(context)
            if hashable(value) not in context.existing_values:
                context.existing_values.add(hashable(value))
                return value
        raise GenerationError(
            f"Could not generate a unique value after {max_attempts} attempts",
            field_path=context.field_path,
            record_index=context.record_index,
            generator_name=self.name,
        )

    # Helpers

    @staticmethod
    def constraints_of(context: GenerationContext) -> ValidationConstraints:
        return context.constraints or ValidationConstraints()

    @staticmethod
    def random_element(context: GenerationContext, items: Sequence[Any]) -> Any:
        return context.value_source.choice(items)


def hashable(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(hashable(v) for v in value)
    if isinstance(value, dict):
        return tuple(sorted((k, hashable(v)) for k, v in value.items()))
    return value


