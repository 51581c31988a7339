"""
Document identifier generator
"""
from ..models import FieldType, GenerationContext
from ..schema.base import ObjectId
from ..values import ValueSource
from .base import BaseGenerator

OBJECT_ID_LENGTH = 24


def new_object_id(source: ValueSource) -> ObjectId:
    """
    24 lowercase hex characters: 4-byte timestamp, 3-byte machine id,
    2-byte process id, 3-byte counter
    """
    timestamp = int(source.now().timestamp()) & 0xFFFFFFFF
    machine, process, counter = source.identity_parts()
    return ObjectId(f"{timestamp:08x}{machine:06x}{process:04x}{counter:06x}")


class ObjectIdGenerator(BaseGenerator):
    name = "objectid"
    priority = 50
    supported_types = (FieldType.OBJECTID,)
    handles_enum = True

    def produce(self, context: GenerationContext) -> ObjectId:
        constraints = self.constraints_of(context)
        if constraints.enum_values:
            return self.random_element(context, constraints.enum_values)
        return new_object_id(context.value_source)

    def validate_type_specific(self, value, constraints) -> bool:
        return ObjectId.is_valid(value)
