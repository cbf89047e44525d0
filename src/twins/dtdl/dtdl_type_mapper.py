"""
DTDL Type Mapper

Maps the declared Python type of a twin member to a DTDL schema: primitive
schema names for scalars, and inline Enum, Array, Map and Object schemas for
enums, sequences, mappings and nested classes.
"""

import collections.abc
import dataclasses
import logging
import typing
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List
from uuid import UUID

from ..exceptions import TwinDefinitionError
from ..models import TwinMetadata
from ..properties import is_sequence_type, to_camel_case, unwrap_optional
from ..scalars import (
    Byte,
    Char,
    ETag,
    Float,
    Integer,
    Long,
    Short,
    UnsignedByte,
    UnsignedInteger,
    UnsignedLong,
    UnsignedShort,
)
from .dtdl_models import (
    DTDLArray,
    DTDLEnum,
    DTDLEnumValue,
    DTDLField,
    DTDLMap,
    DTDLMapKey,
    DTDLMapValue,
    DTDLObject,
    DTDLPrimitiveSchema,
    DTDLSchema,
)

logger = logging.getLogger(__name__)


# Primitive type mapping
PRIMITIVE_TYPE_MAP: Dict[Any, DTDLPrimitiveSchema] = {
    # Boolean
    bool: DTDLPrimitiveSchema.BOOLEAN,

    # Integers
    int: DTDLPrimitiveSchema.INTEGER,
    Byte: DTDLPrimitiveSchema.BYTE,
    UnsignedByte: DTDLPrimitiveSchema.UNSIGNED_BYTE,
    Short: DTDLPrimitiveSchema.SHORT,
    UnsignedShort: DTDLPrimitiveSchema.UNSIGNED_SHORT,
    Integer: DTDLPrimitiveSchema.INTEGER,
    UnsignedInteger: DTDLPrimitiveSchema.UNSIGNED_INTEGER,
    Long: DTDLPrimitiveSchema.LONG,
    UnsignedLong: DTDLPrimitiveSchema.UNSIGNED_LONG,

    # Floats
    float: DTDLPrimitiveSchema.DOUBLE,
    Float: DTDLPrimitiveSchema.FLOAT,
    Decimal: DTDLPrimitiveSchema.DECIMAL,

    # Strings
    str: DTDLPrimitiveSchema.STRING,
    Char: DTDLPrimitiveSchema.STRING,
    ETag: DTDLPrimitiveSchema.STRING,
    UUID: DTDLPrimitiveSchema.UUID,
    bytes: DTDLPrimitiveSchema.BYTES,

    # Date/Time
    date: DTDLPrimitiveSchema.DATE,
    datetime: DTDLPrimitiveSchema.DATETIME,
    time: DTDLPrimitiveSchema.TIME,
    timedelta: DTDLPrimitiveSchema.DURATION,
}


class DTDLTypeMapper:
    """
    Maps Python type hints to DTDL schemas.

    Handles:
    - Primitive types, including the fixed-width integer aliases
    - Enums (integer or string valued)
    - Sequences, mappings and nested classes

    Example usage:
        mapper = DTDLTypeMapper()
        mapper.map_type(int)            # "integer"
        mapper.map_type(List[str])      # DTDLArray(element_schema="string")
    """

    def map_type(self, hint: Any) -> DTDLSchema:
        """
        Map a type hint to a DTDL schema.

        Raises:
            TwinDefinitionError: If a nested class refers back to itself
        """
        return self._map(hint, [])

    def _map(self, hint: Any, stack: List[type]) -> DTDLSchema:
        hint = unwrap_optional(hint)

        primitive = PRIMITIVE_TYPE_MAP.get(hint)
        if primitive is not None:
            return primitive.value

        if isinstance(hint, type) and issubclass(hint, Enum):
            return self._map_enum(hint)

        if is_sequence_type(hint):
            args = [arg for arg in typing.get_args(hint) if arg is not Ellipsis]
            element = self._map(args[0], stack) if args else DTDLPrimitiveSchema.STRING.value
            return DTDLArray(element_schema=element)

        origin = typing.get_origin(hint)
        if hint is dict or (isinstance(origin, type) and issubclass(origin, collections.abc.Mapping)):
            return self._map_map(hint, stack)

        if hint is TwinMetadata or hint is Any:
            return self._unmapped(hint)

        if isinstance(hint, type) and (dataclasses.is_dataclass(hint) or typing.get_type_hints(hint)):
            return self._map_object(hint, stack)

        return self._unmapped(hint)

    def _unmapped(self, hint: Any) -> str:
        logger.warning(f"No DTDL schema for {hint!r}; using string")
        return DTDLPrimitiveSchema.STRING.value

    def _map_enum(self, enum_type: type) -> DTDLEnum:
        """Map an Enum class; integer-valued enums keep integer wire values."""
        members = list(enum_type)
        integer_valued = all(isinstance(m.value, int) and not isinstance(m.value, bool) for m in members)
        return DTDLEnum(
            value_schema="integer" if integer_valued else "string",
            enum_values=[
                DTDLEnumValue(
                    name=m.name,
                    value=m.value if integer_valued or isinstance(m.value, str) else m.name,
                )
                for m in members
            ],
        )

    def _map_map(self, hint: Any, stack: List[type]) -> DTDLMap:
        args = typing.get_args(hint)
        value_schema = self._map(args[1], stack) if len(args) == 2 else DTDLPrimitiveSchema.STRING.value
        return DTDLMap(
            map_key=DTDLMapKey(name="key"),
            map_value=DTDLMapValue(name="value", schema=value_schema),
        )

    def _map_object(self, cls: type, stack: List[type]) -> DTDLObject:
        if cls in stack:
            cycle = " -> ".join(t.__name__ for t in stack + [cls])
            raise TwinDefinitionError(cls, f"recursive object schema: {cycle}")

        hints = typing.get_type_hints(cls)
        if dataclasses.is_dataclass(cls):
            names = [f.name for f in dataclasses.fields(cls)]
        else:
            names = [name for name in hints if not name.startswith("_")]

        stack.append(cls)
        try:
            fields = [
                DTDLField(name=to_camel_case(name), schema=self._map(hints.get(name, Any), stack))
                for name in names
            ]
        finally:
            stack.pop()
        return DTDLObject(fields=fields)

