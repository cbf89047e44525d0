"""
DTDL Data Models

Data classes for the DTDL elements a twin type is described with. A model
document is assembled from these classes and written with ``to_dict``; key
order follows the DTDL examples (@id, @type, @context, displayName, ...).

Based on DTDL v2:
https://github.com/Azure/opendigitaltwins-dtdl/blob/master/DTDL/v2/dtdlv2.md
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union


# =============================================================================
# DTDL Primitive Schema Types
# =============================================================================

class DTDLPrimitiveSchema(str, Enum):
    """DTDL primitive schema types."""
    BOOLEAN = "boolean"
    BYTE = "byte"
    BYTES = "bytes"
    DATE = "date"
    DATETIME = "dateTime"
    DECIMAL = "decimal"
    DOUBLE = "double"
    DURATION = "duration"
    FLOAT = "float"
    INTEGER = "integer"
    LONG = "long"
    SHORT = "short"
    STRING = "string"
    TIME = "time"
    UNSIGNED_BYTE = "unsignedByte"
    UNSIGNED_INTEGER = "unsignedInteger"
    UNSIGNED_LONG = "unsignedLong"
    UNSIGNED_SHORT = "unsignedShort"
    UUID = "uuid"


# =============================================================================
# DTDL Context
# =============================================================================

@dataclass
class DTDLContext:
    """
    The @context of a DTDL document and the DTDL version it names.
    """
    dtdl_version: int
    raw_context: Union[str, List[str]] = ""

    @classmethod
    def from_json(cls, context: Union[str, List[str]]) -> 'DTDLContext':
        """
        Parse @context from JSON.

        Args:
            context: The @context value (string or array of strings)
        """
        contexts = [context] if isinstance(context, str) else context

        version = 0
        for ctx in contexts:
            if ctx.startswith("dtmi:dtdl:context;"):
                version = int(ctx.split(";")[-1].split("#")[0])

        return cls(dtdl_version=version, raw_context=context)


def _schema_to_dict(schema: Any) -> Any:
    return schema if isinstance(schema, str) else schema.to_dict()


def _add_annotations(result: Dict[str, Any], element: Any) -> Dict[str, Any]:
    if element.dtmi:
        result["@id"] = element.dtmi
    if element.display_name:
        result["displayName"] = element.display_name
    if element.description:
        result["description"] = element.description
    if getattr(element, "comment", None):
        result["comment"] = element.comment
    return result


# =============================================================================
# Complex Schema Types
# =============================================================================

@dataclass
class DTDLEnumValue:
    """
    An EnumValue in a DTDL Enum schema.

    Attributes:
        name: The programming name
        value: The on-the-wire value (integer or string)
    """
    name: str
    value: Union[int, str]
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "name": self.name,
            "enumValue": self.value,
        }
        return _add_annotations(result, self)


@dataclass
class DTDLEnum:
    """
    A DTDL Enum schema.

    Attributes:
        value_schema: The data type (integer or string)
        enum_values: List of EnumValue definitions
    """
    value_schema: Literal["integer", "string"]
    enum_values: List[DTDLEnumValue] = field(default_factory=list)
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Enum",
            "valueSchema": self.value_schema,
            "enumValues": [ev.to_dict() for ev in self.enum_values],
        }
        return _add_annotations(result, self)


@dataclass
class DTDLField:
    """A Field in a DTDL Object schema."""
    name: str
    schema: Union[str, 'DTDLObject', 'DTDLArray', 'DTDLEnum', 'DTDLMap']
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "schema": _schema_to_dict(self.schema),
        }
        return _add_annotations(result, self)


@dataclass
class DTDLObject:
    """
    A DTDL Object schema (struct-like).

    Attributes:
        fields: List of Field definitions
    """
    fields: List[DTDLField] = field(default_factory=list)
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Object",
            "fields": [f.to_dict() for f in self.fields],
        }
        return _add_annotations(result, self)


@dataclass
class DTDLArray:
    """
    A DTDL Array schema.

    Attributes:
        element_schema: The schema of array elements
    """
    element_schema: Union[str, DTDLObject, 'DTDLArray', DTDLEnum, 'DTDLMap']
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Array",
            "elementSchema": _schema_to_dict(self.element_schema),
        }
        return _add_annotations(result, self)


@dataclass
class DTDLMapKey:
    """The key definition in a DTDL Map."""
    name: str
    schema: str = "string"  # Must always be string
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _add_annotations({"name": self.name, "schema": self.schema}, self)


@dataclass
class DTDLMapValue:
    """The value definition in a DTDL Map."""
    name: str
    schema: Union[str, DTDLObject, DTDLArray, DTDLEnum, 'DTDLMap']
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _add_annotations({"name": self.name, "schema": _schema_to_dict(self.schema)}, self)


@dataclass
class DTDLMap:
    """
    A DTDL Map schema (key-value pairs).

    Attributes:
        map_key: MapKey definition
        map_value: MapValue definition
    """
    map_key: DTDLMapKey
    map_value: DTDLMapValue
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Map",
            "mapKey": self.map_key.to_dict(),
            "mapValue": self.map_value.to_dict(),
        }
        return _add_annotations(result, self)


# Type alias for any schema
DTDLSchema = Union[str, DTDLObject, DTDLArray, DTDLEnum, DTDLMap]


# =============================================================================
# Interface Content Types
# =============================================================================

@dataclass
class DTDLProperty:
    """
    A DTDL Property element: read-only or read/write twin state.

    Attributes:
        name: The programming name (required)
        schema: The data type (required)
        writable: Whether the property is writable (default: False)
    """
    name: str
    schema: DTDLSchema
    writable: bool = False
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Property",
            "name": self.name,
            "schema": _schema_to_dict(self.schema),
        }
        if self.writable:
            result["writable"] = self.writable
        return _add_annotations(result, self)


@dataclass
class DTDLTelemetry:
    """A DTDL Telemetry element: data emitted by a twin."""
    name: str
    schema: DTDLSchema
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Telemetry",
            "name": self.name,
            "schema": _schema_to_dict(self.schema),
        }
        return _add_annotations(result, self)


@dataclass
class DTDLRelationship:
    """
    A DTDL Relationship element: a link to other twins.

    Attributes:
        name: The programming name (required)
        target: DTMI of target Interface (any Interface if not specified)
        min_multiplicity: Minimum instances (default: 0)
        max_multiplicity: Maximum instances (default: unlimited)
    """
    name: str
    target: Optional[str] = None
    min_multiplicity: int = 0
    max_multiplicity: Optional[int] = None
    writable: bool = False
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Relationship",
            "name": self.name,
        }
        if self.target:
            result["target"] = self.target
        if self.min_multiplicity != 0:
            result["minMultiplicity"] = self.min_multiplicity
        if self.max_multiplicity is not None:
            result["maxMultiplicity"] = self.max_multiplicity
        if self.writable:
            result["writable"] = self.writable
        return _add_annotations(result, self)


@dataclass
class DTDLComponent:
    """
    A DTDL Component element: another Interface included by value.

    Attributes:
        name: The programming name (required)
        schema: DTMI of the Interface to include (required)
    """
    name: str
    schema: str
    dtmi: Optional[str] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {
            "@type": "Component",
            "name": self.name,
            "schema": self.schema,
        }
        return _add_annotations(result, self)


# Type alias for Interface contents
DTDLContent = Union[DTDLProperty, DTDLTelemetry, DTDLRelationship, DTDLComponent]


# =============================================================================
# Interface (Top-level DTDL Element)
# =============================================================================

@dataclass
class DTDLInterface:
    """
    A DTDL Interface - the model document of one twin type.

    Attributes:
        dtmi: The @id (required) - Digital Twin Model Identifier
        type: The @type, "Interface" unless the twin type says otherwise
        contents: Properties, Telemetries, Components and Relationships
        extends: DTMIs of parent Interfaces
        context: The @context naming the DTDL version
    """
    dtmi: str
    type: str = "Interface"
    contents: List[DTDLContent] = field(default_factory=list)
    extends: List[str] = field(default_factory=list)
    context: Optional[DTDLContext] = None
    display_name: Optional[Union[str, Dict[str, str]]] = None
    description: Optional[Union[str, Dict[str, str]]] = None
    comment: Optional[str] = None

    @property
    def properties(self) -> List[DTDLProperty]:
        return [c for c in self.contents if isinstance(c, DTDLProperty)]

    @property
    def telemetries(self) -> List[DTDLTelemetry]:
        return [c for c in self.contents if isinstance(c, DTDLTelemetry)]

    @property
    def relationships(self) -> List[DTDLRelationship]:
        return [c for c in self.contents if isinstance(c, DTDLRelationship)]

    @property
    def components(self) -> List[DTDLComponent]:
        return [c for c in self.contents if isinstance(c, DTDLComponent)]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary (JSON representation)."""
        result: Dict[str, Any] = {
            "@id": self.dtmi,
            "@type": self.type,
        }
        if self.context:
            result["@context"] = self.context.raw_context
        if self.display_name:
            result["displayName"] = self.display_name
        if self.description:
            result["description"] = self.description
        if self.comment:
            result["comment"] = self.comment
        if self.extends:
            result["extends"] = self.extends if len(self.extends) > 1 else self.extends[0]
        result["contents"] = [c.to_dict() for c in self.contents]
        return result
