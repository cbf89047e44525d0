"""
Typed digital twins.

Declares twin types as dataclasses, converts twin instances to and from the
digital twins platform's JSON documents and generates the DTDL model of each
twin type.

Usage:
    from twins import DigitalTwinSerializer, ModelLibrary, TwinBase, digital_twin, twin_property

    @digital_twin(display_name="Room")
    class Room(TwinBase):
        temperature: Optional[float] = twin_property()

    serializer = DigitalTwinSerializer(ModelLibrary([Room]))
    text = serializer.serialize_twin(Room(id="R1", temperature=21.5))
"""

from .attributes import (
    DigitalTwinInfo,
    PropertyCategory,
    TwinMemberInfo,
    digital_twin,
    get_model_id,
    get_twin_info,
    twin_component,
    twin_extension_data,
    twin_only_property,
    twin_property,
    twin_relationship,
    twin_telemetry,
)
from .base import GenericTwin, TwinBase
from .config import SerializerConfig
from .converter import ComponentConverter, TwinConverter, register_instance_factory
from .exceptions import (
    DuplicateModelIdError,
    RegistryError,
    TwinCycleError,
    TwinDefinitionError,
    TwinError,
    TwinParseError,
    TwinTypeNotRegisteredError,
    TwinValueError,
)
from .models import BasicRelationship, BasicTwin, TwinMetadata
from .properties import PropertyDescriptor, classify
from .protocols import AggregateTwinsResponse, TwinTransportError, TwinTransportProtocol
from .publisher import TwinGraphPublisher
from .registry import ModelLibrary, TwinModel
from .scalars import (
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
from .serializer import DigitalTwinSerializer

__version__ = "1.0.0"

__all__ = [
    "DigitalTwinInfo",
    "PropertyCategory",
    "TwinMemberInfo",
    "digital_twin",
    "get_model_id",
    "get_twin_info",
    "twin_component",
    "twin_extension_data",
    "twin_only_property",
    "twin_property",
    "twin_relationship",
    "twin_telemetry",
    "GenericTwin",
    "TwinBase",
    "SerializerConfig",
    "ComponentConverter",
    "TwinConverter",
    "register_instance_factory",
    "DuplicateModelIdError",
    "RegistryError",
    "TwinCycleError",
    "TwinDefinitionError",
    "TwinError",
    "TwinParseError",
    "TwinTypeNotRegisteredError",
    "TwinValueError",
    "BasicRelationship",
    "BasicTwin",
    "TwinMetadata",
    "PropertyDescriptor",
    "classify",
    "AggregateTwinsResponse",
    "TwinTransportError",
    "TwinTransportProtocol",
    "TwinGraphPublisher",
    "ModelLibrary",
    "TwinModel",
    "Byte",
    "Char",
    "ETag",
    "Float",
    "Integer",
    "Long",
    "Short",
    "UnsignedByte",
    "UnsignedInteger",
    "UnsignedLong",
    "UnsignedShort",
    "DigitalTwinSerializer",
]
