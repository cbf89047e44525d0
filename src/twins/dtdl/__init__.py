"""
DTDL (Digital Twins Definition Language) model generation.

Describes twin types as DTDL Interfaces, so the models can be uploaded to the
platform before any twin of them.

Usage:
    from twins.dtdl import TwinModelBuilder

    interface = TwinModelBuilder().build(Building)
    document = interface.to_dict()
"""

from .dtdl_models import (
    DTDLInterface,
    DTDLProperty,
    DTDLTelemetry,
    DTDLRelationship,
    DTDLComponent,
    DTDLEnum,
    DTDLEnumValue,
    DTDLField,
    DTDLObject,
    DTDLArray,
    DTDLMap,
    DTDLMapKey,
    DTDLMapValue,
    DTDLContext,
    DTDLPrimitiveSchema,
)
from .dtdl_type_mapper import DTDLTypeMapper, PRIMITIVE_TYPE_MAP
from .dtdl_builder import TwinModelBuilder, build_models

__all__ = [
    "DTDLInterface",
    "DTDLProperty",
    "DTDLTelemetry",
    "DTDLRelationship",
    "DTDLComponent",
    "DTDLEnum",
    "DTDLEnumValue",
    "DTDLField",
    "DTDLObject",
    "DTDLArray",
    "DTDLMap",
    "DTDLMapKey",
    "DTDLMapValue",
    "DTDLContext",
    "DTDLPrimitiveSchema",
    "DTDLTypeMapper",
    "PRIMITIVE_TYPE_MAP",
    "TwinModelBuilder",
    "build_models",
]
