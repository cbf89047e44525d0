"""
DTDL Model Builder

Builds the DTDL Interface describing a twin type from its declared members.
Only members declared on the type itself are listed; inherited members are
described by the parent Interface named in ``extends``.
"""

import logging
from typing import List, Optional

from ..attributes import PropertyCategory, get_model_id, get_twin_info
from ..base import get_extends_model_id, is_twin_type
from ..constants import DTDLConfig
from ..exceptions import TwinDefinitionError
from ..properties import PropertyDescriptor, get_declared_properties
from .dtdl_models import (
    DTDLComponent,
    DTDLContent,
    DTDLContext,
    DTDLInterface,
    DTDLProperty,
    DTDLRelationship,
    DTDLTelemetry,
)
from .dtdl_type_mapper import DTDLTypeMapper

logger = logging.getLogger(__name__)


class TwinModelBuilder:
    """
    Builds DTDL Interfaces for twin types.

    Example usage:
        builder = TwinModelBuilder()
        interface = builder.build(Building)
        document = interface.to_dict()

    Args:
        context: The @context written into every Interface
    """

    def __init__(self, context: str = DTDLConfig.DEFAULT_CONTEXT):
        self.context = context
        self.type_mapper = DTDLTypeMapper()

    def build(self, twin_type: type) -> DTDLInterface:
        """
        Build the Interface of ``twin_type``.

        Raises:
            TwinDefinitionError: If the type is not a twin type or a member
                cannot be described
        """
        info = get_twin_info(twin_type)
        if not is_twin_type(twin_type) or info is None:
            raise TwinDefinitionError(twin_type, "not a @digital_twin type")

        extends = get_extends_model_id(twin_type)
        interface = DTDLInterface(
            dtmi=info.get_full_model_id(twin_type),
            type=info.model_type,
            extends=[extends] if extends else [],
            context=DTDLContext.from_json(self.context),
            display_name=info.display_name,
            description=info.description,
        )
        interface.contents = [
            content for content in map(self._build_content, get_declared_properties(twin_type))
            if content is not None
        ]
        logger.debug(f"Built DTDL Interface {interface.dtmi} with {len(interface.contents)} contents")
        return interface

    def _build_content(self, prop: PropertyDescriptor) -> Optional[DTDLContent]:
        info = prop.info
        display_name = info.display_name if info else None
        description = info.description if info else None

        if prop.category is PropertyCategory.NORMAL:
            return DTDLProperty(
                name=prop.twin_name,
                schema=self.type_mapper.map_type(prop.value_type),
                writable=prop.settable,
                display_name=display_name,
                description=description,
            )
        if prop.category is PropertyCategory.TELEMETRY:
            return DTDLTelemetry(
                name=prop.twin_name,
                schema=self.type_mapper.map_type(prop.value_type),
                display_name=display_name,
                description=description,
            )
        if prop.category is PropertyCategory.COMPONENT:
            return DTDLComponent(
                name=prop.twin_name,
                schema=self._model_id(prop),
                display_name=display_name,
                description=description,
            )
        if prop.category is PropertyCategory.RELATIONSHIP:
            return DTDLRelationship(
                name=prop.twin_name,
                target=self._model_id(prop),
                min_multiplicity=info.min_multiplicity or 0,
                max_multiplicity=info.max_multiplicity,
                display_name=display_name,
                description=description,
            )
        # Reserved members are part of the twin document only
        return None

    @staticmethod
    def _model_id(prop: PropertyDescriptor) -> str:
        model_id = get_model_id(prop.model_type)
        if model_id is None:
            raise TwinDefinitionError(
                prop.declaring_type,
                f"{prop.name} refers to {prop.model_type!r}, which has no @digital_twin metadata",
            )
        return model_id


def build_models(twin_types: List[type], context: str = DTDLConfig.DEFAULT_CONTEXT) -> List[DTDLInterface]:
    """Build the Interfaces of several twin types, in the given order."""
    builder = TwinModelBuilder(context)
    return [builder.build(twin_type) for twin_type in twin_types]
