"""
Twin base class.

Every twin type derives from TwinBase, which declares the reserved members
shared by all twins (identity, concurrency tag, model metadata) and exposes the
graph helpers used when a twin graph is uploaded to the platform.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .attributes import (
    digital_twin,
    get_model_id,
    get_twin_info,
    model_only_property,
    twin_extension_data,
    twin_only_property,
)
from .constants import DTDLConfig, DigitalTwinsJsonPropertyNames, ModelPropertyNames
from .models import BasicRelationship, BasicTwin, TwinMetadata
from .scalars import ETag


@dataclass
class TwinBase:
    """
    Base class of all twin types.

    Subclasses are declared with ``@digital_twin`` and the member helpers from
    ``twins.attributes``. Model-level reserved members (``@id``, ``@type``,
    ``extends``, ``@context``, ``displayName``) are read from the type's
    metadata and cannot be assigned.
    """
    id: Optional[str] = twin_only_property(DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_ID)
    etag: Optional[ETag] = twin_only_property(DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_ETAG)
    metadata: Optional[TwinMetadata] = twin_only_property(DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_METADATA)
    contents: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @model_only_property(ModelPropertyNames.ID)
    def model_id(self) -> Optional[str]:
        return get_model_id(type(self))

    @model_only_property(ModelPropertyNames.TYPE)
    def model_type(self) -> str:
        info = get_twin_info(type(self), inherit=True)
        return info.model_type if info else DTDLConfig.DEFAULT_MODEL_TYPE

    @model_only_property(ModelPropertyNames.EXTENDS)
    def extends_model_id(self) -> Optional[str]:
        return get_extends_model_id(type(self))

    @model_only_property(ModelPropertyNames.CONTEXT)
    def context(self) -> str:
        return DTDLConfig.DEFAULT_CONTEXT

    @model_only_property(ModelPropertyNames.DISPLAY_NAME)
    def display_name(self) -> Optional[str]:
        info = get_twin_info(type(self), inherit=True)
        return info.display_name if info else None

    def flatten(self) -> List["TwinBase"]:
        """
        Compile a flat list of this twin and every twin reachable through its
        relationships. Dependencies come before the twins referencing them;
        this twin is always first.
        """
        from .graph import flatten
        return flatten(self)

    def get_dependent_types(self) -> List[type]:
        """Twin types that must be uploaded before this twin graph, ancestors first."""
        from .graph import get_dependent_types
        return get_dependent_types(self)

    def get_relationships(self) -> List[BasicRelationship]:
        from .graph import get_relationships
        return get_relationships(self)

    def refresh_contents(self) -> Dict[str, Any]:
        """Rebuild ``contents`` from the Normal and Component members."""
        from .graph import refresh_contents
        return refresh_contents(self)

    def to_twin_component(self) -> Dict[str, Any]:
        from .graph import to_twin_component
        return to_twin_component(self)

    def to_basic_twin(self) -> BasicTwin:
        """Project this twin onto the untyped platform shape."""
        contents = self.refresh_contents()
        return BasicTwin(
            id=self.id,
            etag=self.etag,
            metadata=TwinMetadata(model=self.model_id),
            contents=dict(contents),
        )


def get_extends_model_id(twin_type: type) -> Optional[str]:
    """Model id ``twin_type`` extends: explicit, else the nearest twin ancestor's."""
    info = get_twin_info(twin_type)
    if info is not None and info.extends_model_id:
        return info.extends_model_id
    for ancestor in twin_type.__mro__[1:]:
        if get_twin_info(ancestor) is not None:
            return get_model_id(ancestor)
    return None


def is_twin_type(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, TwinBase)


@digital_twin(display_name="Generic Twin for Serialization")
class GenericTwin(TwinBase):
    """
    Twin of a model that has no Python type.

    Every wire key that is not a reserved member lands in ``contents`` and is
    written back unchanged.
    """
    contents: Dict[str, Any] = twin_extension_data(name="contents")
