"""
Declarative twin metadata.

A twin type is a dataclass deriving from ``TwinBase`` and decorated with
``@digital_twin``. Every member taking part in the wire format is declared
with one of the field helpers in this module; the helper records the member's
category and options in the dataclass field metadata, which is the table the
property classifier reads. Example:

    @digital_twin(display_name="Floor", version=1)
    class Floor(TwinBase):
        level: Optional[int] = twin_property()
        temperature: Optional[float] = twin_telemetry()
        hvac: Optional[Hvac] = twin_component()
        rooms: List[Room] = twin_relationship("contains", default_factory=list)
"""

import dataclasses
from dataclasses import MISSING, dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from .constants import DTDLConfig


TWIN_MEMBER_KEY = "twin_member"
"""Key under which member options are stored in ``dataclasses.field`` metadata."""

TWIN_INFO_ATTRIBUTE = "__twin_info__"


class PropertyCategory(str, Enum):
    """Wire-format category of a twin member."""
    RESERVED = "Reserved"
    NORMAL = "Normal"
    COMPONENT = "Component"
    RELATIONSHIP = "Relationship"
    TELEMETRY = "Telemetry"


@dataclass(frozen=True)
class TwinMemberInfo:
    """
    Options recorded for one declared twin member.

    Attributes:
        category: The category requested by the declaration
        name: Wire name override (defaults to the camel-cased member name)
        writable: Whether wire values may be assigned to the member
        extension_data: Member collects wire keys no other member claims
        min_multiplicity: Relationship lower bound for the model document
        max_multiplicity: Relationship upper bound for the model document
        display_name: Optional display name for the model document
        description: Optional description for the model document
    """
    category: PropertyCategory
    name: Optional[str] = None
    writable: bool = True
    extension_data: bool = False
    min_multiplicity: Optional[int] = None
    max_multiplicity: Optional[int] = None
    display_name: Optional[str] = None
    description: Optional[str] = None


def _twin_field(info: TwinMemberInfo, default: Any, default_factory: Any, **kwargs: Any) -> Any:
    metadata = {TWIN_MEMBER_KEY: info}
    if default_factory is not MISSING:
        return dataclasses.field(default_factory=default_factory, metadata=metadata, **kwargs)
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


def twin_property(
    name: Optional[str] = None,
    *,
    default: Any = None,
    default_factory: Any = MISSING,
    writable: bool = True,
    display_name: Optional[str] = None,
    description: Optional[str] = None,
) -> Any:
    """Declare a Normal property of a twin."""
    info = TwinMemberInfo(
        PropertyCategory.NORMAL,
        name=name,
        writable=writable,
        display_name=display_name,
        description=description,
    )
    return _twin_field(info, default, default_factory)


def twin_telemetry(
    name: Optional[str] = None,
    *,
    default: Any = None,
    default_factory: Any = MISSING,
    display_name: Optional[str] = None,
    description: Optional[str] = None,
) -> Any:
    """Declare a telemetry member; written alongside Normal properties."""
    info = TwinMemberInfo(
        PropertyCategory.TELEMETRY,
        name=name,
        display_name=display_name,
        description=description,
    )
    return _twin_field(info, default, default_factory)


def twin_component(
    name: Optional[str] = None,
    *,
    default: Any = None,
    default_factory: Any = MISSING,
    display_name: Optional[str] = None,
    description: Optional[str] = None,
) -> Any:
    """Declare a component: another twin type inlined into this twin's document."""
    info = TwinMemberInfo(
        PropertyCategory.COMPONENT,
        name=name,
        display_name=display_name,
        description=description,
    )
    return _twin_field(info, default, default_factory)


def twin_relationship(
    name: Optional[str] = None,
    *,
    default: Any = None,
    default_factory: Any = MISSING,
    min_multiplicity: Optional[int] = None,
    max_multiplicity: Optional[int] = None,
    display_name: Optional[str] = None,
    description: Optional[str] = None,
) -> Any:
    """
    Declare a relationship to one twin or a sequence of twins.

    Relationship targets are peers referenced by id, so they are left out of
    the generated ``__eq__`` and ``__repr__``.
    """
    info = TwinMemberInfo(
        PropertyCategory.RELATIONSHIP,
        name=name,
        min_multiplicity=min_multiplicity,
        max_multiplicity=max_multiplicity,
        display_name=display_name,
        description=description,
    )
    return _twin_field(info, default, default_factory, compare=False, repr=False)


def twin_only_property(
    name: Optional[str] = None,
    *,
    default: Any = None,
    default_factory: Any = MISSING,
    writable: bool = True,
) -> Any:
    """Declare a reserved member that only appears in twin documents ($dtId, $etag, ...)."""
    info = TwinMemberInfo(PropertyCategory.RESERVED, name=name, writable=writable)
    return _twin_field(info, default, default_factory)


def twin_extension_data(*, name: Optional[str] = None) -> Any:
    """Declare a mapping that receives every wire key no other member claims."""
    info = TwinMemberInfo(PropertyCategory.RESERVED, name=name, extension_data=True)
    return _twin_field(info, None, dict)


class ModelOnlyProperty(property):
    """Read-only reserved member derived from the type's ``@digital_twin`` metadata."""

    def __init__(self, twin_name: str, fget: Callable[[Any], Any]):
        super().__init__(fget, doc=fget.__doc__)
        self.twin_name = twin_name


def model_only_property(twin_name: str) -> Callable[[Callable[[Any], Any]], ModelOnlyProperty]:
    """Decorator declaring a model-only reserved member (@id, @type, extends, ...)."""
    def decorator(fget: Callable[[Any], Any]) -> ModelOnlyProperty:
        return ModelOnlyProperty(twin_name, fget)
    return decorator


@dataclass(frozen=True)
class DigitalTwinInfo:
    """
    Model-level metadata attached to a twin type by ``@digital_twin``.

    Attributes:
        display_name: Human readable model name
        version: Model version appended to the model id
        model_id: Explicit model id, with or without the ``;version`` suffix
        extends_model_id: Explicit parent model id (defaults to the parent twin type)
        model_type: DTDL element type of the model
        description: Optional model description
        namespace: Namespace segment used when ``model_id`` is not given
        exclude: Wire names left out of this type's twin documents
    """
    display_name: Optional[str] = None
    version: int = DTDLConfig.DEFAULT_VERSION
    model_id: Optional[str] = None
    extends_model_id: Optional[str] = None
    model_type: str = DTDLConfig.DEFAULT_MODEL_TYPE
    description: Optional[str] = None
    namespace: str = DTDLConfig.DEFAULT_NAMESPACE
    exclude: Tuple[str, ...] = ()

    def get_full_model_id(self, twin_type: type) -> str:
        """
        Resolve the versioned model id of ``twin_type``.

        Example: ``Building`` with version 1 -> ``dtmi:twins:Building;1``
        """
        model_id = self.model_id or f"dtmi:{self.namespace}:{twin_type.__name__}"
        if ";" in model_id:
            return model_id
        return f"{model_id};{self.version}"


def digital_twin(
    _cls: Optional[type] = None,
    *,
    display_name: Optional[str] = None,
    version: int = DTDLConfig.DEFAULT_VERSION,
    model_id: Optional[str] = None,
    extends: Optional[str] = None,
    model_type: str = DTDLConfig.DEFAULT_MODEL_TYPE,
    description: Optional[str] = None,
    namespace: str = DTDLConfig.DEFAULT_NAMESPACE,
    exclude: Tuple[str, ...] = (),
) -> Any:
    """
    Mark a class as a twin type.

    The class is turned into a dataclass unless it already is one in its own
    right. Can be used bare (``@digital_twin``) or with options.
    """
    def wrap(cls: type) -> type:
        if "__dataclass_fields__" not in cls.__dict__:
            cls = dataclass(cls)
        info = DigitalTwinInfo(
            display_name=display_name if display_name is not None else cls.__name__,
            version=version,
            model_id=model_id,
            extends_model_id=extends,
            model_type=model_type,
            description=description,
            namespace=namespace,
            exclude=tuple(exclude),
        )
        setattr(cls, TWIN_INFO_ATTRIBUTE, info)
        return cls

    if _cls is not None:
        return wrap(_cls)
    return wrap


def get_twin_info(cls: Any, inherit: bool = False) -> Optional[DigitalTwinInfo]:
    """
    Get the ``@digital_twin`` metadata of a class.

    Args:
        cls: The class to inspect
        inherit: If False, only metadata declared on ``cls`` itself counts
    """
    if not isinstance(cls, type):
        return None
    if inherit:
        return getattr(cls, TWIN_INFO_ATTRIBUTE, None)
    return cls.__dict__.get(TWIN_INFO_ATTRIBUTE)


def get_model_id(cls: Any) -> Optional[str]:
    """Model id of ``cls``, or of its nearest ancestor carrying twin metadata."""
    if not isinstance(cls, type):
        return None
    for klass in cls.__mro__:
        info = get_twin_info(klass)
        if info is not None:
            return info.get_full_model_id(klass)
    return None
