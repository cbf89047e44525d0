"""
Property Classifier

Partitions the declared members of a twin type into the wire-format
categories and resolves each member's wire name.

Classification reads the member table recorded by the field helpers in
``twins.attributes`` (dataclass field metadata) plus the ``ModelOnlyProperty``
descriptors declared on ``TwinBase``; it never guesses from attribute names.
Results are computed once per type and cached.

Category rules:
- Reserved: twin-only/model-only members whose wire name is platform-reserved
- Relationship: marked relationship, declared as a twin type or a sequence of them
- Component: marked component, declared as a twin type
- Normal: every other marked member; telemetry members follow explicit ones
"""

import collections.abc
import dataclasses
import inspect
import logging
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .attributes import (
    TWIN_MEMBER_KEY,
    ModelOnlyProperty,
    PropertyCategory,
    TwinMemberInfo,
    get_twin_info,
)
from .base import TwinBase, is_twin_type
from .constants import RESERVED_PROPERTY_NAMES
from .exceptions import TwinDefinitionError

logger = logging.getLogger(__name__)


_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    One classified member of a twin type.

    Attributes:
        name: Python attribute name
        twin_name: Wire name (override, else lower camel case of ``name``)
        category: Resolved wire-format category
        value_type: Declared type hint of the member
        settable: Whether wire values may be assigned to the member
        declaring_type: Class whose body declares the member
        info: Options recorded by the member's declaration
    """
    name: str
    twin_name: str
    category: PropertyCategory
    value_type: Any
    settable: bool
    declaring_type: type
    info: Optional[TwinMemberInfo] = None

    @property
    def model_type(self) -> Any:
        """Declared type with Optional and sequence wrappers removed."""
        return get_model_property_type(self.value_type)

    @property
    def is_collection(self) -> bool:
        return is_sequence_type(unwrap_optional(self.value_type))

    @property
    def is_extension_data(self) -> bool:
        return self.info is not None and self.info.extension_data

    def get_value(self, instance: Any) -> Any:
        return getattr(instance, self.name, None)

    def set_value(self, instance: Any, value: Any) -> None:
        setattr(instance, self.name, value)


# =============================================================================
# Type helpers
# =============================================================================

def to_camel_case(name: str) -> str:
    """
    Convert a member name to lower camel case.

    Examples: ``nested_obj`` -> ``nestedObj``, ``Quantity`` -> ``quantity``
    """
    parts = [part for part in name.split("_") if part]
    if not parts:
        return name
    head = parts[0][0].lower() + parts[0][1:]
    return head + "".join(part[0].upper() + part[1:] for part in parts[1:])


def unwrap_optional(hint: Any) -> Any:
    """``Optional[X]`` -> ``X``; anything else is returned unchanged."""
    if typing.get_origin(hint) is Union:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def is_sequence_type(hint: Any) -> bool:
    hint = unwrap_optional(hint)
    origin = typing.get_origin(hint)
    if origin is None:
        return hint in (list, tuple, set, frozenset)
    return origin in _SEQUENCE_ORIGINS


def get_model_property_type(hint: Any) -> Any:
    """Element type of a member: unwraps Optional and sequence wrappers."""
    hint = unwrap_optional(hint)
    if is_sequence_type(hint):
        args = [arg for arg in typing.get_args(hint) if arg is not Ellipsis]
        return unwrap_optional(args[0]) if args else Any
    return hint


def derivation_depth(cls: type) -> int:
    """Number of twin classes in the inheritance chain of ``cls``."""
    return sum(1 for klass in cls.__mro__ if is_twin_type(klass))


def sort_by_derivation(types: Iterable[type]) -> List[type]:
    """Stable sort placing ancestors before their descendants."""
    return sorted(types, key=derivation_depth)


def _iter_twin_subclasses(cls: type) -> Iterable[type]:
    for subclass in cls.__subclasses__():
        yield subclass
        yield from _iter_twin_subclasses(subclass)


def _resolve_type_hints(twin_type: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(twin_type)
    except NameError:
        pass
    # Retry with known twin types as locals so forward references between
    # twin types declared in function scopes still resolve.
    known = {cls.__name__: cls for cls in _iter_twin_subclasses(TwinBase)}
    try:
        return typing.get_type_hints(twin_type, localns=known)
    except (NameError, TypeError) as e:
        raise TwinDefinitionError(twin_type, f"cannot resolve member type hints: {e}") from e


def _declaring_type(twin_type: type, name: str) -> type:
    for klass in twin_type.__mro__:
        if name in inspect.get_annotations(klass):
            return klass
    return twin_type


def _resolve_category(twin_type: type, name: str, info: TwinMemberInfo, value_type: Any) -> PropertyCategory:
    if info.category is PropertyCategory.RELATIONSHIP:
        if is_twin_type(get_model_property_type(value_type)):
            return PropertyCategory.RELATIONSHIP
        logger.warning(
            f"{twin_type.__name__}.{name} is marked as a relationship but is not "
            f"declared as a twin type; treating it as a normal property"
        )
        return PropertyCategory.NORMAL
    if info.category is PropertyCategory.COMPONENT:
        declared = unwrap_optional(value_type)
        if is_twin_type(declared):
            return PropertyCategory.COMPONENT
        logger.warning(
            f"{twin_type.__name__}.{name} is marked as a component but is not "
            f"declared as a twin type; treating it as a normal property"
        )
        return PropertyCategory.NORMAL
    return info.category


# =============================================================================
# Classification
# =============================================================================

@lru_cache(maxsize=None)
def classify(twin_type: type) -> Tuple[PropertyDescriptor, ...]:
    """
    Classify every declared twin member of ``twin_type``.

    Returns:
        Descriptors in declaration order: dataclass members (base classes
        first), then model-only reserved members.
    """
    if not dataclasses.is_dataclass(twin_type):
        raise TwinDefinitionError(twin_type, "twin types must be dataclasses")

    hints = _resolve_type_hints(twin_type)
    descriptors: List[PropertyDescriptor] = []

    for member in dataclasses.fields(twin_type):
        info = member.metadata.get(TWIN_MEMBER_KEY)
        if info is None:
            continue
        value_type = hints.get(member.name, Any)
        descriptors.append(PropertyDescriptor(
            name=member.name,
            twin_name=info.name or to_camel_case(member.name),
            category=_resolve_category(twin_type, member.name, info, value_type),
            value_type=value_type,
            settable=info.writable,
            declaring_type=_declaring_type(twin_type, member.name),
            info=info,
        ))

    model_only: Dict[str, PropertyDescriptor] = {}
    for klass in reversed(twin_type.__mro__):
        for name, attribute in vars(klass).items():
            if isinstance(attribute, ModelOnlyProperty):
                model_only[name] = PropertyDescriptor(
                    name=name,
                    twin_name=attribute.twin_name,
                    category=PropertyCategory.RESERVED,
                    value_type=typing.get_type_hints(attribute.fget).get("return", Any),
                    settable=attribute.fset is not None,
                    declaring_type=klass,
                )
    descriptors.extend(model_only.values())

    logger.debug(f"Classified {len(descriptors)} members of {twin_type.__name__}")
    return tuple(descriptors)


def _excluding(properties: Iterable[PropertyDescriptor], exclude: Optional[Sequence[str]]) -> List[PropertyDescriptor]:
    if not exclude:
        return list(properties)
    return [prop for prop in properties if prop.twin_name not in exclude]


def get_twin_only_properties(
    twin_type: type,
    twin_only_property_names: Sequence[str] = RESERVED_PROPERTY_NAMES,
    exclude: Optional[Sequence[str]] = None,
) -> List[PropertyDescriptor]:
    """Reserved members whose wire name is in ``twin_only_property_names``, minus ``exclude``."""
    properties = [
        prop for prop in classify(twin_type)
        if prop.category is PropertyCategory.RESERVED
        and not prop.is_extension_data
        and prop.twin_name in twin_only_property_names
    ]
    return _excluding(properties, exclude)


def get_normal_properties(
    twin_type: type,
    reserved_property_names: Sequence[str] = RESERVED_PROPERTY_NAMES,
    exclude: Optional[Sequence[str]] = None,
    include_telemetry: bool = True,
) -> List[PropertyDescriptor]:
    """Explicit Normal members, followed by telemetry members, minus ``exclude``."""
    members = classify(twin_type)
    properties = [
        prop for prop in members
        if prop.category is PropertyCategory.NORMAL and prop.twin_name not in reserved_property_names
    ]
    if include_telemetry:
        properties.extend(
            prop for prop in members
            if prop.category is PropertyCategory.TELEMETRY and prop.twin_name not in reserved_property_names
        )
    return _excluding(properties, exclude)


def get_component_properties(twin_type: type) -> List[PropertyDescriptor]:
    return [prop for prop in classify(twin_type) if prop.category is PropertyCategory.COMPONENT]


def get_relationship_properties(twin_type: type) -> List[PropertyDescriptor]:
    return [prop for prop in classify(twin_type) if prop.category is PropertyCategory.RELATIONSHIP]


def get_extension_data_property(twin_type: type) -> Optional[PropertyDescriptor]:
    for prop in classify(twin_type):
        if prop.is_extension_data:
            return prop
    return None


def get_declared_properties(twin_type: type) -> List[PropertyDescriptor]:
    """
    Members that belong to ``twin_type``'s own model rather than an ancestor's.

    A member declared on an undecorated intermediate class belongs to the
    nearest decorated class below it.
    """
    declared = []
    for prop in classify(twin_type):
        owner = None
        for klass in twin_type.__mro__:
            if get_twin_info(klass) is not None:
                owner = klass
            if klass is prop.declaring_type:
                break
        if owner is twin_type:
            declared.append(prop)
    return declared
