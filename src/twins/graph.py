"""
Twin graph helpers.

Walks the relationship members of twin instances to produce the upload order
of a twin graph, its relationship edges and the flat contents maps the
platform stores per twin.
"""

import dataclasses
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Set

from .attributes import get_twin_info
from .base import TwinBase, is_twin_type
from .constants import PLATFORM_MODULES
from .converter import TwinConverter
from .exceptions import TwinCycleError
from .models import BasicRelationship
from .properties import (
    get_component_properties,
    get_extension_data_property,
    get_normal_properties,
    get_relationship_properties,
    sort_by_derivation,
    to_camel_case,
)

logger = logging.getLogger(__name__)


def iter_relationship_targets(twin: TwinBase) -> Iterable[tuple]:
    """Yield ``(descriptor, target)`` for every twin referenced by ``twin``."""
    for prop in get_relationship_properties(type(twin)):
        value = prop.get_value(twin)
        if value is None:
            continue
        targets = [value] if isinstance(value, TwinBase) else value
        for target in targets:
            if isinstance(target, TwinBase):
                yield prop, target


def flatten(root: TwinBase) -> List[TwinBase]:
    """
    List ``root`` and every twin reachable through relationships.

    The root comes first; the remaining twins follow in depth-first
    post-order, so each twin appears after the twins it references. A twin
    reached more than once is listed once, at its first position.

    Raises:
        TwinCycleError: If a relationship leads back to a twin on the current path
    """
    result: List[TwinBase] = [root]
    seen: Set[int] = {id(root)}
    path: List[TwinBase] = [root]
    on_path: Set[int] = {id(root)}
    done: Set[int] = set()

    def traverse(twin: TwinBase) -> None:
        for _, target in iter_relationship_targets(twin):
            if id(target) in on_path:
                raise TwinCycleError(path + [target])
            if id(target) not in done:
                path.append(target)
                on_path.add(id(target))
                traverse(target)
                on_path.discard(id(target))
                path.pop()
                done.add(id(target))
            if id(target) not in seen:
                seen.add(id(target))
                result.append(target)

    traverse(root)
    logger.debug(f"Flattened twin graph of {root.id} into {len(result)} twins")
    return result


def get_relationships(twin: TwinBase) -> List[BasicRelationship]:
    """One edge per relationship target, named by the member's wire name."""
    return [
        BasicRelationship(source_id=twin.id, target_id=target.id, name=prop.twin_name)
        for prop, target in iter_relationship_targets(twin)
    ]


def _twin_ancestors(twin_type: type) -> List[type]:
    return [
        klass for klass in reversed(twin_type.__mro__[1:])
        if is_twin_type(klass) and klass is not TwinBase and get_twin_info(klass) is not None
    ]


def get_dependent_types(root: TwinBase) -> List[type]:
    """
    Twin types needed to upload the graph of ``root``: the types of every
    flattened twin, their twin ancestors and their component types,
    ancestors first.
    """
    model_types = [type(twin) for twin in flatten(root)]
    related: List[type] = []
    for model_type in model_types:
        related.extend(_twin_ancestors(model_type))
        related.extend(prop.model_type for prop in get_component_properties(model_type))

    unique: List[type] = []
    for model_type in model_types + related:
        if model_type not in unique:
            unique.append(model_type)
    return sort_by_derivation(unique)


def _contents_properties(twin: TwinBase) -> Iterable[tuple]:
    twin_type = type(twin)
    exclude = TwinConverter(twin_type).exclude
    for prop in get_normal_properties(twin_type, exclude=exclude, include_telemetry=False):
        yield prop.twin_name, prop.get_value(twin)
    for prop in get_component_properties(twin_type):
        yield prop.twin_name, prop.get_value(twin)


def to_twin_component(twin: TwinBase) -> Dict[str, Any]:
    """Contents map of ``twin`` used as a component, nulls dropped; nested components recurse."""
    return cleanup_contents({
        name: to_twin_component(value) if isinstance(value, TwinBase) else value
        for name, value in _contents_properties(twin)
    })


def is_user_object(value: Any) -> bool:
    """True for instances of application classes (not platform scalars or containers)."""
    value_type = type(value)
    if isinstance(value, Enum) or value_type.__module__.split(".")[0] in PLATFORM_MODULES:
        return False
    return dataclasses.is_dataclass(value) or hasattr(value, "__dict__")


def remove_null_members(value: Any) -> Dict[str, Any]:
    """Shallow map of the non-null members of an application object, camel-cased."""
    if dataclasses.is_dataclass(value):
        members = {member.name: getattr(value, member.name) for member in dataclasses.fields(value)}
    else:
        members = {name: item for name, item in vars(value).items() if not name.startswith("_")}
    return {to_camel_case(name): item for name, item in members.items() if item is not None}


def cleanup_contents(contents: Dict[str, Any]) -> Dict[str, Any]:
    """Drop null entries and strip the null members of application objects."""
    return {
        name: remove_null_members(value) if is_user_object(value) else value
        for name, value in contents.items()
        if value is not None
    }


def refresh_contents(twin: TwinBase) -> Dict[str, Any]:
    """
    Rebuild ``twin.contents`` from its Normal and Component members.

    Telemetry is not part of the stored twin state and is left out. Applying
    this twice yields the same map.
    """
    contents: Dict[str, Any] = {}
    extension = get_extension_data_property(type(twin))
    if extension is not None:
        contents.update(extension.get_value(twin) or {})
    for name, value in _contents_properties(twin):
        contents[name] = to_twin_component(value) if isinstance(value, TwinBase) else value

    twin.contents = cleanup_contents(contents)
    return twin.contents
