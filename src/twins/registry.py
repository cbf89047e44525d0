"""
Model Registry

Indexes every registered twin type by model id and computes, per type, the
relationship set it declares plus the relationships inherited from its
ancestors.

Registration is explicit: types are handed to ``ModelLibrary`` directly, or the
modules declaring them are named and scanned once with
``ModelLibrary.from_modules``. The index is built once and is read-only
afterwards, so one library can be shared between threads without locking.

Example usage:
    library = ModelLibrary.from_modules(["myapp.twins"])
    building_type = library.get_by_id("dtmi:twins:Building;1")
    model = library.get_twin_model(building_type)
"""

import importlib
import inspect
import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType, ModuleType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from .attributes import PropertyCategory, get_twin_info
from .base import GenericTwin
from .constants import DigitalTwinsJsonPropertyNames
from .exceptions import DuplicateModelIdError, TwinParseError, TwinTypeNotRegisteredError
from .properties import (
    get_declared_properties,
    get_model_property_type,
    get_relationship_properties,
    sort_by_derivation,
)

logger = logging.getLogger(__name__)


@dataclass
class TwinModel:
    """
    Relationship model of one twin type.

    Attributes:
        twin_type: The indexed twin type
        relationships: Relationships declared by the type itself (name -> target type)
        extending_relationships: Relationships inherited from ancestors; the
            closest ancestor defining a name wins
    """
    twin_type: type
    relationships: Dict[str, type] = field(default_factory=dict)
    extending_relationships: Dict[str, type] = field(default_factory=dict)

    @property
    def all_relationships(self) -> Dict[str, type]:
        """Effective relationship set: own relationships, then inherited ones."""
        merged = dict(self.relationships)
        for name, target in self.extending_relationships.items():
            merged.setdefault(name, target)
        return merged


class TwinModelFactory:
    """Creates the TwinModel of a twin type from its declared relationships."""

    def create_twin_model(self, twin_type: type) -> TwinModel:
        declared = {prop.name for prop in get_declared_properties(twin_type)}
        relationships = {
            prop.twin_name: prop.model_type
            for prop in get_relationship_properties(twin_type)
            if prop.name in declared
        }
        return TwinModel(twin_type=twin_type, relationships=relationships)


def discover_twin_types(module: Union[str, ModuleType]) -> List[type]:
    """
    List the twin types declared in a module.

    Only classes defined in the module and carrying their own ``@digital_twin``
    metadata count; abstract classes are skipped. A module that cannot be
    imported or listed contributes no types.
    """
    try:
        if isinstance(module, str):
            module = importlib.import_module(module)
        members = inspect.getmembers(module, inspect.isclass)
    except Exception as e:
        logger.warning(f"Skipping twin discovery in {module}: {e}")
        return []

    return [
        cls for _, cls in members
        if cls.__module__ == module.__name__
        and get_twin_info(cls) is not None
        and not inspect.isabstract(cls)
    ]


def get_model_id_from_json(document: Union[str, Mapping[str, Any]]) -> Optional[str]:
    """Read ``$metadata.$model`` from a twin document."""
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise TwinParseError(f"Invalid twin JSON: {e.msg}", position=e.pos) from e
    if not isinstance(document, Mapping):
        raise TwinParseError("Twin JSON must be an object")
    metadata = document.get(DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_METADATA)
    if not isinstance(metadata, Mapping):
        return None
    return metadata.get(DigitalTwinsJsonPropertyNames.METADATA_MODEL)


class ModelLibrary:
    """
    Process-wide index of twin types.

    Args:
        types: Twin types to register
        include_generic: Also register ``GenericTwin`` so documents of unknown
            models can still be read
    """

    def __init__(self, types: Iterable[type] = (), *, include_generic: bool = True):
        candidates: List[type] = []
        for twin_type in list(types) + ([GenericTwin] if include_generic else []):
            if twin_type not in candidates:
                candidates.append(twin_type)

        model_types: Dict[str, type] = {}
        twin_models: Dict[type, TwinModel] = {}
        factory = TwinModelFactory()

        for twin_type in sort_by_derivation(candidates):
            info = get_twin_info(twin_type)
            if info is None or inspect.isabstract(twin_type):
                logger.debug(f"Ignoring {twin_type.__qualname__}: not a twin type")
                continue
            model_id = info.get_full_model_id(twin_type)
            if model_id in model_types:
                raise DuplicateModelIdError(model_id, model_types[model_id], twin_type)
            model_types[model_id] = twin_type
            twin_models[twin_type] = factory.create_twin_model(twin_type)

        for twin_type, twin_model in twin_models.items():
            self._initialize_extending_relationships(twin_type, twin_model, twin_models)

        self._model_types: Mapping[str, type] = MappingProxyType(model_types)
        self._twin_models: Mapping[type, TwinModel] = MappingProxyType(twin_models)
        logger.debug(f"Model library built with {len(model_types)} twin types")

    @classmethod
    def from_modules(cls, modules: Iterable[Union[str, ModuleType]], **kwargs: Any) -> "ModelLibrary":
        """Build a library from every twin type declared in ``modules``."""
        types: List[type] = []
        for module in modules:
            types.extend(discover_twin_types(module))
        return cls(types, **kwargs)

    @staticmethod
    def _initialize_extending_relationships(
        twin_type: type,
        twin_model: TwinModel,
        twin_models: Mapping[type, TwinModel],
    ) -> None:
        # Walk from the immediate parent upwards; a name already merged from a
        # closer ancestor is kept.
        for ancestor in twin_type.__mro__[1:]:
            ancestor_model = twin_models.get(ancestor)
            if ancestor_model is None:
                continue
            for name, target in ancestor_model.relationships.items():
                twin_model.extending_relationships.setdefault(name, target)

    @property
    def all(self) -> List[type]:
        """Registered twin types, ancestors before descendants."""
        return list(self._model_types.values())

    @property
    def model_ids(self) -> List[str]:
        return list(self._model_types.keys())

    def __contains__(self, twin_type: object) -> bool:
        return twin_type in self._twin_models

    def __len__(self) -> int:
        return len(self._model_types)

    def __iter__(self):
        return iter(self._model_types.values())

    def get_by_id(self, model_id: str) -> Optional[type]:
        return self._model_types.get(model_id)

    def get_twin_model(self, twin_type: type) -> TwinModel:
        model = self._twin_models.get(twin_type)
        if model is None:
            raise TwinTypeNotRegisteredError(twin_type)
        return model

    def get_derived_types(self, twin_type: Any) -> List[type]:
        """Registered types deriving from ``twin_type`` (excluding itself)."""
        model_type = get_model_property_type(twin_type)
        return [
            candidate for candidate in self._model_types.values()
            if isinstance(model_type, type)
            and issubclass(candidate, model_type)
            and candidate is not model_type
        ]

    def _traverse_relationships(
        self,
        model_type: Any,
        found: Optional[List[type]] = None,
        visited: Optional[Set[type]] = None,
    ) -> List[type]:
        """Types reachable from ``model_type`` through its own components and relationships."""
        found = [] if found is None else found
        visited = set() if visited is None else visited
        model_type = get_model_property_type(model_type)
        if not isinstance(model_type, type) or model_type in visited:
            return found
        visited.add(model_type)

        targets = [
            prop.model_type for prop in get_declared_properties(model_type)
            if prop.category in (PropertyCategory.COMPONENT, PropertyCategory.RELATIONSHIP)
        ]
        for target in targets:
            if target is not model_type:
                self._traverse_relationships(target, found, visited)
                found.append(target)
        return found

    def get_related_types(self, twin_type: Any) -> List[type]:
        """Registered types that reference ``twin_type`` as a component or relationship target."""
        model_type = get_model_property_type(twin_type)
        return [
            candidate for candidate in self._model_types.values()
            if model_type in self._traverse_relationships(candidate)
        ]

    def get_dependent_types(self, twin_type: Any) -> List[type]:
        """Types affected by a change to ``twin_type``: derived types, then related types."""
        result = self.get_derived_types(twin_type)
        result.extend(self.get_related_types(twin_type))
        return result

    def get_type_from_json(self, document: Union[str, Mapping[str, Any]]) -> Optional[type]:
        model_id = get_model_id_from_json(document)
        if model_id is None:
            return None
        return self._model_types.get(model_id)
