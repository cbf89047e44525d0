"""
Twin Converter

Converts twin instances to and from the platform's wire documents.

A twin document is a single JSON object written in a fixed order:
1. Reserved properties ($dtId, $etag, $metadata) minus the excluded names
2. Normal properties, explicit ones first, then telemetry
3. Components, each an inline object (or null when absent)

Reading streams over the document's key/value pairs and converts each value
to the declared member type through a closed table of scalar readers; nested
classes are read by a converter specialized to the declared type. Unknown keys
are ignored and nulls leave members at their default.
"""

import collections.abc
import dataclasses
import logging
import typing
from dataclasses import MISSING
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from .attributes import get_twin_info
from .base import TwinBase, is_twin_type
from .constants import EXCLUDED_TWIN_PROPERTY_NAMES, RESERVED_PROPERTY_NAMES
from .exceptions import TwinParseError, TwinValueError
from .models import TwinMetadata
from .properties import (
    PropertyDescriptor,
    get_component_properties,
    get_extension_data_property,
    get_normal_properties,
    get_twin_only_properties,
    is_sequence_type,
    to_camel_case,
    unwrap_optional,
)
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

logger = logging.getLogger(__name__)


# =============================================================================
# Instance factories
# =============================================================================

_INSTANCE_FACTORIES: Dict[type, Callable[[], Any]] = {}


def register_instance_factory(cls: type, factory: Callable[[], Any]) -> None:
    """Use ``factory`` instead of the zero-value builder when reading ``cls``."""
    _INSTANCE_FACTORIES[cls] = factory
    instance_factory.cache_clear()


@lru_cache(maxsize=None)
def instance_factory(cls: type) -> Callable[[], Any]:
    """
    Builder producing a zero-value instance of ``cls``.

    Neither ``__init__`` nor ``__post_init__`` runs: members get their
    declared defaults, so validation and setup logic never observe a
    half-read instance.
    """
    if cls in _INSTANCE_FACTORIES:
        return _INSTANCE_FACTORIES[cls]

    members = dataclasses.fields(cls) if dataclasses.is_dataclass(cls) else ()

    def build() -> Any:
        instance = cls.__new__(cls)
        for member in members:
            if member.default is not MISSING:
                value = member.default
            elif member.default_factory is not MISSING:
                value = member.default_factory()
            else:
                value = None
            object.__setattr__(instance, member.name, value)
        return instance

    return build


def create_instance(cls: type) -> Any:
    return instance_factory(cls)()


# =============================================================================
# Writing
# =============================================================================

def _write_decimal(value: Decimal) -> Decimal:
    # the serializer writes the exact decimal text
    if not value.is_finite():
        raise TwinValueError(f"{value} has no JSON representation", value=value)
    return value


def write_scalar(value: Any, allow_etag: bool = False) -> Any:
    """
    Write a member value: str, int, Decimal and bool natively, the concurrency
    tag as its bare string, anything else through ``write_value``.
    """
    if isinstance(value, (str, bool, int)) and not isinstance(value, Enum):
        return value
    if isinstance(value, Decimal):
        return _write_decimal(value)
    if allow_etag and isinstance(value, ETag):
        return str(value)
    return write_value(value)


def write_value(value: Any) -> Any:
    """Convert any supported member value to a JSON-compatible value."""
    if isinstance(value, Enum):
        return value.value if isinstance(value.value, (int, str)) else value.name
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Decimal):
        return _write_decimal(value)
    if isinstance(value, ETag):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, TwinMetadata):
        return value.to_dict()
    if isinstance(value, TwinBase):
        return ComponentConverter(type(value)).write(value)
    if isinstance(value, Mapping):
        return {str(key): write_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [write_value(item) for item in value]
    if dataclasses.is_dataclass(value):
        members = ((member.name, getattr(value, member.name)) for member in dataclasses.fields(value))
    elif hasattr(value, "__dict__"):
        members = ((name, item) for name, item in vars(value).items() if not name.startswith("_"))
    else:
        raise TwinValueError(f"cannot serialize value of type {type(value).__name__}", value=value)
    return {to_camel_case(name): write_value(item) for name, item in members if item is not None}


# =============================================================================
# Reading
# =============================================================================

def _expected(kind: str, raw: Any, key: Optional[str]) -> TwinValueError:
    return TwinValueError(f"expected {kind}, got {type(raw).__name__} {raw!r}", key=key, value=raw)


def _is_number(raw: Any) -> bool:
    return isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool)


def _read_string(raw: Any, key: Optional[str]) -> str:
    if not isinstance(raw, str):
        raise _expected("string", raw, key)
    return raw


def _read_bool(raw: Any, key: Optional[str]) -> bool:
    if not isinstance(raw, bool):
        raise _expected("boolean", raw, key)
    return raw


def _read_int(raw: Any, key: Optional[str]) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise _expected("integer", raw, key)
    return raw


def _integer_reader(bits: int, signed: bool) -> Callable[[Any, Optional[str]], int]:
    low, high = ((-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1))
    kind = f"{'' if signed else 'unsigned '}{bits}-bit integer"

    def read(raw: Any, key: Optional[str]) -> int:
        value = _read_int(raw, key)
        if not low <= value <= high:
            raise TwinValueError(f"{value} is out of range for a {kind}", key=key, value=raw)
        return value

    return read


def _read_double(raw: Any, key: Optional[str]) -> float:
    if not _is_number(raw):
        raise _expected("number", raw, key)
    return float(raw)


_SINGLE_MAX = 3.4028234663852886e38


def _read_single(raw: Any, key: Optional[str]) -> float:
    value = _read_double(raw, key)
    if abs(value) > _SINGLE_MAX:
        raise TwinValueError(f"{value} is out of range for a single-precision float", key=key, value=raw)
    return value


def _read_decimal(raw: Any, key: Optional[str]) -> Decimal:
    if not _is_number(raw):
        raise _expected("number", raw, key)
    if isinstance(raw, Decimal):
        return raw
    try:
        return Decimal(str(raw))
    except InvalidOperation as e:
        raise TwinValueError(f"{raw!r} is not a decimal", key=key, value=raw) from e


def _read_char(raw: Any, key: Optional[str]) -> str:
    value = _read_string(raw, key)
    if not value:
        raise TwinValueError("expected a character, got an empty string", key=key, value=raw)
    return value[0]


def _read_uuid(raw: Any, key: Optional[str]) -> UUID:
    text = _read_string(raw, key)
    try:
        return UUID(text)
    except ValueError as e:
        raise TwinValueError(f"{raw!r} is not a unique identifier", key=key, value=raw) from e


def _parse_iso(parser: Callable[[str], Any], kind: str, raw: Any, key: Optional[str]) -> Any:
    text = _read_string(raw, key)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return parser(text)
    except ValueError as e:
        raise TwinValueError(f"{raw!r} is not a valid {kind}", key=key, value=raw) from e


def _read_datetime(raw: Any, key: Optional[str]) -> datetime:
    return _parse_iso(datetime.fromisoformat, "timestamp", raw, key)


def _read_date(raw: Any, key: Optional[str]) -> date:
    return _parse_iso(date.fromisoformat, "date", raw, key)


def _read_time(raw: Any, key: Optional[str]) -> time:
    return _parse_iso(time.fromisoformat, "time", raw, key)


def _read_etag(raw: Any, key: Optional[str]) -> ETag:
    return ETag(_read_string(raw, key))


def _read_metadata(raw: Any, key: Optional[str]) -> TwinMetadata:
    if not isinstance(raw, Mapping):
        raise _expected("object", raw, key)
    return TwinMetadata.from_dict(raw)


SCALAR_READERS: Dict[Any, Callable[[Any, Optional[str]], Any]] = {
    str: _read_string,
    bool: _read_bool,
    int: _read_int,
    Byte: _integer_reader(8, signed=True),
    UnsignedByte: _integer_reader(8, signed=False),
    Short: _integer_reader(16, signed=True),
    UnsignedShort: _integer_reader(16, signed=False),
    Integer: _integer_reader(32, signed=True),
    UnsignedInteger: _integer_reader(32, signed=False),
    Long: _integer_reader(64, signed=True),
    UnsignedLong: _integer_reader(64, signed=False),
    float: _read_double,
    Float: _read_single,
    Decimal: _read_decimal,
    Char: _read_char,
    UUID: _read_uuid,
    datetime: _read_datetime,
    date: _read_date,
    time: _read_time,
    ETag: _read_etag,
    TwinMetadata: _read_metadata,
}
"""Readers keyed by declared member type."""


def _read_enum(raw: Any, enum_type: type, key: Optional[str]) -> Enum:
    try:
        if _is_number(raw):
            return enum_type(raw)
        if isinstance(raw, str):
            if raw in enum_type.__members__:
                return enum_type[raw]
            try:
                return enum_type(raw)
            except ValueError:
                if not raw.lstrip("-").isdigit():
                    raise
            return enum_type(int(raw))
    except ValueError as e:
        raise TwinValueError(f"{raw!r} is not a member of {enum_type.__name__}", key=key, value=raw) from e
    raise _expected(f"{enum_type.__name__} name or value", raw, key)


def _read_object(raw: Any, cls: type, key: Optional[str]) -> Any:
    """Read a nested, non-twin object: members matched by camel-cased or plain name."""
    if not isinstance(raw, Mapping):
        raise _expected("object", raw, key)
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}
    if dataclasses.is_dataclass(cls):
        names = [member.name for member in dataclasses.fields(cls)]
    else:
        names = list(hints)
    by_wire_name = {to_camel_case(name): name for name in names}
    by_wire_name.update({name: name for name in names})

    instance = create_instance(cls)
    for wire_name, item in raw.items():
        name = by_wire_name.get(wire_name)
        if name is None or item is None:
            continue
        object.__setattr__(instance, name, read_value(item, hints.get(name, Any), wire_name))
    return instance


def read_value(raw: Any, value_type: Any, key: Optional[str] = None) -> Any:
    """Convert a wire value to ``value_type``."""
    if raw is None:
        return None
    target = unwrap_optional(value_type)
    if target is Any or target is object:
        return raw

    reader = SCALAR_READERS.get(target)
    if reader is not None:
        return reader(raw, key)

    origin = typing.get_origin(target)
    args = typing.get_args(target)

    if isinstance(target, type) and issubclass(target, Enum):
        return _read_enum(raw, target, key)

    if is_sequence_type(target):
        if not isinstance(raw, list):
            raise _expected("array", raw, key)
        if origin is tuple and args and args[-1] is not Ellipsis:
            return tuple(read_value(item, item_type, key) for item, item_type in zip(raw, args))
        item_type = args[0] if args else Any
        items = [read_value(item, item_type, key) for item in raw]
        for container in (tuple, set, frozenset):
            if origin is container or target is container:
                return container(items)
        return items

    if target is dict or (isinstance(origin, type) and issubclass(origin, collections.abc.Mapping)):
        if not isinstance(raw, Mapping):
            raise _expected("object", raw, key)
        item_type = args[1] if len(args) == 2 else Any
        return {name: read_value(item, item_type, key) for name, item in raw.items()}

    if is_twin_type(target):
        return ComponentConverter(target).read(raw)

    if isinstance(target, type):
        return _read_object(raw, target, key)

    return raw


def _iter_pairs(document: Any) -> Iterable[Tuple[str, Any]]:
    if isinstance(document, Mapping):
        return document.items()
    raise TwinParseError(f"Twin JSON must be an object, got {type(document).__name__}")


# =============================================================================
# Converters
# =============================================================================

class TwinConverter:
    """
    Converts one twin type to and from its wire document.

    Example usage:
        converter = TwinConverter(Building)
        document = converter.write(building)
        copy = converter.read(document)

    Args:
        twin_type: The twin type handled by this converter
        exclude: Additional wire names left out of written documents
    """

    special_twin_property_names: Tuple[str, ...] = RESERVED_PROPERTY_NAMES
    twin_property_names_to_exclude: Tuple[str, ...] = EXCLUDED_TWIN_PROPERTY_NAMES

    def __init__(self, twin_type: type, exclude: Sequence[str] = ()):
        self.twin_type = twin_type
        info = get_twin_info(twin_type, inherit=True)
        type_exclusions = info.exclude if info is not None else ()
        self.exclude: Tuple[str, ...] = (
            tuple(self.twin_property_names_to_exclude) + tuple(exclude) + tuple(type_exclusions)
        )

    # -- writing -------------------------------------------------------------

    def write(self, twin: Any) -> Dict[str, Any]:
        """Convert ``twin`` to an ordered wire document."""
        document: Dict[str, Any] = {}
        self._write_reserved(twin, document)
        self._write_normal(twin, document)
        self._write_components(twin, document)
        self._write_extension_data(twin, document)
        return document

    def _write_reserved(self, twin: Any, document: Dict[str, Any]) -> None:
        """Absent reserved members are left out; Normal members are written as null."""
        for prop in get_twin_only_properties(self.twin_type, self.special_twin_property_names, self.exclude):
            value = prop.get_value(twin)
            if value is None:
                continue
            document[prop.twin_name] = write_scalar(value, allow_etag=True)

    def _write_normal(self, twin: Any, document: Dict[str, Any]) -> None:
        for prop in get_normal_properties(self.twin_type, self.special_twin_property_names, self.exclude):
            document[prop.twin_name] = write_scalar(prop.get_value(twin))

    def _write_components(self, twin: Any, document: Dict[str, Any]) -> None:
        for prop in get_component_properties(self.twin_type):
            value = prop.get_value(twin)
            if value is None:
                document[prop.twin_name] = None
            else:
                document[prop.twin_name] = ComponentConverter(type(value)).write(value)

    def _write_extension_data(self, twin: Any, document: Dict[str, Any]) -> None:
        extension = get_extension_data_property(self.twin_type)
        if extension is None:
            return
        for name, value in (extension.get_value(twin) or {}).items():
            document.setdefault(name, write_value(value))

    # -- reading -------------------------------------------------------------

    def property_map(self) -> Dict[str, PropertyDescriptor]:
        """Wire name -> member for every member a document may populate."""
        properties: List[PropertyDescriptor] = []
        properties.extend(get_twin_only_properties(self.twin_type, self.special_twin_property_names))
        properties.extend(get_normal_properties(self.twin_type, self.special_twin_property_names))
        properties.extend(get_component_properties(self.twin_type))

        prop_map: Dict[str, PropertyDescriptor] = {}
        for prop in properties:
            prop_map.setdefault(prop.twin_name, prop)
        return prop_map

    def read(self, document: Any) -> Any:
        """Create a twin from a parsed wire document without running its constructor."""
        prop_map = self.property_map()
        extension = get_extension_data_property(self.twin_type)
        overflow: Dict[str, Any] = {}

        instance = create_instance(self.twin_type)
        for name, raw in _iter_pairs(document):
            prop = prop_map.get(name)
            if prop is None:
                if extension is not None:
                    overflow[name] = raw
                continue
            if raw is None or not prop.settable:
                continue
            prop.set_value(instance, read_value(raw, prop.value_type, prop.twin_name))

        if extension is not None:
            extension.set_value(instance, overflow)
        return instance


class ComponentConverter(TwinConverter):
    """
    Converts a twin used as an inline component.

    Components have no identity of their own: only Normal properties and
    nested components are written, and absent values are left out.
    """

    def write(self, twin: Any) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for prop in get_normal_properties(self.twin_type, self.special_twin_property_names, self.exclude):
            value = prop.get_value(twin)
            if value is not None:
                document[prop.twin_name] = write_scalar(value)
        for prop in get_component_properties(self.twin_type):
            value = prop.get_value(twin)
            if value is not None:
                document[prop.twin_name] = ComponentConverter(type(value)).write(value)
        return document

    def property_map(self) -> Dict[str, PropertyDescriptor]:
        prop_map: Dict[str, PropertyDescriptor] = {}
        for prop in get_normal_properties(self.twin_type, self.special_twin_property_names):
            prop_map.setdefault(prop.twin_name, prop)
        for prop in get_component_properties(self.twin_type):
            prop_map.setdefault(prop.twin_name, prop)
        return prop_map

    def read(self, document: Any) -> Any:
        if not isinstance(document, Mapping):
            raise _expected("object", document, None)
        return super().read(document)
