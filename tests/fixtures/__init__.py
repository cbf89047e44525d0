"""
Centralized test fixtures for the twin serializer test suite.

This package provides reusable fixtures for testing, including:
- Twin types covering every member category
- Wire documents as emitted by the serializer
- Configuration fixtures

Usage:
    from fixtures import SimpleTwin, SIMPLE_TWIN_JSON, SAMPLE_SERIALIZER_CONFIG

Or use the pytest fixtures in conftest.py which import from here.
"""

from .twin_fixtures import (
    ALL_TWIN_TYPES,
    Building,
    Color,
    Floor,
    NestedObject,
    Person,
    Priority,
    Pump,
    Room,
    Sensor,
    SimpleTwin,
    State,
    TwinA,
    TwinB,
    TwinC,
    TwinWithAllAttributes,
    TwinWithEnum,
    TwinWithMinMultiplicity,
    TwinWithNestedObject,
    TwinWithProtectedCtor,
    TwinWithReadOnlyProperties,
    make_building,
)

from .json_fixtures import (
    SIMPLE_TWIN_JSON,
    TWIN_WITH_ALL_ATTRIBUTES_JSON,
    TWIN_WITH_NESTED_OBJECT_JSON,
    TWIN_WITH_ENUM_JSON,
    BUILDING_WITH_METADATA_JSON,
    UNKNOWN_MODEL_JSON,
    PUMP_JSON,
)

from .config_fixtures import (
    SAMPLE_SERIALIZER_CONFIG,
    MINIMAL_SERIALIZER_CONFIG,
)
