"""
Centralized constants for the twin serializer.

This module provides a single source of truth for the wire-format property
names fixed by the digital twins platform, DTDL defaults, CLI exit codes and
logging defaults used throughout the package.
"""

from enum import IntEnum
from typing import Final, Tuple


# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Following Unix conventions:
    - 0: Success
    - 1: General error
    - 2: Invalid twin definition
    - 3+: Specific error categories
    """
    SUCCESS = 0
    ERROR = 1
    DEFINITION_ERROR = 2
    CONFIG_ERROR = 3
    REGISTRY_ERROR = 4
    FILE_NOT_FOUND = 5
    PERMISSION_DENIED = 6


# ============================================================================
# Wire Format Property Names
# ============================================================================

class DigitalTwinsJsonPropertyNames:
    """Reserved property names used in twin and relationship documents."""

    DIGITAL_TWIN_ID: Final[str] = "$dtId"
    DIGITAL_TWIN_ETAG: Final[str] = "$etag"
    DIGITAL_TWIN_METADATA: Final[str] = "$metadata"
    METADATA_MODEL: Final[str] = "$model"
    RELATIONSHIP_ID: Final[str] = "$relationshipId"
    RELATIONSHIP_SOURCE_ID: Final[str] = "$sourceId"
    RELATIONSHIP_TARGET_ID: Final[str] = "$targetId"
    RELATIONSHIP_NAME: Final[str] = "$relationshipName"


class ModelPropertyNames:
    """Property names that only appear in model (DTDL) documents."""

    ID: Final[str] = "@id"
    TYPE: Final[str] = "@type"
    EXTENDS: Final[str] = "extends"
    CONTEXT: Final[str] = "@context"
    DISPLAY_NAME: Final[str] = "displayName"


RESERVED_PROPERTY_NAMES: Final[Tuple[str, ...]] = (
    DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_ID,
    DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_ETAG,
    DigitalTwinsJsonPropertyNames.DIGITAL_TWIN_METADATA,
    ModelPropertyNames.ID,
    ModelPropertyNames.TYPE,
    ModelPropertyNames.EXTENDS,
    ModelPropertyNames.CONTEXT,
    ModelPropertyNames.DISPLAY_NAME,
)
"""Wire names whose meaning is fixed by the platform."""

EXCLUDED_TWIN_PROPERTY_NAMES: Final[Tuple[str, ...]] = (
    ModelPropertyNames.ID,
    ModelPropertyNames.TYPE,
    ModelPropertyNames.EXTENDS,
    ModelPropertyNames.CONTEXT,
    ModelPropertyNames.DISPLAY_NAME,
)
"""Reserved names written by the model document, never by a twin document."""


# ============================================================================
# DTDL Configuration
# ============================================================================

class DTDLConfig:
    """Defaults for generated model documents."""

    DEFAULT_CONTEXT: Final[str] = "dtmi:dtdl:context;2"
    """DTDL language version written to @context."""

    DEFAULT_MODEL_TYPE: Final[str] = "Interface"

    DEFAULT_NAMESPACE: Final[str] = "twins"
    """Namespace segment used when a twin type has no explicit model id."""

    DEFAULT_VERSION: Final[int] = 1

    MODEL_FILE_EXTENSION: Final[str] = ".json"


PLATFORM_MODULES: Final[Tuple[str, ...]] = (
    "builtins",
    "collections",
    "datetime",
    "decimal",
    "fractions",
    "pathlib",
    "uuid",
)
"""Top-level modules whose values are left untouched when contents are cleaned."""


# ============================================================================
# Logging Configuration
# ============================================================================

class LoggingConfig:
    """Logging configuration constants."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    """Default logging level."""

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    """Default log message format."""

    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
    """Date format for log timestamps."""
