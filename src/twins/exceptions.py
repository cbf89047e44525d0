"""
Exceptions raised by the twin serializer.

All errors derive from TwinError so callers can catch everything coming out
of the engine in one place. Nothing in the engine logs-and-swallows these;
they always surface to the caller.
"""

from typing import Any, Optional, Sequence


class TwinError(Exception):
    """Base class for all twin serializer errors."""


class TwinDefinitionError(TwinError):
    """A twin type is declared in a way the engine cannot classify."""

    def __init__(self, twin_type: Any, message: str):
        self.twin_type = twin_type
        self.message = message
        name = getattr(twin_type, "__name__", repr(twin_type))
        super().__init__(f"{name}: {message}")


class RegistryError(TwinError):
    """Fatal error while building or querying the model registry."""


class DuplicateModelIdError(RegistryError):
    """Two discovered twin types resolve to the same model id."""

    def __init__(self, model_id: str, existing_type: type, new_type: type):
        self.model_id = model_id
        self.existing_type = existing_type
        self.new_type = new_type
        super().__init__(
            f"Model id '{model_id}' is declared by both "
            f"{existing_type.__qualname__} and {new_type.__qualname__}"
        )


class TwinTypeNotRegisteredError(RegistryError):
    """A lookup referenced a type or model id the registry does not index."""

    def __init__(self, twin_type: Any):
        self.twin_type = twin_type
        name = getattr(twin_type, "__name__", twin_type)
        super().__init__(f"Twin model for type {name} does not exist")


class TwinParseError(TwinError, ValueError):
    """Wire JSON is structurally malformed."""

    def __init__(self, message: str, *, position: Optional[int] = None):
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} (at char {position})"
        super().__init__(message)


class TwinValueError(TwinError, ValueError):
    """A wire value cannot be coerced to the declared member type."""

    def __init__(self, message: str, *, key: Optional[str] = None, value: Any = None):
        self.key = key
        self.value = value
        if key:
            message = f"Property '{key}': {message}"
        super().__init__(message)


class TwinCycleError(TwinError):
    """A relationship walk revisited a twin that is still being traversed."""

    def __init__(self, path: Sequence[Any]):
        self.path = list(path)
        ids = " -> ".join(str(getattr(twin, "id", None) or type(twin).__name__) for twin in self.path)
        super().__init__(f"Relationship cycle detected: {ids}")
