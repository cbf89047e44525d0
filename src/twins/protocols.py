"""
Transport interfaces.

The engine performs no I/O. Code that uploads a twin graph talks to the
platform through an object implementing ``TwinTransportProtocol`` and reports
the combined outcome as an ``AggregateTwinsResponse``.
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from .models import BasicRelationship


class TwinTransportError(Exception):
    """A platform request failed."""

    def __init__(self, status_code: int, message: str, error_code: Optional[str] = None):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        super().__init__(f"{message} (HTTP {status_code})")


@runtime_checkable
class TwinTransportProtocol(Protocol):
    """Client of the digital twins platform."""

    def upload_models(self, models: Sequence[str]) -> None:
        """Create the given DTDL model documents; raises TwinTransportError on failure."""
        ...

    def create_or_replace_twin(self, twin_id: str, twin_json: str) -> str:
        """Create or replace a twin document, returning the stored document."""
        ...

    def create_or_replace_relationship(self, relationship: BasicRelationship) -> Dict[str, Any]:
        ...

    def get_twin(self, twin_id: str) -> str:
        ...


@dataclass
class AggregateTwinsResponse:
    """
    Combined result of several platform requests.

    Attributes:
        errors: Failed requests, in the order they happened
        succeeded: Ids of the twins and relationships that were stored
    """
    errors: List[TwinTransportError] = field(default_factory=list)
    succeeded: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[int]:
        return self.errors[0].status_code if self.errors else None

    @property
    def status_code(self) -> int:
        """HTTP status summarizing the outcome: 200, or the first error's status."""
        if self.success:
            return HTTPStatus.OK.value
        return self.first_error

    def add_error(self, error: TwinTransportError) -> None:
        self.errors.append(error)

    def add_success(self, item_id: str) -> None:
        self.succeeded.append(item_id)
