"""
Untyped platform shapes.

These mirror the documents the digital twins platform exchanges when no
typed twin class is involved: the ``$metadata`` block of a twin, a basic twin
(identity plus a flat contents map) and a basic relationship (an edge between
two twin ids).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .constants import DigitalTwinsJsonPropertyNames as Names
from .scalars import ETag


@dataclass
class TwinMetadata:
    """The ``$metadata`` object carried by every twin document."""
    model: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        result: Dict[str, Any] = {}
        if self.model:
            result[Names.METADATA_MODEL] = self.model
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TwinMetadata":
        return cls(model=data.get(Names.METADATA_MODEL))


@dataclass
class BasicTwin:
    """
    A twin reduced to its identity and contents map.

    Attributes:
        id: The twin id ($dtId)
        etag: Concurrency tag, if the twin was read from the platform
        metadata: Model reference
        contents: Property and component values keyed by wire name
    """
    id: Optional[str] = None
    etag: Optional[ETag] = None
    metadata: TwinMetadata = field(default_factory=TwinMetadata)
    contents: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the platform's document shape."""
        result: Dict[str, Any] = {Names.DIGITAL_TWIN_ID: self.id}
        if self.etag:
            result[Names.DIGITAL_TWIN_ETAG] = str(self.etag)
        result[Names.DIGITAL_TWIN_METADATA] = self.metadata.to_dict()
        result.update(self.contents)
        return result


@dataclass
class BasicRelationship:
    """
    A named edge from one twin to another, referenced by id.

    Attributes:
        source_id: Id of the twin owning the relationship
        target_id: Id of the referenced twin
        name: Relationship name as declared in the source's model
        id: Optional relationship id; derived from the edge when not set
        properties: Properties attached to the relationship
    """
    source_id: Optional[str]
    target_id: Optional[str]
    name: str
    id: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def relationship_id(self) -> str:
        return self.id or f"{self.source_id}-{self.name}-{self.target_id}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the platform's relationship document."""
        result: Dict[str, Any] = {
            Names.RELATIONSHIP_ID: self.relationship_id,
            Names.RELATIONSHIP_SOURCE_ID: self.source_id,
            Names.RELATIONSHIP_TARGET_ID: self.target_id,
            Names.RELATIONSHIP_NAME: self.name,
        }
        result.update(self.properties)
        return result
