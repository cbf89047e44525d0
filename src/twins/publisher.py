"""
Twin graph publisher.

Uploads a twin graph through a transport in dependency order: the models of
every type the graph needs (ancestors first), then each twin (referenced twins
before the twins referencing them), then the relationship edges.
"""

import logging
from typing import Any, List, Optional

from .base import TwinBase
from .protocols import AggregateTwinsResponse, TwinTransportError, TwinTransportProtocol
from .serializer import DigitalTwinSerializer

logger = logging.getLogger(__name__)


class TwinGraphPublisher:
    """
    Publishes twin graphs to the platform.

    Failures of individual twins or relationships are collected in the
    response; a failed model upload stops the publish, since no twin of a
    missing model can be stored.

    Args:
        transport: Platform client
        serializer: Serializer producing the documents to upload
    """

    def __init__(self, transport: TwinTransportProtocol, serializer: Optional[DigitalTwinSerializer] = None):
        if not isinstance(transport, TwinTransportProtocol):
            raise TypeError(f"transport must implement TwinTransportProtocol, got {type(transport)}")
        self.transport = transport
        self.serializer = serializer or DigitalTwinSerializer()

    def publish(self, root: TwinBase, upload_models: bool = True) -> AggregateTwinsResponse:
        response = AggregateTwinsResponse()
        twins = root.flatten()

        if upload_models:
            models = [self.serializer.serialize_model(t) for t in root.get_dependent_types()]
            try:
                self.transport.upload_models(models)
            except TwinTransportError as e:
                logger.error(f"Model upload failed: {e}")
                response.add_error(e)
                return response
            logger.info(f"Uploaded {len(models)} models")

        # Relationships are created only after every twin of the graph exists
        for twin in twins:
            self._publish_twin(twin, response)

        for twin in twins:
            for relationship in twin.get_relationships():
                try:
                    self.transport.create_or_replace_relationship(relationship)
                    response.add_success(relationship.relationship_id)
                except TwinTransportError as e:
                    logger.warning(f"Relationship {relationship.relationship_id} failed: {e}")
                    response.add_error(e)

        logger.info(
            f"Published graph of {root.id}: {len(response.succeeded)} stored, {len(response.errors)} failed"
        )
        return response

    def _publish_twin(self, twin: Any, response: AggregateTwinsResponse) -> None:
        try:
            self.transport.create_or_replace_twin(twin.id, self.serializer.serialize_twin(twin))
            response.add_success(twin.id)
        except TwinTransportError as e:
            logger.warning(f"Twin {twin.id} failed: {e}")
            response.add_error(e)

    def publish_all(self, roots: List[TwinBase]) -> AggregateTwinsResponse:
        """Publish several graphs, merging their responses."""
        merged = AggregateTwinsResponse()
        for root in roots:
            result = self.publish(root)
            merged.errors.extend(result.errors)
            merged.succeeded.extend(result.succeeded)
        return merged
