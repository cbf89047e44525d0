"""
Digital Twin Serializer

JSON string facade over the twin converters and the DTDL model builder.

Example usage:
    library = ModelLibrary([Building, Floor, Room])
    serializer = DigitalTwinSerializer(library)

    text = serializer.serialize_twin(building)
    copy = serializer.deserialize_twin(text)           # type from $metadata.$model
    model = serializer.serialize_model(Building)       # DTDL Interface
"""

import json
import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union

from .base import GenericTwin
from .config import SerializerConfig
from .converter import TwinConverter
from .dtdl import TwinModelBuilder
from .exceptions import TwinParseError, TwinTypeNotRegisteredError
from .registry import ModelLibrary, get_model_id_from_json

logger = logging.getLogger(__name__)


_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "'": "\\u0027",
}


def html_escape_json(text: str) -> str:
    """Escape characters that are unsafe inside HTML as JSON unicode escapes."""
    for char, escape in _HTML_ESCAPES.items():
        text = text.replace(char, escape)
    return text


class DecimalEncoder(json.JSONEncoder):
    """
    JSON encoder writing ``Decimal`` values as their exact decimal text.

    Each decimal is first encoded as a unique placeholder string which
    ``encode`` then swaps for the number.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._marker = uuid.uuid4().hex
        self._decimals: Dict[str, str] = {}

    def default(self, o):
        if isinstance(o, Decimal):
            if not o.is_finite():
                raise ValueError(f"{o} has no JSON representation")
            placeholder = json.dumps(f"{self._marker}:{len(self._decimals)}")
            self._decimals[placeholder] = str(o)
            return placeholder[1:-1]
        return super().default(o)

    def encode(self, o):
        self._decimals.clear()
        text = super().encode(o)
        for placeholder, number in self._decimals.items():
            text = text.replace(placeholder, number)
        return text


def parse_json(text: Union[str, bytes]) -> Any:
    """Parse JSON text; non-integral numbers are read as ``Decimal``."""
    try:
        return json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise TwinParseError(f"Invalid twin JSON: {e.msg}", position=e.pos) from e


class DigitalTwinSerializer:
    """
    Serializes twins and twin models to and from JSON text.

    Args:
        library: Registry used to resolve a document's type from its model id
        config: Output and exclusion settings
    """

    def __init__(self, library: Optional[ModelLibrary] = None, config: Optional[SerializerConfig] = None):
        self.library = library if library is not None else ModelLibrary()
        self.config = config or SerializerConfig()
        self.model_builder = TwinModelBuilder(self.config.context)

    def _dumps(self, document: Any, html_encode: bool) -> str:
        separators = (",", ":") if self.config.indent is None else None
        text = json.dumps(
            document,
            indent=self.config.indent,
            separators=separators,
            ensure_ascii=self.config.ensure_ascii,
            cls=DecimalEncoder,
        )
        return html_escape_json(text) if html_encode else text

    def serialize_twin(self, twin: Any, html_encode: bool = False) -> str:
        """Serialize a twin instance to its wire document."""
        converter = TwinConverter(type(twin), exclude=self.config.exclude_properties)
        return self._dumps(converter.write(twin), html_encode)

    def resolve_twin_type(self, document: Mapping[str, Any]) -> type:
        """
        Type of a parsed twin document, looked up by ``$metadata.$model``.

        Documents of unregistered models fall back to ``GenericTwin`` when the
        library includes it.
        """
        model_id = get_model_id_from_json(document)
        twin_type = self.library.get_by_id(model_id) if model_id else None
        if twin_type is not None:
            return twin_type
        if GenericTwin in self.library:
            logger.debug(f"No twin type for model {model_id}; reading as GenericTwin")
            return GenericTwin
        raise TwinTypeNotRegisteredError(model_id)

    def deserialize_twin(self, json_text: Union[str, bytes], twin_type: Optional[type] = None) -> Any:
        """
        Create a twin from its wire document.

        Raises:
            TwinParseError: If the text is not a JSON object
            TwinValueError: If a value cannot be converted to its member type
            TwinTypeNotRegisteredError: If no type is given or registered for the model
        """
        document = parse_json(json_text)
        if not isinstance(document, Mapping):
            raise TwinParseError(f"Twin JSON must be an object, got {type(document).__name__}")
        if twin_type is None:
            twin_type = self.resolve_twin_type(document)
        return TwinConverter(twin_type).read(document)

    def serialize_model(self, twin_type: type, html_encode: bool = False) -> str:
        """Serialize the DTDL Interface of a twin type."""
        return self._dumps(self.model_builder.build(twin_type).to_dict(), html_encode)
