"""
Tests for the JSON serializer facade

Tests cover:
- Twin documents as JSON text
- HTML-safe output
- Type resolution from $metadata.$model and the GenericTwin fallback
- Parse errors
- Configured indentation and exclusions
- Model documents
"""

import json
from decimal import Decimal

import pytest

from twins import (
    DigitalTwinSerializer,
    GenericTwin,
    ModelLibrary,
    SerializerConfig,
    TwinParseError,
    TwinTypeNotRegisteredError,
)
from twins.serializer import DecimalEncoder, html_escape_json, parse_json

from fixtures import (
    BUILDING_WITH_METADATA_JSON,
    SIMPLE_TWIN_JSON,
    UNKNOWN_MODEL_JSON,
    Building,
    Pump,
    Room,
    SimpleTwin,
    TwinWithAllAttributes,
)


pytestmark = pytest.mark.integration


class TestSerializeTwin:
    """Tests for writing twin documents."""

    def test_compact_output(self, serializer):
        twin = serializer.deserialize_twin(SIMPLE_TWIN_JSON, SimpleTwin)
        assert serializer.serialize_twin(twin) == SIMPLE_TWIN_JSON

    def test_round_trip_with_metadata(self, serializer):
        building = serializer.deserialize_twin(BUILDING_WITH_METADATA_JSON)
        assert isinstance(building, Building)
        assert serializer.serialize_twin(building) == BUILDING_WITH_METADATA_JSON

    def test_html_encode(self, serializer):
        twin = TwinWithAllAttributes(id="H1", label="<b>Tom & Jerry's</b>")
        text = serializer.serialize_twin(twin, html_encode=True)
        for char in "<>&'":
            assert char not in text
        assert "\\u003cb\\u003e" in text
        assert json.loads(text)["label"] == "<b>Tom & Jerry's</b>"

    def test_html_encode_off_by_default(self, serializer):
        twin = TwinWithAllAttributes(id="H1", label="a<b")
        assert '"label":"a<b"' in serializer.serialize_twin(twin)

    def test_non_ascii_is_kept(self, serializer):
        twin = TwinWithAllAttributes(id="U1", label="Zürich")
        assert "Zürich" in serializer.serialize_twin(twin)

    def test_decimal_digits_are_kept(self, serializer):
        text = '{"$dtId":"P1","price":1234567890.123456789012}'
        pump = serializer.deserialize_twin(text, Pump)
        assert pump.price == Decimal("1234567890.123456789012")
        assert '"price":1234567890.123456789012' in serializer.serialize_twin(pump)

    def test_generic_twin_decimal_digits_are_kept(self, serializer):
        text = '{"$dtId":"X2","reading":0.10000000000000000001}'
        assert serializer.serialize_twin(serializer.deserialize_twin(text)) == text

    def test_decimal_encoder_with_indent(self):
        text = json.dumps({"a": [Decimal("1.50"), Decimal("2E+3")], "b": "x"}, indent=2, cls=DecimalEncoder)
        assert '"a": [\n    1.50,\n    2E+3\n  ]' in text
        assert json.loads(text) == {"a": [1.5, 2000], "b": "x"}


class TestDeserializeTwin:
    """Tests for reading twin documents."""

    def test_explicit_type(self, serializer):
        twin = serializer.deserialize_twin(SIMPLE_TWIN_JSON, SimpleTwin)
        assert twin.id == "122233"
        assert twin.quantity == 1

    def test_type_from_metadata(self, serializer):
        twin = serializer.deserialize_twin(BUILDING_WITH_METADATA_JSON)
        assert type(twin) is Building
        assert twin.name == "Head office"

    def test_unknown_model_falls_back_to_generic(self, serializer):
        twin = serializer.deserialize_twin(UNKNOWN_MODEL_JSON)
        assert type(twin) is GenericTwin
        assert twin.contents["temperature"] == 19.5
        assert serializer.serialize_twin(twin) == UNKNOWN_MODEL_JSON

    def test_document_without_model_falls_back_to_generic(self, serializer):
        twin = serializer.deserialize_twin(SIMPLE_TWIN_JSON)
        assert type(twin) is GenericTwin
        assert twin.contents == {"quantity": 1}

    def test_unknown_model_without_generic(self):
        serializer = DigitalTwinSerializer(ModelLibrary([Room], include_generic=False))
        with pytest.raises(TwinTypeNotRegisteredError):
            serializer.deserialize_twin(UNKNOWN_MODEL_JSON)

    def test_bytes_input(self, serializer):
        twin = serializer.deserialize_twin(SIMPLE_TWIN_JSON.encode("utf-8"), SimpleTwin)
        assert twin.quantity == 1

    @pytest.mark.parametrize("text", ['{"$dtId": ', "not json", ""])
    def test_malformed_json(self, serializer, text):
        with pytest.raises(TwinParseError):
            serializer.deserialize_twin(text, SimpleTwin)

    @pytest.mark.parametrize("text", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_json(self, serializer, text):
        with pytest.raises(TwinParseError, match="must be an object"):
            serializer.deserialize_twin(text, SimpleTwin)

    def test_parse_error_position(self):
        with pytest.raises(TwinParseError) as exc_info:
            parse_json('{"a": }')
        assert exc_info.value.position == 6

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_json("{")


class TestConfiguredSerializer:
    """Tests for output settings from SerializerConfig."""

    def test_indent(self, library):
        serializer = DigitalTwinSerializer(library, SerializerConfig(indent=2))
        twin = SimpleTwin(id="S1", quantity=1)
        assert serializer.serialize_twin(twin) == '{\n  "$dtId": "S1",\n  "quantity": 1\n}'

    def test_exclude_properties(self, library):
        serializer = DigitalTwinSerializer(library, SerializerConfig(exclude_properties=("$etag",)))
        twin = serializer.deserialize_twin(SIMPLE_TWIN_JSON, SimpleTwin)
        assert serializer.serialize_twin(twin) == '{"$dtId":"122233","quantity":1}'

    def test_ensure_ascii(self, library):
        serializer = DigitalTwinSerializer(library, SerializerConfig(ensure_ascii=True))
        twin = TwinWithAllAttributes(id="U1", label="Zürich")
        assert "Z\\u00fcrich" in serializer.serialize_twin(twin)

    def test_from_config_file(self, library, temp_config_file):
        serializer = DigitalTwinSerializer(library, SerializerConfig.from_file(temp_config_file))
        twin = serializer.deserialize_twin(SIMPLE_TWIN_JSON, SimpleTwin)
        assert json.loads(serializer.serialize_twin(twin)) == {"$dtId": "122233", "quantity": 1}


class TestSerializeModel:
    """Tests for model documents."""

    def test_model_document(self, serializer):
        document = json.loads(serializer.serialize_model(Room))
        assert document["@id"] == "dtmi:twins:Room;1"
        assert document["contents"] == [
            {"@type": "Property", "name": "area", "schema": "double", "writable": True},
        ]

    def test_model_context_from_config(self, library):
        serializer = DigitalTwinSerializer(library, SerializerConfig(context="dtmi:dtdl:context;3"))
        assert json.loads(serializer.serialize_model(Room))["@context"] == "dtmi:dtdl:context;3"

    def test_html_encoded_model(self, serializer):
        text = serializer.serialize_model(Room)
        assert html_escape_json(text) == serializer.serialize_model(Room, html_encode=True)


class TestHtmlEscape:
    """Tests for the HTML-safe escaping helper."""

    @pytest.mark.parametrize("text,expected", [
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("'", "\\u0027"),
        ("plain", "plain"),
    ])
    def test_escapes(self, text, expected):
        assert html_escape_json(text) == expected
