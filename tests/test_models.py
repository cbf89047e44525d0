"""
Tests for platform shapes and scalar types
"""

import pytest

from twins import BasicTwin, ETag, TwinMetadata


class TestETag:
    """Tests for concurrency tags."""

    @pytest.mark.parametrize("raw,expected", [
        ('"4444"', "4444"),
        ("4444", "4444"),
        ('W/"7"', 'W/"7"'),
        ('"', '"'),
        ("", ""),
    ])
    def test_quotes_are_trimmed(self, raw, expected):
        assert str(ETag(raw)) == expected

    def test_quoted_and_bare_tags_are_equal(self):
        assert ETag('"abc"') == ETag("abc")

    def test_truthiness(self):
        assert ETag("abc")
        assert not ETag("")

    def test_none_value(self):
        assert ETag(None).value == ""


class TestTwinMetadata:
    """Tests for the $metadata block."""

    def test_to_dict(self):
        assert TwinMetadata(model="dtmi:twins:Room;1").to_dict() == {"$model": "dtmi:twins:Room;1"}
        assert TwinMetadata().to_dict() == {}

    def test_from_dict(self):
        assert TwinMetadata.from_dict({"$model": "dtmi:twins:Room;1"}).model == "dtmi:twins:Room;1"
        assert TwinMetadata.from_dict({}).model is None


class TestBasicTwin:
    """Tests for the untyped twin document."""

    def test_to_dict(self):
        twin = BasicTwin(
            id="R1",
            etag=ETag("9"),
            metadata=TwinMetadata(model="dtmi:twins:Room;1"),
            contents={"area": 20.0},
        )
        assert twin.to_dict() == {
            "$dtId": "R1",
            "$etag": "9",
            "$metadata": {"$model": "dtmi:twins:Room;1"},
            "area": 20.0,
        }

    def test_without_etag(self):
        assert "$etag" not in BasicTwin(id="R1").to_dict()
