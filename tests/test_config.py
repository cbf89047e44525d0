"""
Tests for serializer configuration loading
"""

import json
import os

import pytest

from twins import SerializerConfig

from fixtures import MINIMAL_SERIALIZER_CONFIG


class TestSerializerConfig:
    """Tests for SerializerConfig."""

    def test_defaults(self):
        config = SerializerConfig()
        assert config.context == "dtmi:dtdl:context;2"
        assert config.indent is None
        assert config.ensure_ascii is False
        assert config.exclude_properties == ()
        assert config.logging == {}

    def test_from_dict(self, sample_config):
        config = SerializerConfig.from_dict(sample_config)
        assert config.indent == 2
        assert config.ensure_ascii is True
        assert config.exclude_properties == ("$etag",)
        assert config.logging == {"level": "DEBUG"}

    def test_top_level_settings(self):
        config = SerializerConfig.from_dict(MINIMAL_SERIALIZER_CONFIG)
        assert config.indent == 4
        assert config.exclude_properties == ()

    def test_invalid_indent(self):
        with pytest.raises(ValueError, match="indent"):
            SerializerConfig.from_dict({"indent": "two"})

    @pytest.mark.parametrize("exclude", ["$etag", [1, 2]])
    def test_invalid_exclusions(self, exclude):
        with pytest.raises(ValueError, match="exclude_properties"):
            SerializerConfig.from_dict({"exclude_properties": exclude})

    def test_invalid_logging_section(self):
        with pytest.raises(ValueError, match="logging"):
            SerializerConfig.from_dict({"logging": "DEBUG"})


class TestConfigFile:
    """Tests for loading configuration files."""

    def test_from_file(self, temp_config_file):
        config = SerializerConfig.from_file(temp_config_file)
        assert config.indent == 2
        assert config.exclude_properties == ("$etag",)

    def test_empty_path(self):
        with pytest.raises(ValueError):
            SerializerConfig.from_file("")

    def test_non_string_path(self):
        with pytest.raises(TypeError):
            SerializerConfig.from_file(42)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            SerializerConfig.from_file(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "bad.json"
        config_file.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            SerializerConfig.from_file(str(config_file))

    def test_non_object_file(self, tmp_path):
        config_file = tmp_path / "list.json"
        config_file.write_text(json.dumps([1, 2]))
        with pytest.raises(ValueError, match="must contain a JSON object"):
            SerializerConfig.from_file(str(config_file))

    @pytest.mark.skipif(os.name == "nt" or getattr(os, "geteuid", lambda: 0)() == 0,
                        reason="permissions are not enforced")
    def test_unreadable_file(self, temp_config_file):
        os.chmod(temp_config_file, 0)
        try:
            with pytest.raises(PermissionError):
                SerializerConfig.from_file(temp_config_file)
        finally:
            os.chmod(temp_config_file, 0o600)
