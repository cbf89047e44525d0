"""
Serializer configuration.

Settings are read from a JSON file, either at the top level or under a
``"serializer"`` section:

    {
        "serializer": {
            "context": "dtmi:dtdl:context;2",
            "indent": 2,
            "ensure_ascii": false,
            "exclude_properties": ["$etag"]
        },
        "logging": {"level": "DEBUG", "file": "twins.log"}
    }
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .constants import DTDLConfig


@dataclass
class SerializerConfig:
    """Configuration for the digital twin serializer."""
    context: str = DTDLConfig.DEFAULT_CONTEXT
    indent: Optional[int] = None
    ensure_ascii: bool = False
    exclude_properties: Tuple[str, ...] = ()
    logging: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SerializerConfig':
        """Create SerializerConfig from a dictionary."""
        serializer_config = config_dict.get('serializer', config_dict)

        indent = serializer_config.get('indent')
        if indent is not None and not isinstance(indent, int):
            raise ValueError(f"indent must be an integer, got {type(indent).__name__}")

        exclude = serializer_config.get('exclude_properties', ())
        if isinstance(exclude, str) or not all(isinstance(name, str) for name in exclude):
            raise ValueError("exclude_properties must be a list of property names")

        logging_config = config_dict.get('logging', {})
        if not isinstance(logging_config, dict):
            raise ValueError(f"logging must be a JSON object, got {type(logging_config).__name__}")

        return cls(
            context=serializer_config.get('context', DTDLConfig.DEFAULT_CONTEXT),
            indent=indent,
            ensure_ascii=bool(serializer_config.get('ensure_ascii', False)),
            exclude_properties=tuple(exclude),
            logging=dict(logging_config),
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'SerializerConfig':
        """Load configuration from a JSON file."""
        if not config_path:
            raise ValueError("config_path cannot be empty")

        if not isinstance(config_path, str):
            raise TypeError(f"config_path must be string, got {type(config_path)}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except UnicodeDecodeError as e:
            raise ValueError(f"Encoding error reading {config_path}: {e}")
        except PermissionError:
            raise PermissionError(f"Permission denied reading {config_path}")

        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must contain a JSON object, got {type(config_dict)}")

        return cls.from_dict(config_dict)
