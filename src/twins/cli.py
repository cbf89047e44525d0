"""
Command line tools for twin models.

Usage:
    twins list-models myapp.twins
    twins export-models myapp.twins --output models/ --config config.json
"""

import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from tqdm import tqdm

from .attributes import get_model_id
from .config import SerializerConfig
from .constants import DTDLConfig, ExitCode, LoggingConfig
from .exceptions import RegistryError, TwinDefinitionError, TwinError
from .registry import ModelLibrary
from .serializer import DigitalTwinSerializer

logger = logging.getLogger(__name__)

# Type alias for log levels
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(
    level: LogLevel = LoggingConfig.DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    *,
    config: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """
    Setup logging configuration with fallback locations.

    If the requested log file cannot be created, the system temp directory is
    tried next; when both fail, logging goes to the console only.

    Args:
        level: Log level, overridden by ``config["level"]``
        log_file: Log file path, overridden by ``config["file"]``
        config: Optional ``logging`` section of the configuration file

    Returns:
        The actual log file path used, or None if logging to console only.
    """
    config_dict = dict(config or {})
    resolved_level = str(config_dict.get('level', level or LoggingConfig.DEFAULT_LOG_LEVEL))
    log_level = getattr(logging, resolved_level.upper(), logging.INFO)
    file_path = config_dict.get('file') or log_file

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    actual_log_file = None

    if file_path:
        log_filename = os.path.basename(file_path) or "twins.log"
        for candidate in (file_path, os.path.join(tempfile.gettempdir(), log_filename)):
            try:
                log_dir = os.path.dirname(candidate)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                handlers.append(logging.FileHandler(candidate, encoding='utf-8'))
                actual_log_file = candidate
                break
            except OSError as e:
                print(f"  Could not create log at {candidate}: {e}", file=sys.stderr)
        if actual_log_file is None:
            print("Warning: Could not write log file; logging to console only", file=sys.stderr)

    logging.basicConfig(
        level=log_level,
        format=LoggingConfig.LOG_FORMAT,
        datefmt=LoggingConfig.DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    if actual_log_file:
        logger.info(f"Logging to: {actual_log_file}")
    return actual_log_file


def load_serializer_config(config_path: Optional[str]) -> SerializerConfig:
    if not config_path:
        return SerializerConfig()
    return SerializerConfig.from_file(config_path)


def build_library(modules: List[str]) -> ModelLibrary:
    """Build the registry from the twin types declared in ``modules``."""
    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))
    library = ModelLibrary.from_modules(modules)
    logger.info(f"Registered {len(library)} twin types from {len(modules)} modules")
    return library


def list_models_command(args: argparse.Namespace) -> int:
    """Print the model id and type of every registered twin type."""
    library = build_library(args.modules)
    for twin_type in library.all:
        model = library.get_twin_model(twin_type)
        relationships = ", ".join(
            f"{name} -> {target.__name__}" for name, target in model.all_relationships.items()
        )
        model_id = get_model_id(twin_type)
        print(f"{model_id:<50} {twin_type.__module__}.{twin_type.__qualname__}")
        if relationships:
            print(f"{'':<50}   relationships: {relationships}")
    return ExitCode.SUCCESS


def export_models_command(args: argparse.Namespace) -> int:
    """Write one DTDL Interface document per registered twin type."""
    config = load_serializer_config(args.config)
    if config.logging:
        setup_logging(config=config.logging)
    if args.indent is not None:
        config.indent = args.indent
    library = build_library(args.modules)
    serializer = DigitalTwinSerializer(library, config)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    twin_types = library.all
    for twin_type in tqdm(twin_types, desc="Exporting models", unit="model", disable=len(twin_types) < 10):
        target = output_dir / f"{twin_type.__name__}{DTDLConfig.MODEL_FILE_EXTENSION}"
        target.write_text(serializer.serialize_model(twin_type), encoding='utf-8')
        logger.debug(f"Wrote {target}")

    logger.info(f"Exported {len(twin_types)} models to {output_dir}")
    return ExitCode.SUCCESS


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog='twins',
        description='Digital twin model tools'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-file',
        help='Also write log output to this file'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    list_parser = subparsers.add_parser(
        'list-models',
        help='List the twin types declared in modules'
    )
    list_parser.add_argument(
        'modules',
        nargs='+',
        help='Importable modules declaring twin types'
    )
    list_parser.set_defaults(func=list_models_command)

    export_parser = subparsers.add_parser(
        'export-models',
        help='Write the DTDL model of every twin type declared in modules'
    )
    export_parser.add_argument(
        'modules',
        nargs='+',
        help='Importable modules declaring twin types'
    )
    export_parser.add_argument(
        '--output', '-o',
        default='models',
        help='Output directory (default: models)'
    )
    export_parser.add_argument(
        '--indent',
        type=int,
        help='Indent the JSON documents by this many spaces'
    )
    export_parser.add_argument(
        '--config', '-c',
        help='Path to a JSON configuration file'
    )
    export_parser.set_defaults(func=export_models_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.SUCCESS

    setup_logging("DEBUG" if args.verbose else LoggingConfig.DEFAULT_LOG_LEVEL, args.log_file)

    try:
        return args.func(args)
    except RegistryError as e:
        logger.error(f"Registry error: {e}")
        return ExitCode.REGISTRY_ERROR
    except TwinDefinitionError as e:
        logger.error(f"Invalid twin type: {e}")
        return ExitCode.DEFINITION_ERROR
    except TwinError as e:
        logger.error(f"Twin error: {e}")
        return ExitCode.ERROR
    except FileNotFoundError as e:
        logger.error(str(e))
        return ExitCode.FILE_NOT_FOUND
    except PermissionError as e:
        logger.error(str(e))
        return ExitCode.PERMISSION_DENIED
    except (ValueError, TypeError) as e:
        logger.error(f"Configuration error: {e}")
        return ExitCode.CONFIG_ERROR


if __name__ == '__main__':
    sys.exit(main())
