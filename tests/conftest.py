"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Tests crossing several modules (serializer, CLI, publisher)

Fixtures are centralized in tests/fixtures/ for reuse across all test modules.
"""

import json
import os
import sys

import pytest

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    # Ensure src directory stays ahead of tests for module resolution
    sys.path.insert(1, tests_dir)

from twins import DigitalTwinSerializer, ModelLibrary

from fixtures import (
    ALL_TWIN_TYPES,
    SAMPLE_SERIALIZER_CONFIG,
    make_building,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests crossing several modules")


# =============================================================================
# Registry Fixtures
# =============================================================================

@pytest.fixture
def library():
    """Model library holding every fixture twin type."""
    return ModelLibrary(ALL_TWIN_TYPES)


@pytest.fixture
def serializer(library):
    """Serializer with compact output over the fixture library."""
    return DigitalTwinSerializer(library)


# =============================================================================
# Twin Graph Fixtures
# =============================================================================

@pytest.fixture
def building():
    """Building B1 -> floors F1, F2 -> rooms R1, R2 (R2 shared)."""
    return make_building()


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def sample_config():
    """Sample serializer configuration dictionary."""
    return json.loads(json.dumps(SAMPLE_SERIALIZER_CONFIG))


@pytest.fixture
def temp_config_file(tmp_path, sample_config):
    """Create a temporary configuration file for testing."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(sample_config, indent=2))
    return str(config_file)
