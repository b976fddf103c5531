"""Shared pytest configuration and fixtures for the pairing test suite."""

import sys
from pathlib import Path

import pytest

# Modules under src/ import each other absolutely, as they do at runtime
PROJECT_ROOT = Path(__file__).parent.parent
for path in (PROJECT_ROOT, PROJECT_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config_loader import get_sample_config  # noqa: E402


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config(tmp_path: Path) -> dict:
    """Sample configuration with fast timings and storage under tmp_path."""
    cfg = get_sample_config()
    cfg["storage"]["home"] = str(tmp_path)
    cfg["pairing"]["max_rounds"] = 3
    cfg["pairing"]["retry_delay_seconds"] = 0
    cfg["pairing"]["request_timeout"] = 2
    cfg["discovery"]["mdns_timeout"] = 0.05
    return cfg
