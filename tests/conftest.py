"""
Pytest configuration and shared fixtures for aptpin tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from aptpin.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so CLI tests don't leak verbosity."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def sample_manifest_data() -> dict[str, Any]:
    """
    Provide sample manifest data.

    Returns a manifest with one general and one specific pin.
    """
    return {
        "apiVersion": "aptpin/v1",
        "namespace": "myapp",
        "defaults": {"priority": 500},
        "pins": [
            {
                "name": "stable-pin",
                "packages": "*",
                "priority": 700,
                "release": "stable",
            },
            {
                "name": "nginx",
                "packages": ["nginx", "nginx-common"],
                "priority": 900,
                "origin": "nginx.org",
                "order": 10,
            },
        ],
    }


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("pins.yaml", {"key": "value"})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def manifest_path(create_yaml_file, sample_manifest_data) -> Path:
    """Provide a manifest file written from sample_manifest_data."""
    return create_yaml_file("manifests/pins.yaml", sample_manifest_data)


@pytest.fixture
def confdir(tmp_path: Path) -> Path:
    """Provide an empty APT configuration directory."""
    path = tmp_path / "etc" / "apt"
    path.mkdir(parents=True)
    return path
