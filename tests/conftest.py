"""Shared test fixtures for disguisetool."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import tomli_w

MIB = 1024 * 1024


def _make_file(root: Path, relative: str, size: int = 100) -> Path:
    """Create a file of the given size under root."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\x00" * size)
    return path


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a project directory with an empty objects directory."""
    project = tmp_path / "show"
    (project / "objects").mkdir(parents=True)
    return project


@pytest.fixture
def media_project(tmp_project: Path) -> Path:
    """Project with objects/clip.mov (10 MiB) and objects/sub/image.png (1 MiB)."""
    _make_file(tmp_project / "objects", "clip.mov", 10 * MIB)
    _make_file(tmp_project / "objects", "sub/image.png", 1 * MIB)
    return tmp_project


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory."""
    d = tmp_path / "output"
    d.mkdir()
    return d


@pytest.fixture
def sample_config_dict(tmp_project: Path, tmp_output_dir: Path) -> dict[str, Any]:
    """Return a minimal valid config dict."""
    return {
        "projects": [str(tmp_project)],
        "output_dir": str(tmp_output_dir),
    }


@pytest.fixture
def sample_config_file(
    tmp_path: Path, sample_config_dict: dict[str, Any]
) -> Path:
    """Write a sample config TOML file and return its path."""
    config_path = tmp_path / "disguisetool.toml"
    config_path.write_bytes(tomli_w.dumps(sample_config_dict).encode())
    return config_path
