"""Shared test fixtures."""

from pathlib import Path

import pytest
from docsite.config import Config, ContentConfig, LiveReloadConfig, ServerConfig


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create an empty content directory."""
    content = tmp_path / "content"
    content.mkdir(exist_ok=True)
    return content


@pytest.fixture
def test_config(content_dir: Path) -> Config:
    """Create a test configuration with live reload disabled.

    Uses the shipped default redirect table.
    """
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=content_dir),
        live_reload=LiveReloadConfig(enabled=False),
    )
