"""Tests for config API endpoint."""

from pathlib import Path
from typing import Any

import pytest
from docsite.config import Config
from docsite.server import create_app


def _make_config(content_dir: Path, live_reload_enabled: bool, config_dir: Path) -> Config:
    """Create a Config for testing by writing a temp TOML file."""
    config_file = config_dir / "docsite.toml"
    config_file.write_text(f"""
[content]
source_dir = "{content_dir.name}"

[live_reload]
enabled = {str(live_reload_enabled).lower()}
""")
    return Config.load(config_file)


class TestGetConfig:
    """Tests for GET /api/config."""

    @pytest.mark.asyncio
    async def test__live_reload_enabled__returns_true(
        self,
        tmp_path: Path,
        content_dir: Path,
        aiohttp_client: Any,
    ) -> None:
        config = _make_config(content_dir, live_reload_enabled=True, config_dir=tmp_path)
        test_client = await aiohttp_client(create_app(config))

        response = await test_client.get("/api/config")

        assert response.status == 200
        data = await response.json()
        assert data == {"liveReloadEnabled": True}

    @pytest.mark.asyncio
    async def test__live_reload_disabled__returns_false(
        self,
        tmp_path: Path,
        content_dir: Path,
        aiohttp_client: Any,
    ) -> None:
        config = _make_config(content_dir, live_reload_enabled=False, config_dir=tmp_path)
        test_client = await aiohttp_client(create_app(config))

        response = await test_client.get("/api/config")

        assert response.status == 200
        data = await response.json()
        assert data == {"liveReloadEnabled": False}
