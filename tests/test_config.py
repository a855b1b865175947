"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest
from docsite.config import Config, ContentConfig, LiveReloadConfig, RedirectConfig, ServerConfig
from docsite.core.redirects import RedirectStatus


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[content]
source_dir = "posts"
url_prefix = "/news"

[live_reload]
enabled = false
watch_patterns = ["*.md"]

[[redirects]]
source = "/docs/tutorials/nextjs"
target = "/docs/tutorials/nextjs/step-1"

[[redirects]]
source = "/old-blog"
target = "/news"
status = "permanent"
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.content.source_dir == tmp_path / "posts"
        assert config.content.url_prefix == "/news"
        assert config.live_reload.enabled is False
        assert config.live_reload.watch_patterns == ["*.md"]
        assert config.redirects == [
            RedirectConfig(
                source="/docs/tutorials/nextjs",
                target="/docs/tutorials/nextjs/step-1",
                status=RedirectStatus.TEMPORARY,
            ),
            RedirectConfig(source="/old-blog", target="/news", status=RedirectStatus.PERMANENT),
        ]
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.content.source_dir == tmp_path / "content"
        assert config.content.url_prefix == "/blog"
        assert config.live_reload.enabled is True
        assert config.redirects is None

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(tmp_path / "nonexistent.toml")

    def test__invalid_toml__raises_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text("[server\nport = ")

        with pytest.raises(ValueError, match="Invalid TOML"):
            Config.load(config_file)

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.server.port == 8080
        assert config.content.source_dir == Path("content")
        assert config.redirects is None
        assert config.config_path is None


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text("[server]\nport = 9000")
        subdir = tmp_path / "site" / "content"
        subdir.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=subdir):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__auto_discovered_config__sets_config_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            config = Config.load()

        assert config.config_path == config_file
        assert config.server.port == 9000


class TestSectionValidation:
    """Tests for section type validation."""

    @pytest.mark.parametrize(
        ("toml", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ("[server]\nhost = 1", "server.host must be a string"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
            ("content = 1", "content section must be a dictionary"),
            ("[content]\nsource_dir = 1", "content.source_dir must be a string"),
            ('[content]\nurl_prefix = "blog"', "content.url_prefix must be a string"),
            ("live_reload = 1", "live_reload section must be a dictionary"),
            ('[live_reload]\nenabled = "yes"', "live_reload.enabled must be a boolean"),
            ('[live_reload]\nwatch_patterns = "*.md"', "live_reload.watch_patterns must be a list"),
            ("[live_reload]\nwatch_patterns = [1]", "live_reload.watch_patterns items must be strings"),
        ],
    )
    def test__invalid_value__raises_error(self, tmp_path: Path, toml: str, message: str) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text(toml)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestRedirectsParsing:
    """Tests for [[redirects]] parsing."""

    def _load(self, tmp_path: Path, toml: str) -> Config:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text(toml)
        return Config.load(config_file)

    def test__empty_list__disables_redirects(self, tmp_path: Path) -> None:
        config = self._load(tmp_path, "redirects = []")

        assert config.redirects == []
        assert len(config.build_redirect_table()) == 0

    def test__absent__uses_default_table(self, tmp_path: Path) -> None:
        config = self._load(tmp_path, "")

        table = config.build_redirect_table()
        assert table.resolve("/docs/tutorials/nextjs").location == "/docs/tutorials/nextjs/step-1"

    def test__numeric_status__is_accepted(self, tmp_path: Path) -> None:
        config = self._load(
            tmp_path,
            '[[redirects]]\nsource = "/a"\ntarget = "/b"\nstatus = 301\n',
        )

        assert config.build_redirect_table().resolve("/a").http_status == 301

    def test__not_a_list__raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="redirects must be an array of tables"):
            self._load(tmp_path, 'redirects = "x"')

    def test__missing_target__raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="redirects.target must be a string"):
            self._load(tmp_path, '[[redirects]]\nsource = "/a"\n')

    def test__unknown_status__raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="redirects.status must be"):
            self._load(
                tmp_path,
                '[[redirects]]\nsource = "/a"\ntarget = "/b"\nstatus = "sometimes"\n',
            )

    def test__self_redirect__raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid redirects configuration"):
            self._load(tmp_path, '[[redirects]]\nsource = "/a"\ntarget = "/a/"\n')

    def test__cycle__raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="cycle"):
            self._load(
                tmp_path,
                '[[redirects]]\nsource = "/a"\ntarget = "/b"\n\n'
                '[[redirects]]\nsource = "/b"\ntarget = "/a"\n',
            )


class TestConfigWithOverrides:
    """Tests for Config.with_overrides method."""

    def test__no_overrides__returns_same_values(self) -> None:
        original = Config._default()

        result = original.with_overrides()

        assert result == original

    def test__override_host__changes_only_host(self) -> None:
        original = Config._default()

        result = original.with_overrides(host="0.0.0.0")

        assert result.server.host == "0.0.0.0"
        assert result.server.port == original.server.port

    def test__override_content_dir__changes_only_source_dir(self) -> None:
        original = Config._default()

        result = original.with_overrides(content_dir=Path("/srv/content"))

        assert result.content.source_dir == Path("/srv/content")
        assert result.content.url_prefix == original.content.url_prefix

    def test__override_live_reload_enabled__changes_live_reload(self) -> None:
        original = Config._default()
        assert original.live_reload.enabled is True

        result = original.with_overrides(live_reload_enabled=False)

        assert result.live_reload.enabled is False

    def test__immutability__original_unchanged(self) -> None:
        original = Config(
            server=ServerConfig(),
            content=ContentConfig(),
            live_reload=LiveReloadConfig(),
        )

        _ = original.with_overrides(host="0.0.0.0", port=9000)

        assert original.server.host == "127.0.0.1"
        assert original.server.port == 8080


class TestRedirectSourceValidation:
    """Tests for redirect sources loaded from config."""

    def test__placeholder_source__raises_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docsite.toml"
        config_file.write_text('[[redirects]]\nsource = "/docs/{page}"\ntarget = "/docs"\n')

        with pytest.raises(ValueError, match="route placeholders"):
            Config.load(config_file)
