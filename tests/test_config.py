"""Tests for configuration models, loading, and the feature gate."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from shellnet import (
    Config,
    ConfigurationError,
    HttpSettingsConfig,
    MigrationConfig,
    feature_enabled,
    load_config,
    parse_config,
)

CUSTOM_SECRET = "custom/my-contents-is-secret"


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    """Create a root directory holding the default and a custom secret file."""
    (tmp_path / ".gitlab_shell_secret").write_text("default-secret-content\n")
    (tmp_path / "custom").mkdir()
    (tmp_path / CUSTOM_SECRET).write_text("  custom-secret-content\n")
    return tmp_path


class TestParseConfig:
    """Tests for the YAML config loader."""

    def test_defaults(self, root_dir):
        """Test that empty YAML yields the defaults."""
        config = parse_config("", root_dir)
        assert config.log_file == root_dir / "gitlab-shell.log"
        assert config.log_format == "text"
        assert config.secret == "default-secret-content"
        assert config.migration == MigrationConfig()
        assert config.http_settings == HttpSettingsConfig()
        assert config.root_dir == root_dir

    def test_relative_log_file(self, root_dir):
        """Test that a relative log file resolves against the root dir."""
        config = parse_config("log_file: my-log.log", root_dir)
        assert config.log_file == root_dir / "my-log.log"

    def test_absolute_log_file(self, root_dir):
        """Test that an absolute log file is kept."""
        config = parse_config("log_file: /qux/my-log.log", root_dir)
        assert config.log_file == Path("/qux/my-log.log")

    def test_log_format(self, root_dir):
        """Test the json log format."""
        assert parse_config("log_format: json", root_dir).log_format == "json"

    def test_migration(self, root_dir):
        """Test that migration settings keep feature order."""
        config = parse_config("migration:\n  enabled: true\n  features:\n    - foo\n    - bar", root_dir)
        assert config.migration.enabled is True
        assert config.migration.features == ("foo", "bar")

    def test_gitlab_url_key(self, root_dir):
        """Test that the gitlab_url key sets the backend URL."""
        config = parse_config("gitlab_url: http+unix://%2Fpath%2Fto%2Fgitlab%2Fgitlab.socket", root_dir)
        assert config.backend_url == "http+unix://%2Fpath%2Fto%2Fgitlab%2Fgitlab.socket"

    def test_relative_secret_file(self, root_dir):
        """Test that a relative secret file is read and stripped."""
        config = parse_config(f"secret_file: {CUSTOM_SECRET}", root_dir)
        assert config.secret == "custom-secret-content"

    def test_absolute_secret_file(self, root_dir):
        """Test that an absolute secret file is read."""
        config = parse_config(f"secret_file: {root_dir / CUSTOM_SECRET}", root_dir)
        assert config.secret == "custom-secret-content"

    def test_inline_secret(self, root_dir):
        """Test that an inline secret wins over the secret file."""
        config = parse_config("secret: an inline secret", root_dir)
        assert config.secret == "an inline secret"

    def test_http_settings(self, root_dir):
        """Test basic auth and read timeout settings."""
        yaml_str = "http_settings:\n  user: user_basic_auth\n  password: password_basic_auth\n  read_timeout: 500"
        config = parse_config(yaml_str, root_dir)
        assert config.http_settings == HttpSettingsConfig(
            user="user_basic_auth",
            password="password_basic_auth",
            read_timeout=500,
        )

    def test_missing_secret_file(self, tmp_path):
        """Test that an unreadable secret file is a configuration error."""
        with pytest.raises(ConfigurationError):
            parse_config("", tmp_path)

    def test_unknown_key(self, root_dir):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError):
            parse_config("gitlab_urll: http://localhost", root_dir)

    def test_negative_read_timeout(self, root_dir):
        """Test that a negative read timeout is rejected."""
        with pytest.raises(ConfigurationError):
            parse_config("http_settings:\n  read_timeout: -1", root_dir)

    def test_not_a_mapping(self, root_dir):
        """Test that a YAML list is rejected."""
        with pytest.raises(ConfigurationError):
            parse_config("- foo", root_dir)

    def test_invalid_yaml(self, root_dir):
        """Test that broken YAML is rejected."""
        with pytest.raises(ConfigurationError):
            parse_config("migration: [", root_dir)


class TestLoadConfig:
    """Tests for loading config.yml from disk."""

    def test_load_file(self, root_dir):
        """Test loading an existing config file."""
        (root_dir / "config.yml").write_text("gitlab_url: http://localhost:3000\n")
        config = load_config(root_dir)
        assert config.backend_url == "http://localhost:3000"
        assert config.secret == "default-secret-content"

    def test_missing_file_uses_defaults(self, root_dir):
        """Test that a missing config file yields the defaults."""
        config = load_config(root_dir)
        assert config.backend_url.startswith("http+unix://")


class TestConfigModel:
    """Tests for the frozen config model."""

    def test_frozen(self):
        """Test that a loaded config cannot be mutated."""
        config = Config(backend_url="http://localhost:3000")
        with pytest.raises(ValidationError):
            config.backend_url = "http://example.com"


class TestFeatureEnabled:
    """Tests for the migration feature gate."""

    @pytest.mark.parametrize(
        ("backend_url", "migration", "expected"),
        [
            pytest.param(
                "http+unix://gitlab.socket",
                MigrationConfig(enabled=True, features=("discover",)),
                True,
                id="socket-feature-enabled",
            ),
            pytest.param(
                "http+unix://gitlab.socket",
                MigrationConfig(enabled=True, features=()),
                False,
                id="socket-feature-not-listed",
            ),
            pytest.param(
                "http+unix://gitlab.socket",
                MigrationConfig(enabled=False, features=("discover",)),
                False,
                id="socket-migration-disabled",
            ),
            pytest.param(
                "http://localhost:3000",
                MigrationConfig(enabled=True, features=("discover",)),
                True,
                id="http-feature-enabled",
            ),
            pytest.param(
                "https://localhost:3000",
                MigrationConfig(enabled=True, features=("discover",)),
                False,
                id="https-not-supported",
            ),
        ],
    )
    def test_feature_enabled(self, backend_url, migration, expected):
        """Test every combination of migration state and transport."""
        config = Config(backend_url=backend_url, migration=migration)
        assert feature_enabled(config, "discover") is expected
        assert config.feature_enabled("discover") is expected

    def test_other_feature(self):
        """Test that only listed features are enabled."""
        config = Config(
            backend_url="http://localhost:3000",
            migration=MigrationConfig(enabled=True, features=("discover",)),
        )
        assert config.feature_enabled("two_factor_recovery") is False
