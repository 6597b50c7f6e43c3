"""Pydantic configuration models and the YAML config loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from ..errors import ConfigurationError

HTTP_PROTOCOL = "http://"
HTTPS_PROTOCOL = "https://"
UNIX_SOCKET_PROTOCOL = "http+unix://"

# The migrated code paths do not speak TLS yet.
MIGRATION_PROTOCOLS = (HTTP_PROTOCOL, UNIX_SOCKET_PROTOCOL)

DEFAULT_CONFIG_FILE = "config.yml"
DEFAULT_BACKEND_URL = "http+unix://%2Fhome%2Fgit%2Fgitlab%2Ftmp%2Fsockets%2Fgitlab-workhorse.socket"
DEFAULT_LOG_FILE = "gitlab-shell.log"
DEFAULT_SECRET_FILE = ".gitlab_shell_secret"


class HttpSettingsConfig(BaseModel):
    """HTTP settings shared by both transports."""

    user: str = Field("", description="Username for HTTP basic auth")
    password: str = Field("", description="Password for HTTP basic auth")
    read_timeout: float = Field(
        0,
        ge=0,
        description="Seconds allowed for a whole request (0 = no timeout)",
    )

    model_config = {"extra": "forbid", "frozen": True}


class MigrationConfig(BaseModel):
    """Which experimental code paths are switched on."""

    enabled: bool = Field(False, description="Master switch for migrated features")
    features: tuple[str, ...] = Field((), description="Names of migrated features to enable")

    model_config = {"extra": "forbid", "frozen": True}


class Config(BaseModel):
    """
    Root configuration for the internal API client.

    Example:
        config = Config(
            backend_url="http+unix:///var/run/gitlab.socket",
            secret="sssh",
            http_settings=HttpSettingsConfig(read_timeout=30),
        )

    YAML format:
        gitlab_url: http+unix://%2Fvar%2Frun%2Fgitlab.socket
        secret_file: .gitlab_shell_secret
        http_settings:
          user: basic_user
          password: basic_password
          read_timeout: 30
        migration:
          enabled: true
          features:
            - discover
    """

    root_dir: Path = Field(Path("."), description="Directory relative paths resolve against")
    backend_url: str = Field(
        DEFAULT_BACKEND_URL,
        validation_alias=AliasChoices("backend_url", "gitlab_url"),
        description="Internal API address; the scheme selects the transport",
    )
    secret: str = Field("", description="Shared secret sent with every request")
    http_settings: HttpSettingsConfig = Field(default_factory=HttpSettingsConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    log_file: Path = Field(Path(DEFAULT_LOG_FILE), description="Log file path")
    log_format: Literal["text", "json"] = Field("text", description="Log line format")

    model_config = {"extra": "forbid", "frozen": True}

    def feature_enabled(self, name: str) -> bool:
        """Return True if the migrated code path ``name`` should be used."""
        return feature_enabled(self, name)


def feature_enabled(config: Config, name: str) -> bool:
    """
    Decide whether a migrated feature is active.

    A feature is active only when migration is enabled, the feature is
    listed, and the backend URL uses a transport the migrated code
    supports.

    Args:
        config: Loaded configuration
        name: Feature name as listed under ``migration.features``

    Returns:
        True if the feature should be used
    """
    if not config.migration.enabled:
        return False

    if name not in config.migration.features:
        return False

    return config.backend_url.startswith(MIGRATION_PROTOCOLS)


def _resolve(root_dir: Path, value: Union[str, Path]) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return root_dir / path


def parse_config(data: Union[str, bytes], root_dir: Path) -> Config:
    """
    Build a Config from YAML text.

    Relative ``log_file`` and ``secret_file`` values are resolved against
    ``root_dir``. An inline ``secret`` takes precedence over ``secret_file``.

    Args:
        data: YAML document
        root_dir: Directory relative paths resolve against

    Returns:
        Validated, frozen Config

    Raises:
        ConfigurationError: On invalid YAML, unknown keys, or an unreadable secret file
    """
    try:
        raw: Any = yaml.safe_load(data) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid config YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError("Config must be a YAML mapping")

    values = dict(raw)
    values["root_dir"] = root_dir
    values["log_file"] = _resolve(root_dir, values.get("log_file") or DEFAULT_LOG_FILE)

    secret_file = values.pop("secret_file", None) or DEFAULT_SECRET_FILE
    if not values.get("secret"):
        secret_path = _resolve(root_dir, secret_file)
        try:
            values["secret"] = secret_path.read_text().strip()
        except OSError as e:
            raise ConfigurationError(f"Unable to read secret file {secret_path}: {e}") from e

    try:
        return Config.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config: {e}") from e


def load_config(root_dir: Path, filename: str = DEFAULT_CONFIG_FILE) -> Config:
    """Load ``filename`` from ``root_dir``; a missing file yields the defaults."""
    config_path = root_dir / filename
    try:
        data = config_path.read_text()
    except FileNotFoundError:
        data = ""
    except OSError as e:
        raise ConfigurationError(f"Unable to read config file {config_path}: {e}") from e

    return parse_config(data, root_dir)
