"""
shellnet - Client for an internal HTTP API over TCP or Unix sockets.

Usage:
    from pathlib import Path

    from shellnet import get_client, load_config

    config = load_config(Path("/home/git/gitlab-shell"))

    async with get_client(config) as client:
        async with await client.post("/allowed", {"key_id": 1}) as response:
            print(await response.json())
"""

__version__ = "1.0.0"

from .errors import (
    ApiError,
    ConfigurationError,
    InternalApiError,
    MalformedRequestError,
    NotFoundError,
    ShellnetError,
    UnreachableError,
    UnsupportedProtocolError,
)
from .http import Client, HttpClient, SocketClient, get_client
from .logging_config import setup_logging, setup_logging_from_config
from .models.config import (
    Config,
    HttpSettingsConfig,
    MigrationConfig,
    feature_enabled,
    load_config,
    parse_config,
)

__all__ = [
    "__version__",
    # Clients
    "Client",
    "HttpClient",
    "SocketClient",
    "get_client",
    # Config
    "Config",
    "HttpSettingsConfig",
    "MigrationConfig",
    "feature_enabled",
    "load_config",
    "parse_config",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    # Errors
    "ShellnetError",
    "ConfigurationError",
    "InternalApiError",
    "MalformedRequestError",
    "UnsupportedProtocolError",
    "UnreachableError",
    "NotFoundError",
    "ApiError",
]
