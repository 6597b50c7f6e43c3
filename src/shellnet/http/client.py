"""Internal API clients for network and Unix socket transports."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any
from urllib.parse import unquote

import aiohttp

from ..errors import UnsupportedProtocolError
from ..models.config import HTTP_PROTOCOL, HTTPS_PROTOCOL, UNIX_SOCKET_PROTOCOL, Config
from .protocols import Client
from .request import do_request

logger = logging.getLogger(__name__)

# Requests need a base URL starting with http; the host is ignored
# because every connection is dialed to the socket.
SOCKET_BASE_URL = "http://unix"


class _BaseClient(ABC):
    """
    Session lifecycle shared by both transports.

    Example:
        client = get_client(config)

        async with client:
            async with await client.get("/allowed") as response:
                print(await response.json())
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        read_timeout = config.http_settings.read_timeout
        self.timeout = aiohttp.ClientTimeout(total=read_timeout or None)
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL request paths are appended to."""

    @abstractmethod
    def _build_connector(self) -> aiohttp.BaseConnector:
        """Create the connector that dials the backend."""

    async def __aenter__(self) -> _BaseClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(
            connector=self._build_connector(),
            timeout=self.timeout,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get(self, path: str) -> aiohttp.ClientResponse:
        return await self._do_request("GET", path)

    async def post(self, path: str, body: Any = None) -> aiohttp.ClientResponse:
        return await self._do_request("POST", path, body)

    async def _do_request(self, method: str, path: str, body: Any = None) -> aiohttp.ClientResponse:
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        return await do_request(self._session, self.config, method, self.base_url, path, body)


class HttpClient(_BaseClient):
    """Talks to the backend over TCP, or TLS for https:// URLs."""

    @property
    def base_url(self) -> str:
        return self.config.backend_url

    def _build_connector(self) -> aiohttp.BaseConnector:
        return aiohttp.TCPConnector()


class SocketClient(_BaseClient):
    """Talks to the backend over a Unix domain socket."""

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.socket_path = socket_path_from_url(config.backend_url)

    @property
    def base_url(self) -> str:
        return SOCKET_BASE_URL

    def _build_connector(self) -> aiohttp.BaseConnector:
        return aiohttp.UnixConnector(path=self.socket_path)


def socket_path_from_url(url: str) -> str:
    """
    Recover the filesystem path from an http+unix:// URL.

    The remainder after the scheme may be percent-encoded
    (``http+unix://%2Ftmp%2Fgitlab.socket``) and is decoded.
    """
    if url.startswith(UNIX_SOCKET_PROTOCOL):
        url = url[len(UNIX_SOCKET_PROTOCOL) :]
    return unquote(url)


def get_client(config: Config) -> Client:
    """
    Create the client matching the backend URL's scheme.

    Args:
        config: Loaded configuration

    Returns:
        SocketClient for http+unix:// URLs, HttpClient for http:// and https://

    Raises:
        UnsupportedProtocolError: For any other scheme
    """
    url = config.backend_url

    if url.startswith(UNIX_SOCKET_PROTOCOL):
        logger.debug(f"Using Unix socket client for {url}")
        return SocketClient(config)

    if url.startswith((HTTP_PROTOCOL, HTTPS_PROTOCOL)):
        logger.debug(f"Using HTTP client for {url}")
        return HttpClient(config)

    raise UnsupportedProtocolError(url)
