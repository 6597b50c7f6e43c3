"""Protocol definition for internal API clients."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Protocol

import aiohttp


class Client(Protocol):
    """
    Protocol for internal API clients.

    Implementations differ only in how connections reach the backend;
    callers never need to know which transport they hold.
    """

    async def __aenter__(self) -> Client: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    async def get(self, path: str) -> aiohttp.ClientResponse:
        """
        Perform a GET request against the internal API.

        Args:
            path: Path relative to the backend base URL

        Returns:
            Open 2xx response; the caller must release it

        Raises:
            InternalApiError subclass for every failure
        """
        ...

    async def post(self, path: str, body: Any = None) -> aiohttp.ClientResponse:
        """
        Perform a POST request with a JSON body.

        Args:
            path: Path relative to the backend base URL
            body: JSON-serializable value or pydantic model

        Returns:
            Open 2xx response; the caller must release it
        """
        ...
