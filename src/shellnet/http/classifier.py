"""Normalizes internal API responses into the shellnet error taxonomy."""

from __future__ import annotations

import asyncio
import json
import logging

import aiohttp

from ..errors import ApiError, NotFoundError

logger = logging.getLogger(__name__)


def _error_message(content: bytes) -> str | None:
    """Extract the ``message`` field from a JSON error body, if there is one."""
    try:
        payload = json.loads(content)
    except (ValueError, UnicodeDecodeError):
        return None

    if not isinstance(payload, dict):
        return None

    message = payload.get("message")
    if isinstance(message, str) and message:
        return message
    return None


async def classify_response(response: aiohttp.ClientResponse) -> aiohttp.ClientResponse:
    """
    Pass 2xx responses through and raise for everything else.

    Error responses are read and released here, so the caller only ever
    owns a body on success.

    Raises:
        NotFoundError: On 404, body discarded
        ApiError: On other non-2xx statuses, carrying the body's ``message``
            field when present
    """
    if 200 <= response.status < 300:
        return response

    try:
        if response.status == 404:
            raise NotFoundError()

        try:
            content = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Failed to read error body ({response.status}): {e}")
            content = b""
    finally:
        response.release()

    message = _error_message(content)
    if message is None:
        raise ApiError.generic(response.status)
    raise ApiError(message, response.status)
