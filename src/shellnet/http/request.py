"""Request building and the execution routine shared by both transports."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from ..errors import MalformedRequestError, UnreachableError
from ..models.config import Config
from .classifier import classify_response

logger = logging.getLogger(__name__)

SECRET_HEADER_NAME = "Gitlab-Shared-Secret"
JSON_CONTENT_TYPE = "application/json"


@dataclass
class PreparedRequest:
    """
    An outbound request ready to hand to the HTTP engine.

    Attributes:
        method: HTTP method (GET, POST)
        url: Absolute request URL
        headers: Request headers
        data: Serialized body, or None for no body
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    data: bytes | None = None


def join_url(base_url: str, path: str) -> str:
    """Append ``path`` to ``base_url`` with exactly one slash between them."""
    if not path:
        return base_url
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def serialize_body(body: Any) -> bytes:
    """
    Serialize a request body as compact JSON.

    Pydantic models serialize themselves; anything else goes through
    ``json.dumps``. NaN and infinities are rejected rather than sent as
    non-JSON tokens or silently nulled.

    Raises:
        MalformedRequestError: If the body cannot be represented as JSON
    """
    try:
        if isinstance(body, BaseModel):
            if _has_non_finite(body.model_dump()):
                raise ValueError("Out of range float values are not JSON compliant")
            return body.model_dump_json().encode()

        return json.dumps(body, separators=(",", ":"), allow_nan=False).encode()
    except (TypeError, ValueError, PydanticSerializationError) as e:
        raise MalformedRequestError(f"Unable to encode request body: {e}") from e


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(item) for item in value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(_has_non_finite(item) for item in value)
    return False


def build_request(method: str, base_url: str, path: str, body: Any = None) -> PreparedRequest:
    """
    Build a request for ``base_url + path``.

    Args:
        method: HTTP method
        base_url: Base the path is appended to
        path: Path relative to the base
        body: Optional JSON body; None sends no body

    Returns:
        PreparedRequest with the JSON content type set when a body is present

    Raises:
        MalformedRequestError: If the body cannot be serialized
    """
    request = PreparedRequest(method=method, url=join_url(base_url, path))

    if body is not None:
        request.data = serialize_body(body)
        request.headers["Content-Type"] = JSON_CONTENT_TYPE

    return request


def authenticate(request: PreparedRequest, config: Config) -> PreparedRequest:
    """Attach the shared-secret header and, if fully configured, basic auth."""
    encoded_secret = base64.b64encode(config.secret.encode()).decode()
    request.headers[SECRET_HEADER_NAME] = encoded_secret

    user, password = config.http_settings.user, config.http_settings.password
    if user and password:
        request.headers["Authorization"] = aiohttp.BasicAuth(user, password).encode()

    return request


async def do_request(
    session: aiohttp.ClientSession,
    config: Config,
    method: str,
    base_url: str,
    path: str,
    body: Any = None,
) -> aiohttp.ClientResponse:
    """
    Execute one request against the internal API.

    The session decides how connections are dialed; everything else is
    identical for every transport.

    Args:
        session: Open session carrying the transport's connector and timeout
        config: Loaded configuration
        method: HTTP method
        base_url: Base URL requests are composed against
        path: Path relative to the base
        body: Optional JSON body

    Returns:
        The open 2xx response. The caller must release it.

    Raises:
        MalformedRequestError: If the body cannot be serialized
        UnreachableError: If no response was obtained
        NotFoundError: On 404
        ApiError: On any other non-2xx status
    """
    request = authenticate(build_request(method, base_url, path, body), config)

    try:
        response = await session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.data,
        )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(f"Internal API request {request.method} {request.url} failed: {e!r}")
        raise UnreachableError() from e

    logger.debug(f"{request.method} {request.url} -> {response.status}")
    return await classify_response(response)
