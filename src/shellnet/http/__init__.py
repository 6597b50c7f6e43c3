"""Internal API clients for shellnet."""

from .classifier import classify_response
from .client import HttpClient, SocketClient, get_client, socket_path_from_url
from .protocols import Client
from .request import SECRET_HEADER_NAME, PreparedRequest, authenticate, build_request, do_request

__all__ = [
    "SECRET_HEADER_NAME",
    "Client",
    "HttpClient",
    "PreparedRequest",
    "SocketClient",
    "authenticate",
    "build_request",
    "classify_response",
    "do_request",
    "get_client",
    "socket_path_from_url",
]
