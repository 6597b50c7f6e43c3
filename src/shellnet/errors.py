"""Exception hierarchy for shellnet."""

from __future__ import annotations


class ShellnetError(Exception):
    """Base class for all shellnet errors."""


class ConfigurationError(ShellnetError):
    """Configuration could not be read or failed validation."""


class InternalApiError(ShellnetError):
    """
    Base class for errors raised by internal API clients.

    The string form of every subclass is the message callers surface
    to users verbatim.
    """


class MalformedRequestError(InternalApiError):
    """The request body could not be serialized as JSON."""


class UnsupportedProtocolError(InternalApiError):
    """The backend URL uses a scheme no client can talk to."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Unsupported protocol: {url}")


class UnreachableError(InternalApiError):
    """No response was obtained from the backend."""

    MESSAGE = "Internal API unreachable"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class ApiError(InternalApiError):
    """The backend answered with a non-2xx status."""

    def __init__(self, message: str, status: int) -> None:
        self.message = message
        self.status = status
        super().__init__(message)

    @classmethod
    def generic(cls, status: int) -> ApiError:
        """Build the error used when the response carries no usable message."""
        return cls(f"Internal API error ({status})", status)


class NotFoundError(ApiError):
    """The backend answered 404."""

    MESSAGE = "Internal API error (404)"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE, 404)
