"""
Errors raised by the SmartPark client.
"""
from typing import Optional


class ClientError(Exception):
    """Base class for client errors."""


class ValidationError(ClientError):
    """Form input rejected before anything was sent to the server."""


class ApiError(ClientError):
    """The server answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class AuthenticationError(ApiError):
    """The server rejected the session (HTTP 401)."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)
