"""
Python client for the SmartPark API.
"""
from smartpark.client.api import ApiClient
from smartpark.client.errors import ApiError, AuthenticationError, ClientError, ValidationError
from smartpark.client.session import AuthResult, AuthSession
from smartpark.client.storage import FileTokenStore, MemoryTokenStore

__all__ = [
    "ApiClient",
    "ApiError", "AuthenticationError", "ClientError", "ValidationError",
    "AuthResult", "AuthSession",
    "FileTokenStore", "MemoryTokenStore",
]
