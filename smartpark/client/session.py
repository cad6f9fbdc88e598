"""
Authenticated session for client screens.

An ``AuthSession`` is created once and handed to each screen. It hydrates from
the token store, and tears itself down on logout or on any 401 seen by the
API client.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from smartpark.client.api import ApiClient
from smartpark.client.errors import ApiError, ValidationError
from smartpark.client.validation import validate_login, validate_registration

log = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Outcome of a login or registration attempt."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class AuthSession:
    """Current user and token, with login, register, logout and check."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.store = api.store
        self.user: Optional[Dict[str, Any]] = None
        self.is_authenticated = False
        self.loading = True
        api.on_unauthorized = self._teardown

    def _teardown(self) -> None:
        self.store.clear()
        self.user = None
        self.is_authenticated = False

    def _establish(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user = {key: value for key, value in data.items() if key != "token"}
        self.store.save(data["token"], user)
        self.user = user
        self.is_authenticated = True
        return user

    def check(self) -> bool:
        """
        Restore the session from the stored token, confirming it with the server.
        Any failure clears the stored credentials.
        """
        try:
            if self.store.token and self.store.user:
                try:
                    user = self.api.auth.me()
                except ApiError as exc:
                    log.error("Auth check failed: %s", exc.message)
                    self._teardown()
                else:
                    self.user = user.model_dump(by_alias=True, mode="json")
                    self.is_authenticated = True
        finally:
            self.loading = False
        return self.is_authenticated

    def login(self, username: str, password: str) -> AuthResult:
        try:
            validate_login(username, password)
            data = self.api.auth.login(username, password)
        except ValidationError as exc:
            return AuthResult(success=False, error=str(exc))
        except ApiError as exc:
            return AuthResult(success=False, error=exc.message or "Login failed. Please try again.")
        user = self._establish(data)
        log.info("Logged in as %s", user.get("username"))
        return AuthResult(success=True, data=user)

    def register(self, username: str, email: str, password: str, confirm_password: str) -> AuthResult:
        try:
            validate_registration(username, email, password, confirm_password)
            data = self.api.auth.register(username, email, password)
        except ValidationError as exc:
            return AuthResult(success=False, error=str(exc))
        except ApiError as exc:
            return AuthResult(
                success=False, error=exc.message or "Registration failed. Please try again."
            )
        user = self._establish(data)
        log.info("Registered and logged in as %s", user.get("username"))
        return AuthResult(success=True, data=user)

    def logout(self) -> None:
        """Tell the server, then always drop the local session."""
        try:
            if self.store.token:
                self.api.auth.logout()
        except ApiError as exc:
            log.error("Logout error: %s", exc.message)
        finally:
            self._teardown()
