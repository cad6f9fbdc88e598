"""
Credential storage for the client session.

A store keeps the bearer token and the serialized user between runs. The
memory store lasts for the process; the file store writes a JSON file readable
only by its owner.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".config" / "smartpark" / "session.json"


class MemoryTokenStore:
    """Token store held in memory."""

    def __init__(self):
        self._token: Optional[str] = None
        self._user: Optional[Dict[str, Any]] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._user

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self._token = token
        self._user = dict(user)

    def clear(self) -> None:
        self._token = None
        self._user = None


class FileTokenStore(MemoryTokenStore):
    """Token store persisted to a JSON file with mode 0600."""

    def __init__(self, path: Optional[os.PathLike] = None):
        super().__init__()
        self.path = Path(path) if path else DEFAULT_PATH
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return
        self._token = data.get("token")
        self._user = data.get("user")

    def save(self, token: str, user: Dict[str, Any]) -> None:
        super().save(token, user)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump({"token": token, "user": self._user}, fh, default=str)

    def clear(self) -> None:
        super().clear()
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
