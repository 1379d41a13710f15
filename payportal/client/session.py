"""
Session store — the single active session (token + role) of this client.

Lifecycle: init() restores from disk, login() creates, teardown() destroys.
Callers hold the store and pass it to whatever needs the token; nothing
reads it through a module global.
"""

import json
import logging
import os
from typing import Optional

from payportal.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

SESSION_FILE_MODE = 0o600


class SessionStore:
    def __init__(self, path: Optional[str] = None):
        # path=None keeps the session in memory only
        self.path = path
        self.token: Optional[str] = None
        self.role: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.role)

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == "admin"

    def init(self) -> bool:
        """
        Restore a persisted session. Both token and role must be present;
        anything less is treated as logged out and the file is cleared.
        """
        self.token = None
        self.role = None
        if not self.path or not os.path.exists(self.path):
            return False
        try:
            with open(self.path, "r") as f:
                stored = json.load(f)
        except (OSError, ValueError):
            logger.warning("Discarding unreadable session file %s", self.path)
            self._remove_file()
            return False

        token = stored.get("token") if isinstance(stored, dict) else None
        role = stored.get("role") if isinstance(stored, dict) else None
        if not token or not role:
            self._remove_file()
            return False

        self.token = token
        self.role = role
        return True

    def login(self, token: str, role: str) -> None:
        self.token = token
        self.role = role
        if self.path:
            # Owner-only: the file holds a bearer token
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SESSION_FILE_MODE)
            os.chmod(self.path, SESSION_FILE_MODE)
            with os.fdopen(fd, "w") as f:
                json.dump({"token": token, "role": role}, f)

    def teardown(self) -> None:
        """Log out: forget the token in memory and on disk."""
        self.token = None
        self.role = None
        self._remove_file()

    def require_role(self, role: str) -> None:
        if not self.is_authenticated:
            raise Unauthorized("Not logged in")
        if self.role != role:
            raise Forbidden(f"This action requires the {role} role")

    def auth_header(self) -> dict:
        if not self.token:
            raise Unauthorized("Not logged in")
        return {"Authorization": f"Bearer {self.token}"}

    def _remove_file(self) -> None:
        if self.path and os.path.exists(self.path):
            os.remove(self.path)
