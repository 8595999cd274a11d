"""Mock authentication against a local JSON "local storage" file.

There is no auth backend: users register into the same file that holds the
session token, and login mints a signed token locally. The API only checks
that token when it runs with ``REQUIRE_AUTH``.
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from commonlib.config import ClientConfig
from commonlib.storage import JsonStore
from commonlib.tokens import issue_token

from .errors import AuthError

logger = logging.getLogger(__name__)

TOKEN_KEY = "@App:token"
USER_KEY = "@App:user"
USERS_KEY = "mock_users"

DEFAULT_ADMIN = ("admin", "admin")


def _public_user(record: dict[str, Any]) -> dict[str, Any]:
    return {"id": record["id"], "username": record["username"]}


class AuthSession:
    """Register, log in and log out users; hands out the current bearer token."""

    def __init__(self, storage_file: Path | str, secret_key: str) -> None:
        self.storage = JsonStore(storage_file, backups=0)
        self.secret_key = secret_key

    @classmethod
    def from_config(cls, config: ClientConfig) -> "AuthSession":
        return cls(config.storage_file, config.secret_key)

    def _users(self) -> list[dict[str, Any]]:
        users = self.storage.get(USERS_KEY, [])
        return users if isinstance(users, list) else []

    def register(self, username: str, password: str) -> dict[str, Any]:
        username = (username or "").strip()
        if not username or not password:
            raise AuthError("Username and password are required")

        users = self._users()
        if any(user.get("username") == username for user in users):
            raise AuthError("Username already exists. Please choose another.")

        record = {
            "id": str(uuid4()),
            "username": username,
            "password_hash": generate_password_hash(password),
            "created_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        users.append(record)
        self.storage.put(USERS_KEY, users)
        logger.info("Registered user %s", username)
        return _public_user(record)

    def login(self, username: str, password: str) -> tuple[str, dict[str, Any]]:
        username = (username or "").strip()
        match = next((u for u in self._users() if u.get("username") == username), None)

        if match and check_password_hash(match.get("password_hash", ""), password or ""):
            user = _public_user(match)
        elif (username, password) == DEFAULT_ADMIN:
            logger.info("Using default admin credentials")
            user = {"id": "admin", "username": username}
        else:
            raise AuthError("Invalid username or password")

        token = issue_token(self.secret_key, user["username"])
        self.storage.put(TOKEN_KEY, token)
        self.storage.put(USER_KEY, user)
        logger.info("Login successful for %s", username)
        return token, user

    def logout(self) -> None:
        self.storage.remove(TOKEN_KEY)
        self.storage.remove(USER_KEY)

    def restore(self) -> Optional[dict[str, Any]]:
        """Return the stored user if a complete session is on disk."""
        token = self.storage.get(TOKEN_KEY)
        user = self.storage.get(USER_KEY)
        if not token or user is None:
            return None
        if not isinstance(user, dict) or "username" not in user:
            logger.warning("Discarding malformed stored session")
            self.logout()
            return None
        return user

    @property
    def is_authenticated(self) -> bool:
        return self.restore() is not None

    def token(self) -> Optional[str]:
        token = self.storage.get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None
