"""Signed bearer tokens shared by the mock client login and the API."""

from __future__ import annotations

from typing import Any, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

TOKEN_SALT = "catalog-session"


def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret or "dev-change-me", salt=TOKEN_SALT)


def issue_token(secret: str, username: str) -> str:
    return _serializer(secret).dumps({"username": username})


def verify_token(secret: str, token: str | None, max_age: int) -> Optional[dict[str, Any]]:
    """Return the token payload, or ``None`` if it is missing, forged or expired."""

    if not token:
        return None
    try:
        data = _serializer(secret).loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    return data if isinstance(data, dict) else None
