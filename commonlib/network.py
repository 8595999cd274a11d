"""URL helpers shared by the catalog client and API."""
from __future__ import annotations

from urllib.parse import quote


def canonical_origin(host: str, port: int, scheme: str) -> str:
    """Return a canonical origin string (scheme://host[:port])."""

    host = (host or "").strip()
    if not host:
        raise ValueError("host is required")

    scheme = (scheme or "").strip().lower()
    if scheme not in {"http", "https"}:
        raise ValueError("scheme must be http or https")

    if port <= 0 or port > 65535:
        raise ValueError("port must be between 1 and 65535")

    default_port = 443 if scheme == "https" else 80
    suffix = "" if port == default_port else f":{port}"
    return f"{scheme}://{host}{suffix}"


def build_api_url(base: str, path: str = "/") -> str:
    """Combine a base URL with a path while avoiding double slashes."""

    base = (base or "").rstrip("/")
    if not path:
        return base
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def path_segment(value: object) -> str:
    """Percent-encode ``value`` for use as a single URL path segment."""

    return quote(str(value), safe="")
