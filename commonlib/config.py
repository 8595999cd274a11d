"""Configuration helpers for the catalog client and reference API.

Values come from the process environment, optionally primed from a ``.env``
file in the base directory. Tests pass an explicit ``env`` mapping so they do
not depend on the ambient environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_TOKEN_MAX_AGE = 5 * 24 * 60 * 60


@dataclass(frozen=True)
class ClientConfig:
    """Settings for :class:`catalog.client.ProductClient` and the auth session."""

    base_dir: Path
    api_base_url: str
    timeout: float
    storage_file: Path
    secret_key: str
    log_level: str


@dataclass(frozen=True)
class ApiConfig:
    """Settings for the reference Flask service."""

    base_dir: Path
    product_file: Path
    product_backups: int
    host: str
    port: int
    allowed_origins: tuple[str, ...]
    force_tls: bool
    require_auth: bool
    secret_key: str
    token_max_age: int
    log_level: str


def env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or (
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    )


def _resolve(base_dir: Path, raw: str, default: str) -> Path:
    path = Path(raw or default)
    return path if path.is_absolute() else base_dir / path


def _env_map(base_dir: Path, env: Mapping[str, str] | None) -> dict[str, str]:
    if env is not None:
        return dict(env)
    load_dotenv(base_dir / ".env")
    return dict(os.environ)


def load_client_config(base_dir: Path, env: Mapping[str, str] | None = None) -> ClientConfig:
    """Load client configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    env_map = _env_map(base_dir, env)

    api_base_url = (env_map.get("API_BASE_URL") or DEFAULT_API_BASE_URL).strip().rstrip("/")
    timeout = float(env_map.get("API_TIMEOUT", "30"))

    return ClientConfig(
        base_dir=base_dir,
        api_base_url=api_base_url,
        timeout=timeout,
        storage_file=_resolve(base_dir, env_map.get("LOCAL_STORAGE_FILE", ""), "local_storage.json"),
        secret_key=env_map.get("SECRET_KEY", "dev-change-me"),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )


def load_api_config(base_dir: Path, env: Mapping[str, str] | None = None) -> ApiConfig:
    """Load reference API configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    env_map = _env_map(base_dir, env)

    return ApiConfig(
        base_dir=base_dir,
        product_file=_resolve(base_dir, env_map.get("PRODUCT_FILE", ""), "products.json"),
        product_backups=int(env_map.get("PRODUCT_BACKUPS", "2")),
        host=env_map.get("API_HOST", "0.0.0.0"),
        port=int(env_map.get("API_PORT", "8080")),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", "")),
        force_tls=env_bool(env_map.get("FORCE_TLS"), False),
        require_auth=env_bool(env_map.get("REQUIRE_AUTH"), False),
        secret_key=env_map.get("SECRET_KEY", "dev-change-me"),
        token_max_age=int(env_map.get("TOKEN_MAX_AGE", str(DEFAULT_TOKEN_MAX_AGE))),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )
