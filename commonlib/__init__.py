"""Common helpers shared across the catalog client and API."""

from .storage import JsonStore, ListStore, StoreError  # noqa: F401
from .network import build_api_url, canonical_origin, path_segment
from .tokens import issue_token, verify_token
from .log import configure_logging

__all__ = [
    "JsonStore",
    "ListStore",
    "StoreError",
    "build_api_url",
    "canonical_origin",
    "path_segment",
    "issue_token",
    "verify_token",
    "configure_logging",
]
