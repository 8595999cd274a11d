"""Exceptions raised by the catalog client layer."""

from __future__ import annotations

from typing import Optional


class CatalogError(RuntimeError):
    """Base class for every error the store turns into a rejected action."""


class ValidationError(CatalogError, ValueError):
    """A product is missing a field the backend treats as mandatory."""


class AdaptationError(CatalogError, ValueError):
    """A wire record cannot be turned into a :class:`~catalog.models.Product`."""


class NetworkError(CatalogError):
    """The request never produced a response (connection failure, timeout)."""


class ApiError(CatalogError):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int, message: str, *, body: Optional[object] = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.body = body

    def __repr__(self) -> str:
        return f"ApiError(status={self.status!r}, message={self.message!r})"


class AuthError(CatalogError):
    """Mock login or registration was refused."""
