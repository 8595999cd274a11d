"""Async client for the product REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

import httpx

from commonlib.config import ClientConfig
from commonlib.network import build_api_url, path_segment

from .adapter import to_backend, to_frontend, to_frontend_list
from .errors import AdaptationError, ApiError, NetworkError
from .models import Product

logger = logging.getLogger(__name__)

T = TypeVar("T")

TokenProvider = Callable[[], Optional[str]]


@dataclass(frozen=True, slots=True)
class ApiResponse(Generic[T]):
    """Uniform result envelope: HTTP status plus adapted payload."""

    status: int
    data: T


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(response: httpx.Response, body: Any) -> str:
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(body, str) and body.strip():
        return body.strip()
    return response.reason_phrase or f"Request failed with status {response.status_code}"


class ProductClient:
    """Client for the product catalog API.

    Every method adapts its input to the wire form, performs one HTTP call and
    returns an :class:`ApiResponse` whose ``data`` is already in canonical
    form. Failures raise :class:`NetworkError` or :class:`ApiError`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8080``
            token_provider: Callable returning the bearer token, or ``None``
            timeout: Request timeout in seconds; httpx's default when omitted
            transport: Custom httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        options: dict[str, Any] = {
            "headers": {"Content-Type": "application/json", "Accept": "application/json"},
            "event_hooks": {"request": [self._attach_token]},
        }
        if timeout is not None:
            options["timeout"] = timeout
        if transport is not None:
            options["transport"] = transport
        self.client = httpx.AsyncClient(**options)

    @classmethod
    def from_config(cls, config: ClientConfig, *, token_provider: Optional[TokenProvider] = None) -> "ProductClient":
        return cls(config.api_base_url, token_provider=token_provider, timeout=config.timeout)

    async def __aenter__(self) -> "ProductClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _attach_token(self, request: httpx.Request) -> None:
        if self.token_provider is None:
            return
        token = self.token_provider()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _request(self, method: str, path: str, json: Any = None) -> tuple[int, Any]:
        url = build_api_url(self.base_url, path)
        try:
            response = await self.client.request(method, url, json=json)
        except httpx.RequestError as exc:
            logger.error(f"{method} {url} failed: {exc!r}")
            raise NetworkError(str(exc) or "Network Error") from exc

        body = _decode(response)
        if response.is_error:
            message = _error_message(response, body)
            logger.warning(f"{method} {url} -> {response.status_code}: {message}")
            raise ApiError(response.status_code, message, body=body)
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response.status_code, body

    @staticmethod
    def _product_list(body: Any, what: str) -> list[Product]:
        if not isinstance(body, list):
            logger.warning(f"Expected an array of products from {what}, got: {body!r}")
            return []
        return to_frontend_list(body)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    async def list_products(self) -> ApiResponse[list[Product]]:
        status, body = await self._request("GET", "/products")
        return ApiResponse(status, self._product_list(body, "/products"))

    async def get_product(self, barcode: str) -> ApiResponse[Product]:
        status, body = await self._request("GET", f"/products/{path_segment(barcode)}")
        return ApiResponse(status, to_frontend(body))

    async def create_product(self, product: Product) -> ApiResponse[Product]:
        payload = to_backend(product).model_dump()
        status, body = await self._request("POST", "/products", json=payload)
        return ApiResponse(status, to_frontend(body))

    async def update_product(self, barcode: str, product: Product) -> ApiResponse[Product]:
        payload = to_backend(product).model_dump()
        status, body = await self._request("PUT", f"/products/{path_segment(barcode)}", json=payload)
        return ApiResponse(status, to_frontend(body))

    async def delete_product(self, barcode: str) -> ApiResponse[Any]:
        status, body = await self._request("DELETE", f"/products/{path_segment(barcode)}")
        return ApiResponse(status, body)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    async def filter_by_price_range(self, min_price: int, max_price: int) -> ApiResponse[list[Product]]:
        path = f"/filter/price/{int(min_price)}/{int(max_price)}"
        status, body = await self._request("GET", path)
        return ApiResponse(status, self._product_list(body, path))

    async def sorted_names_by_price(self) -> ApiResponse[list[str]]:
        status, body = await self._request("GET", "/sort/price")
        if not isinstance(body, list):
            raise AdaptationError(f"Expected an array of product names, got: {body!r}")
        return ApiResponse(status, [str(name) for name in body if name is not None])
