"""Client-side product catalog: schema adapter, REST client and state store."""

from .adapter import calculate_final_price, to_backend, to_frontend, to_frontend_list
from .auth import AuthSession
from .client import ApiResponse, ProductClient
from .errors import (
    AdaptationError,
    ApiError,
    AuthError,
    CatalogError,
    NetworkError,
    ValidationError,
)
from .models import Product, WireProduct
from .store import Action, Operation, Phase, ProductState, ProductStore

__all__ = [
    "calculate_final_price",
    "to_backend",
    "to_frontend",
    "to_frontend_list",
    "AuthSession",
    "ApiResponse",
    "ProductClient",
    "AdaptationError",
    "ApiError",
    "AuthError",
    "CatalogError",
    "NetworkError",
    "ValidationError",
    "Product",
    "WireProduct",
    "Action",
    "Operation",
    "Phase",
    "ProductState",
    "ProductStore",
]
