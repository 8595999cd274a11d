"""In-memory product store with three-phase async actions.

Every server operation is dispatched as ``pending`` and then either
``fulfilled`` or ``rejected``; the reducer below is the only code that changes
state. Actions racing each other are merged in completion order, so the last
one to finish wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from .client import ProductClient
from .errors import CatalogError
from .models import Product

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    FETCH_ALL = "products/fetchAll"
    FETCH_BY_BARCODE = "products/fetchByBarcode"
    CREATE = "products/create"
    UPDATE = "products/update"
    DELETE = "products/delete"
    FILTER_BY_PRICE = "products/filterByPrice"
    SORT_BY_PRICE = "products/sortByPrice"
    CLEAR_FILTERED = "products/clearFilteredProducts"
    CLEAR_CURRENT = "products/clearCurrentProduct"


class Phase(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


FALLBACK_MESSAGES: dict[Operation, str] = {
    Operation.FETCH_ALL: "Failed to fetch products",
    Operation.FETCH_BY_BARCODE: "Failed to fetch product",
    Operation.CREATE: "Failed to create product",
    Operation.UPDATE: "Failed to update product",
    Operation.DELETE: "Failed to delete product",
    Operation.FILTER_BY_PRICE: "Failed to filter products",
    Operation.SORT_BY_PRICE: "Failed to sort products",
}


@dataclass(frozen=True, slots=True)
class Action:
    type: Operation
    phase: Optional[Phase] = None
    payload: Any = None
    error: Optional[str] = None
    meta: Any = None


@dataclass(frozen=True, slots=True)
class ProductState:
    products: tuple[Product, ...] = ()
    filtered_products: tuple[Product, ...] = ()
    sorted_product_names: tuple[str, ...] = ()
    current_product: Optional[Product] = None
    loading: bool = False
    error: Optional[str] = None


Listener = Callable[[ProductState], None]


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------
def _fulfilled(state: ProductState, action: Action) -> ProductState:
    state = replace(state, loading=False, error=None)
    payload = action.payload

    if action.type == Operation.FETCH_ALL:
        return replace(state, products=tuple(payload))

    if action.type == Operation.FETCH_BY_BARCODE:
        return replace(state, current_product=payload)

    if action.type == Operation.CREATE:
        return replace(state, products=state.products + (payload,), current_product=payload)

    if action.type == Operation.UPDATE:
        products = list(state.products)
        for index, existing in enumerate(products):
            if existing.barcode == payload.barcode:
                products[index] = payload
                break
        # No match: the product was never fetched here, so nothing to replace.
        return replace(state, products=tuple(products), current_product=payload)

    if action.type == Operation.DELETE:
        return replace(
            state,
            products=tuple(p for p in state.products if p.barcode != payload),
            filtered_products=tuple(p for p in state.filtered_products if p.barcode != payload),
            current_product=None,
        )

    if action.type == Operation.FILTER_BY_PRICE:
        return replace(state, filtered_products=tuple(payload))

    if action.type == Operation.SORT_BY_PRICE:
        return replace(state, sorted_product_names=tuple(payload))

    return state


def reduce(state: ProductState, action: Action) -> ProductState:
    """Return the state that results from applying ``action`` to ``state``."""

    if action.phase == Phase.PENDING:
        return replace(state, loading=True, error=None)
    if action.phase == Phase.REJECTED:
        return replace(state, loading=False, error=action.error or FALLBACK_MESSAGES.get(action.type))
    if action.phase == Phase.FULFILLED:
        return _fulfilled(state, action)

    if action.type == Operation.CLEAR_FILTERED:
        return replace(state, filtered_products=())
    if action.type == Operation.CLEAR_CURRENT:
        return replace(state, current_product=None)
    return state


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class ProductStore:
    """Owns the product state and runs async actions against a client."""

    client: ProductClient
    _state: ProductState = field(default_factory=ProductState, init=False, repr=False)
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)

    @property
    def state(self) -> ProductState:
        return self._state

    def dispatch(self, action: Action) -> Action:
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _run(
        self,
        operation: Operation,
        call: Callable[[], Awaitable[Any]],
        meta: Any = None,
    ) -> Action:
        self.dispatch(Action(operation, Phase.PENDING, meta=meta))
        try:
            payload = await call()
        except CatalogError as exc:
            message = str(exc) or FALLBACK_MESSAGES[operation]
            logger.warning("%s rejected: %s", operation.value, message)
            return self.dispatch(Action(operation, Phase.REJECTED, error=message, meta=meta))
        except Exception:
            # Settle the pending phase before the caller sees the error.
            logger.exception("%s failed unexpectedly", operation.value)
            self.dispatch(Action(operation, Phase.REJECTED, error=FALLBACK_MESSAGES[operation], meta=meta))
            raise
        return self.dispatch(Action(operation, Phase.FULFILLED, payload=payload, meta=meta))

    # ------------------------------------------------------------------
    # Async actions
    # ------------------------------------------------------------------
    async def fetch_all(self) -> Action:
        async def call() -> list[Product]:
            return (await self.client.list_products()).data

        return await self._run(Operation.FETCH_ALL, call)

    async def fetch_by_barcode(self, barcode: str) -> Action:
        async def call() -> Product:
            return (await self.client.get_product(barcode)).data

        return await self._run(Operation.FETCH_BY_BARCODE, call, meta=barcode)

    async def create(self, product: Product) -> Action:
        async def call() -> Product:
            return (await self.client.create_product(product)).data

        return await self._run(Operation.CREATE, call, meta=product)

    async def update(self, barcode: str, product: Product) -> Action:
        async def call() -> Product:
            return (await self.client.update_product(barcode, product)).data

        return await self._run(Operation.UPDATE, call, meta=barcode)

    async def delete(self, barcode: str) -> Action:
        async def call() -> str:
            await self.client.delete_product(barcode)
            return barcode

        return await self._run(Operation.DELETE, call, meta=barcode)

    async def filter_by_price_range(self, min_price: int, max_price: int) -> Action:
        async def call() -> list[Product]:
            return (await self.client.filter_by_price_range(min_price, max_price)).data

        return await self._run(Operation.FILTER_BY_PRICE, call, meta=(min_price, max_price))

    async def sort_by_price(self) -> Action:
        async def call() -> list[str]:
            return (await self.client.sorted_names_by_price()).data

        return await self._run(Operation.SORT_BY_PRICE, call)

    # ------------------------------------------------------------------
    # Plain actions
    # ------------------------------------------------------------------
    def clear_filtered_products(self) -> Action:
        return self.dispatch(Action(Operation.CLEAR_FILTERED))

    def clear_current_product(self) -> Action:
        return self.dispatch(Action(Operation.CLEAR_CURRENT))


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
def select_products(state: ProductState) -> tuple[Product, ...]:
    return state.products


def select_product_by_barcode(state: ProductState, barcode: str) -> Optional[Product]:
    for product in state.products:
        if product.barcode == barcode:
            return product
    return None


def select_product_count(state: ProductState) -> int:
    return len(state.products)


def select_filtered_products(state: ProductState) -> tuple[Product, ...]:
    return state.filtered_products


def select_sorted_product_names(state: ProductState) -> tuple[str, ...]:
    return state.sorted_product_names


def select_current_product(state: ProductState) -> Optional[Product]:
    return state.current_product


def select_loading(state: ProductState) -> bool:
    return state.loading


def select_error(state: ProductState) -> Optional[str]:
    return state.error
