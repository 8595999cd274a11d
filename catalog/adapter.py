"""Translation between the wire and canonical product representations.

The backend names the display field ``item`` and encodes availability as
0/1; everything above this module only ever sees :class:`Product`. All
functions here are pure.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pydantic

from .errors import AdaptationError, ValidationError
from .models import Product, WireProduct, calculate_final_price

logger = logging.getLogger(__name__)

__all__ = ["calculate_final_price", "to_frontend", "to_backend", "to_frontend_list"]


def _fields(record: WireProduct | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(record, WireProduct):
        return record.model_dump()
    if isinstance(record, Mapping):
        return record
    raise AdaptationError(f"Expected a product object, got {type(record).__name__}")


def to_frontend(record: WireProduct | Mapping[str, Any] | None) -> Product:
    """Convert a backend record into a :class:`Product`.

    Absent or null strings become ``""`` and absent or null numbers ``0``.
    Any ``finalPrice`` on the record is ignored.
    """
    if record is None:
        raise AdaptationError("Backend product is undefined or null")

    fields = _fields(record)
    try:
        product = Product(
            barcode=fields.get("barcode") or "",
            name=fields.get("item") or "",
            category=fields.get("category") or "",
            price=fields.get("price") or 0,
            discount=fields.get("discount") or 0,
            available=fields.get("available") == 1,
        )
    except pydantic.ValidationError as exc:
        raise AdaptationError(f"Invalid backend product {fields.get('barcode')!r}: {exc}") from exc

    logger.debug("Converted backend product %r to %r", fields, product)
    return product


def to_backend(product: Product | None) -> WireProduct:
    """Convert a :class:`Product` into the backend's wire form."""
    if product is None:
        raise ValidationError("Cannot convert undefined or null product to backend format")
    if not product.barcode:
        raise ValidationError("Product barcode is required")
    if not product.name:
        raise ValidationError("Product name is required")

    wire = WireProduct(
        barcode=product.barcode,
        item=product.name,
        category=product.category,
        price=product.price,
        discount=product.discount,
        available=1 if product.available else 0,
    )
    logger.debug("Converted product %r to backend %r", product, wire)
    return wire


def to_frontend_list(records: Any) -> list[Product]:
    """Convert a decoded JSON array of backend records.

    Non-list input yields ``[]``. Null entries are skipped, and so is any entry
    that cannot be adapted; neither aborts the rest of the list.
    """
    if not isinstance(records, (list, tuple)):
        logger.warning("Backend product list is not an array: %r", records)
        return []

    products: list[Product] = []
    for record in records:
        if record is None:
            continue
        try:
            products.append(to_frontend(record))
        except AdaptationError as exc:
            logger.warning("Skipping backend product: %s", exc)
    return products
