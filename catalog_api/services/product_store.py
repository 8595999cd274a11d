"""Helpers for managing the product catalog JSON store."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

from commonlib.storage import ListStore


class DuplicateProductError(ValueError):
    """Raised when creating a product whose barcode is already stored."""


@dataclass(slots=True)
class ProductCatalog:
    """High-level operations for the product JSON store, keyed by barcode."""

    path: str | Path
    backups: int = 2
    _store: ListStore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._store = ListStore(self.path, backups=self.backups, recovery_label="product catalog")

    # ------------------------------------------------------------------
    # Basic CRUD operations
    # ------------------------------------------------------------------
    def all(self) -> list[dict]:
        return self._store.load()

    def get(self, barcode: str) -> Optional[dict]:
        for item in self._store.load():
            if item.get("barcode") == barcode:
                return item
        return None

    def create(self, payload: Dict) -> dict:
        record = dict(payload)

        def mutator(items: list[dict]) -> None:
            if any(item.get("barcode") == record["barcode"] for item in items):
                raise DuplicateProductError(f"Product with barcode {record['barcode']} already exists")
            items.append(record)

        self._store.mutate(mutator)
        return record

    def update(self, barcode: str, payload: Dict) -> Optional[dict]:
        record = dict(payload, barcode=barcode)
        updated: Optional[dict] = None

        def mutator(items: list[dict]) -> None:
            nonlocal updated
            for index, item in enumerate(items):
                if item.get("barcode") == barcode:
                    items[index] = record
                    updated = record
                    break

        self._store.mutate(mutator)
        return updated

    def delete(self, barcode: str) -> bool:
        removed = False

        def mutator(items: list[dict]) -> Iterable[dict] | None:
            nonlocal removed
            filtered = [item for item in items if item.get("barcode") != barcode]
            removed = len(filtered) != len(items)
            return filtered

        self._store.mutate(mutator)
        return removed

    def replace_all(self, items: Iterable[Dict]) -> list[dict]:
        return self._store.save(items)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def filter_by_price_range(self, lowest: int, highest: int) -> list[dict]:
        return [item for item in self._store.load() if lowest <= item.get("price", 0) <= highest]

    def sorted_names_by_price(self) -> list[str]:
        # sorted() is stable, so equal prices keep their stored order.
        items = sorted(self._store.load(), key=lambda item: item.get("price", 0))
        return [item.get("item", "") for item in items]
