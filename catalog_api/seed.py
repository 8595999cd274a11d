"""Populate the product store with the initial catalog.

Run before the first start of the API (or to reset a demo install)::

    catalog-seed --file catalog_api/products.json
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from commonlib.config import load_api_config
from commonlib.log import configure_logging

from catalog_api.services.product_store import ProductCatalog

logger = logging.getLogger(__name__)

SEED_PRODUCTS: tuple[dict, ...] = (
    {"barcode": "74001755", "item": "Ball Gown", "category": "Full Body Outfits", "price": 3548, "discount": 7, "available": 1},
    {"barcode": "74001756", "item": "Summer Dress", "category": "Full Body Outfits", "price": 2500, "discount": 5, "available": 1},
    {"barcode": "74001757", "item": "Winter Coat", "category": "Outerwear", "price": 4000, "discount": 10, "available": 1},
    {"barcode": "74002423", "item": "Silk Scarf", "category": "Accessories", "price": 890, "discount": 15, "available": 1},
    {"barcode": "74003512", "item": "Leather Jacket", "category": "Outerwear", "price": 2250, "discount": 5, "available": 1},
    {"barcode": "74004298", "item": "Cotton T-Shirt", "category": "Casual Wear", "price": 450, "discount": 0, "available": 1},
    {"barcode": "74005123", "item": "Denim Jeans", "category": "Casual Wear", "price": 1200, "discount": 10, "available": 0},
    {"barcode": "74006789", "item": "Wool Sweater", "category": "Winter Collection", "price": 1750, "discount": 12, "available": 0},
    {"barcode": "74007890", "item": "Designer Sunglasses", "category": "Accessories", "price": 1580, "discount": 8, "available": 0},
)


def seed_catalog(path: Path | str, *, reset: bool = True, backups: int = 2) -> list[dict]:
    """Write the seed products to ``path`` and return the resulting list.

    With ``reset`` the existing list is dropped first; otherwise only barcodes
    that are not stored yet are appended.
    """

    catalog = ProductCatalog(path, backups=backups)
    if reset:
        items = catalog.replace_all(SEED_PRODUCTS)
        logger.info("Reset product catalog at %s with %d products", path, len(items))
        return items

    existing = {item.get("barcode") for item in catalog.all()}
    added = [dict(product) for product in SEED_PRODUCTS if product["barcode"] not in existing]
    items = catalog.replace_all(catalog.all() + added)
    logger.info("Added %d seed products to %s", len(added), path)
    return items


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    config = load_api_config(Path(__file__).resolve().parent)
    parser = argparse.ArgumentParser(description="Seed the product catalog store")
    parser.add_argument(
        "--file",
        default=str(config.product_file),
        help=f"Product store to write (default: {config.product_file})",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing products and only add missing seed barcodes",
    )
    args = parser.parse_args(argv)

    configure_logging(config.log_level)
    logger.info("Starting product catalog initialization...")
    seed_catalog(args.file, reset=not args.keep, backups=config.product_backups)
    logger.info("Product catalog initialization complete!")


if __name__ == "__main__":
    main()
