"""Reference Flask API for the product catalog.

- Products are persisted to a local JSON list store with rotating backups.
- The wire format uses ``item`` for the product name and ``available`` as
  0/1; records are validated with pydantic before they are stored.
- Mutating routes accept anonymous callers unless ``REQUIRE_AUTH`` is set, in
  which case they require a bearer token signed with ``SECRET_KEY``.
"""

from __future__ import annotations

import logging
from functools import wraps
from pathlib import Path
from typing import Literal

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_talisman import Talisman
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from commonlib.config import load_api_config
from commonlib.log import configure_logging
from commonlib.network import canonical_origin
from commonlib.storage import StoreError
from commonlib.tokens import verify_token

from catalog_api.services.product_store import DuplicateProductError, ProductCatalog

BASE_DIR = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
CONFIG = load_api_config(BASE_DIR)

PRODUCT_FILE = CONFIG.product_file
REQUIRE_AUTH = CONFIG.require_auth
SECRET_KEY = CONFIG.secret_key

_PRODUCT_CATALOG: ProductCatalog | None = None

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------
app = Flask(__name__)
app.config.update(SECRET_KEY=SECRET_KEY)

CORS(app, resources={r"/*": {"origins": list(CONFIG.allowed_origins)}})

# Security headers via Flask-Talisman; HTTPS is left to a fronting proxy by default
Talisman(app, content_security_policy=None, force_https=CONFIG.force_tls, frame_options="DENY")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class WireProductModel(BaseModel):
    """Schema for validating product payloads."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    barcode: str = Field(..., min_length=1)
    item: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    discount: int = Field(..., ge=0, le=100)
    available: Literal[0, 1]


FIELD_MESSAGES = {
    "barcode": "Product barcode is required",
    "item": "Product name is required",
    "category": "Product category is required",
    "price": "Product price must be a non-negative value",
    "discount": "Product discount must be between 0 and 100",
    "available": "Product availability must be 0 (unavailable) or 1 (available)",
}


def describe_validation_error(err: ValidationError) -> str:
    first = err.errors()[0]
    field = first["loc"][0] if first["loc"] else ""
    return FIELD_MESSAGES.get(str(field), first["msg"])


def product_catalog() -> ProductCatalog:
    global _PRODUCT_CATALOG
    if _PRODUCT_CATALOG is None or Path(_PRODUCT_CATALOG.path) != Path(PRODUCT_FILE):
        _PRODUCT_CATALOG = ProductCatalog(PRODUCT_FILE, backups=CONFIG.product_backups)
    return _PRODUCT_CATALOG


def _validated_payload(barcode: str | None = None) -> WireProductModel:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Invalid product data")
    if barcode is not None:
        payload = dict(payload, barcode=barcode)
    return WireProductModel(**payload)


def _not_found(barcode: str):
    return jsonify({"error": f"Product not found with barcode: {barcode}"}), 404


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
def bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def token_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if REQUIRE_AUTH and verify_token(SECRET_KEY, bearer_token(), CONFIG.token_max_age) is None:
            return jsonify({"error": "Authentication required"}), 401
        return fn(*args, **kwargs)

    return wrapper


# ---------------------------------------------------------------------------
# Routes: products
# ---------------------------------------------------------------------------
@app.route("/products", methods=["GET"])
def get_products():
    return jsonify(product_catalog().all())


@app.route("/products/<barcode>", methods=["GET"])
def get_product(barcode):
    item = product_catalog().get(barcode)
    if item is None:
        return _not_found(barcode)
    return jsonify(item)


@app.route("/products", methods=["POST"])
@token_required
def create_product():
    try:
        product = _validated_payload()
    except ValidationError as err:
        return jsonify({"error": describe_validation_error(err)}), 400
    except ValueError as err:
        return jsonify({"error": str(err)}), 400
    try:
        record = product_catalog().create(product.model_dump())
    except DuplicateProductError as err:
        return jsonify({"error": str(err)}), 400
    except StoreError as exc:
        return jsonify({"error": f"Error creating product: {exc}"}), 500
    logger.info("Created product %s", record["barcode"])
    return jsonify(record), 201


@app.route("/products/<barcode>", methods=["PUT"])
@token_required
def update_product(barcode):
    try:
        product = _validated_payload(barcode)
    except ValidationError as err:
        return jsonify({"error": describe_validation_error(err)}), 400
    except ValueError as err:
        return jsonify({"error": str(err)}), 400
    try:
        updated = product_catalog().update(barcode, product.model_dump())
    except StoreError as exc:
        return jsonify({"error": f"Error updating product: {exc}"}), 500
    if updated is None:
        return _not_found(barcode)
    return jsonify(updated)


@app.route("/products/<barcode>", methods=["DELETE"])
@token_required
def delete_product(barcode):
    try:
        deleted = product_catalog().delete(barcode)
    except StoreError as exc:
        return jsonify({"error": f"Error deleting product: {exc}"}), 500
    if not deleted:
        return _not_found(barcode)
    logger.info("Deleted product %s", barcode)
    return "", 200


# ---------------------------------------------------------------------------
# Routes: price views
# ---------------------------------------------------------------------------
@app.route("/filter/price/<initial_range>/<final_range>", methods=["GET"])
def filter_by_price(initial_range, final_range):
    try:
        lowest = int(initial_range)
        highest = int(final_range)
    except ValueError:
        return jsonify({"error": "Invalid price range parameters"}), 400
    if lowest < 0 or highest < 0 or lowest > highest:
        return jsonify({"error": "Invalid price range"}), 400
    return jsonify(product_catalog().filter_by_price_range(lowest, highest))


@app.route("/sort/price", methods=["GET"])
def sort_by_price():
    return jsonify(product_catalog().sorted_names_by_price())


# ---------------------------------------------------------------------------
# Security headers
# ---------------------------------------------------------------------------
@app.after_request
def secure_headers(resp):
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["X-Frame-Options"] = "DENY"
    return resp


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    configure_logging(CONFIG.log_level)
    scheme = "https" if CONFIG.force_tls else "http"
    logger.info("Serving product catalog from %s", PRODUCT_FILE)
    logger.info("Listening on %s", canonical_origin(CONFIG.host, CONFIG.port, scheme))
    app.run(host=CONFIG.host, port=CONFIG.port)


if __name__ == "__main__":
    main()
