import logging

import pydantic
import pytest

from catalog.adapter import calculate_final_price, to_backend, to_frontend, to_frontend_list
from catalog.errors import AdaptationError, ValidationError
from catalog.models import Product, WireProduct


def test_final_price_rounds_half_up():
    assert calculate_final_price(2499, 7) == 2324
    assert calculate_final_price(1000, 0) == 1000
    assert calculate_final_price(0, 50) == 0
    assert calculate_final_price(3548, 7) == 3300
    # 25 * 0.5 = 12.5 -> 13, not banker's 12
    assert calculate_final_price(25, 50) == 13
    assert calculate_final_price(890, 100) == 0


def test_to_frontend_maps_item_and_availability(wire_records):
    first, second = wire_records

    product = to_frontend(first)
    assert product.name == first["item"]
    assert product.barcode == "74001234"
    assert product.category == "Test Category"
    assert product.price == 1999
    assert product.discount == 10
    assert product.available is True
    assert to_frontend(second).available is False


def test_to_frontend_accepts_wire_model(wire_records):
    product = to_frontend(WireProduct(**wire_records[0]))
    assert product == to_frontend(wire_records[0])


def test_to_frontend_defaults_missing_fields():
    product = to_frontend({"barcode": "1", "item": None, "price": None})
    assert product.name == ""
    assert product.category == ""
    assert product.price == 0
    assert product.discount == 0
    assert product.available is False


def test_to_frontend_recomputes_final_price_ignoring_wire_value(wire_records):
    record = dict(wire_records[0], finalPrice=1)
    product = to_frontend(record)
    assert product.final_price == calculate_final_price(1999, 10) == 1799


def test_to_frontend_rejects_null_and_garbage():
    with pytest.raises(AdaptationError):
        to_frontend(None)
    with pytest.raises(AdaptationError):
        to_frontend("74001234")
    with pytest.raises(AdaptationError):
        to_frontend({"barcode": "1", "item": "Bad", "price": -5})
    with pytest.raises(AdaptationError):
        to_frontend({"barcode": "1", "item": "Bad", "discount": 120})


def test_to_backend_maps_name_and_availability(products):
    wire = to_backend(products[0])
    assert wire.item == products[0].name
    assert wire.available == 1
    assert to_backend(products[1]).available == 0
    assert wire.model_dump() == {
        "barcode": "74001234",
        "item": "Test Product 1",
        "category": "Test Category",
        "price": 1999,
        "discount": 10,
        "available": 1,
    }


@pytest.mark.parametrize(
    "product, message",
    [
        (None, "Cannot convert undefined or null product to backend format"),
        (Product(barcode="", name="Nameless barcode"), "Product barcode is required"),
        (Product(barcode="74001234", name=""), "Product name is required"),
    ],
)
def test_to_backend_requires_barcode_and_name(product, message):
    with pytest.raises(ValidationError) as excinfo:
        to_backend(product)
    assert str(excinfo.value) == message


def test_adaptation_is_idempotent(wire_records):
    for record in wire_records:
        once = to_frontend(record)
        twice = to_frontend(to_backend(once))
        assert twice == once
        assert twice.barcode == record["barcode"]


def test_barcode_round_trips_exactly():
    record = {"barcode": "  0042-ÄB ", "item": "Odd", "price": 1, "discount": 0, "available": 1}
    assert to_backend(to_frontend(record)).barcode == record["barcode"]


@pytest.mark.parametrize("value", [None, {}, {"item": "x"}, "products", 42])
def test_to_frontend_list_rejects_non_arrays(value, caplog):
    with caplog.at_level(logging.WARNING, logger="catalog.adapter"):
        assert to_frontend_list(value) == []
    assert "not an array" in caplog.text


def test_to_frontend_list_drops_nulls_and_keeps_order(wire_records):
    first, second = wire_records
    result = to_frontend_list([None, first, None, second])
    assert result == [to_frontend(first), to_frontend(second)]


def test_to_frontend_list_skips_single_bad_entry(wire_records):
    first, second = wire_records
    result = to_frontend_list([first, {"barcode": "x", "price": -1}, "junk", second])
    assert [p.barcode for p in result] == ["74001234", "74005678"]


def test_products_are_frozen(products):
    with pytest.raises(pydantic.ValidationError):
        products[0].price = 1
