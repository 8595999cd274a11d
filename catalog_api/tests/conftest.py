import pytest

from catalog_api import app as flask_app


@pytest.fixture(autouse=True)
def configure_test_env(tmp_path, monkeypatch):
    flask_app.app.config.update(TESTING=True)
    product_file = tmp_path / "products.json"
    monkeypatch.setattr(flask_app, "PRODUCT_FILE", product_file)
    monkeypatch.setattr(flask_app, "_PRODUCT_CATALOG", None)
    monkeypatch.setattr(flask_app, "REQUIRE_AUTH", False)
    monkeypatch.setattr(flask_app, "SECRET_KEY", "test-secret")
    yield product_file


@pytest.fixture
def client():
    return flask_app.app.test_client()


@pytest.fixture
def ball_gown():
    return {
        "barcode": "74001755",
        "item": "Ball Gown",
        "category": "Full Body Outfits",
        "price": 3548,
        "discount": 7,
        "available": 1,
    }
