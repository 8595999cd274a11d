import httpx
import pytest

from catalog.client import ApiResponse
from catalog.models import Product


@pytest.fixture
def wire_records():
    return [
        {
            "barcode": "74001234",
            "item": "Test Product 1",
            "category": "Test Category",
            "price": 1999,
            "discount": 10,
            "available": 1,
        },
        {
            "barcode": "74005678",
            "item": "Test Product 2",
            "category": "Test Category",
            "price": 2999,
            "discount": 5,
            "available": 0,
        },
    ]


@pytest.fixture
def products():
    return [
        Product(barcode="74001234", name="Test Product 1", category="Test Category", price=1999, discount=10, available=True),
        Product(barcode="74005678", name="Test Product 2", category="Test Category", price=2999, discount=5, available=False),
    ]


class FakeClient:
    """Stands in for ProductClient; each method returns or raises what was queued."""

    def __init__(self):
        self.results = {}
        self.calls = []

    def queue(self, method, result):
        self.results.setdefault(method, []).append(result)

    async def _answer(self, method, *args):
        self.calls.append((method, args))
        result = self.results[method].pop(0)
        if isinstance(result, BaseException):
            raise result
        if callable(result):
            result = await result(*args)
        return ApiResponse(200, result)

    async def list_products(self):
        return await self._answer("list_products")

    async def get_product(self, barcode):
        return await self._answer("get_product", barcode)

    async def create_product(self, product):
        return await self._answer("create_product", product)

    async def update_product(self, barcode, product):
        return await self._answer("update_product", barcode, product)

    async def delete_product(self, barcode):
        return await self._answer("delete_product", barcode)

    async def filter_by_price_range(self, min_price, max_price):
        return await self._answer("filter_by_price_range", min_price, max_price)

    async def sorted_names_by_price(self):
        return await self._answer("sorted_names_by_price")


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def api_app(tmp_path, monkeypatch):
    """The reference Flask API on a throwaway product file, seeded."""
    from catalog_api import app as flask_app
    from catalog_api.seed import seed_catalog

    flask_app.app.config.update(TESTING=True)
    product_file = tmp_path / "products.json"
    monkeypatch.setattr(flask_app, "PRODUCT_FILE", product_file)
    monkeypatch.setattr(flask_app, "_PRODUCT_CATALOG", None)
    monkeypatch.setattr(flask_app, "REQUIRE_AUTH", False)
    seed_catalog(product_file)
    return flask_app


@pytest.fixture
def flask_transport(api_app):
    """httpx transport that answers requests with the Flask test client."""
    test_client = api_app.app.test_client()

    def handler(request: httpx.Request) -> httpx.Response:
        headers = {
            key: value
            for key, value in request.headers.items()
            if key.lower() in {"authorization", "content-type", "accept"}
        }
        resp = test_client.open(
            request.url.raw_path.decode("ascii"),
            method=request.method,
            headers=headers,
            data=request.content,
        )
        return httpx.Response(
            resp.status_code,
            headers={"Content-Type": resp.headers.get("Content-Type", "text/plain")},
            content=resp.get_data(),
        )

    return httpx.MockTransport(handler)
