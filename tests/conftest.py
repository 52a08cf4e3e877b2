"""Shared fixtures for storefront tests."""
import pytest

from storefront.cart_store import CartStore
from storefront.config import Settings
from storefront.errors import CatalogUnavailableError, ProductNotFoundError
from storefront.events import EventBus
from storefront.models import OrderReceipt, Product
from storefront.storage import MemoryStorage


class FakeCatalogClient:
    """Stands in for StoreClient's async API and records what was called."""

    def __init__(self, products=None, fail=False):
        self.products = list(products or [])
        self.fail = fail
        self.calls = []
        self.orders = []

    async def list_products_async(self, q=None):
        self.calls.append("list")
        if self.fail:
            raise CatalogUnavailableError("catalog down", 503)
        return list(self.products)

    async def get_product_async(self, product_id):
        self.calls.append("get")
        if self.fail:
            raise CatalogUnavailableError("catalog down", 503)
        for p in self.products:
            if p.id == product_id:
                return p
        raise ProductNotFoundError(product_id)

    async def create_order_async(self, cart, customer):
        self.calls.append("order")
        if self.fail:
            raise CatalogUnavailableError("order endpoint down", 503)
        lines = [{"id": item.id, "quantity": item.quantity} for item in cart]
        self.orders.append(lines)
        return OrderReceipt.model_validate({
            "message": "mock order created",
            "order": {
                "id": f"order_{len(self.orders)}",
                "cart": lines,
                "customer": customer.model_dump(),
                "createdAt": "2024-05-01T10:00:00Z",
            },
        })


class QuotaExceededStorage(MemoryStorage):
    """Reads work, writes fail like a full browser storage quota."""

    def set_item(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def make_product():
    def _make(i, category_id="A", category="咖啡豆", **overrides):
        data = {
            "id": f"p{i}",
            "name": f"Product {i}",
            "description": f"description {i}",
            "price": 100 * i,
            "category": category,
            "categoryId": category_id,
            "image": f"/images/p{i}.svg",
        }
        data.update(overrides)
        return Product.model_validate(data)
    return _make


@pytest.fixture
def products(make_product):
    """13 products: 6 beans (A), 5 gear (B), 2 without a category."""
    items = [make_product(i) for i in range(1, 7)]
    items += [make_product(i, category_id="B", category="器具") for i in range(7, 12)]
    items += [make_product(i, category_id="", category="") for i in range(12, 14)]
    return items


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return CartStore(storage)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def settings():
    return Settings(api_url="http://test", storage_dir="unused", page_size=12, locale="en", timeout=5, products_path=None)


@pytest.fixture
def fake_client(products):
    return FakeCatalogClient(products)


@pytest.fixture
def broken_store():
    return CartStore(QuotaExceededStorage())
