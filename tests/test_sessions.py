# tests/test_sessions.py
import httpx
import pytest

from backend.main import app
from sdk.dripclient import StoreClient
from storefront.cart_store import CartStore
from storefront.errors import EmptyCartError
from storefront.events import CART_UPDATED, EventBus
from storefront.models import CustomerInfo
from storefront.session import DetailPage, ListingPage, parse_quantity
from storefront.storage import MemoryStorage

CUSTOMER = CustomerInfo(name="POC 測試用戶", email="customer@example.com")


@pytest.fixture
def pages(fake_client, store, bus, settings):
    listing = ListingPage(fake_client, store, bus, settings)
    detail = DetailPage(fake_client, store, bus, settings)
    yield listing, detail
    listing.close()
    detail.close()


@pytest.mark.asyncio
async def test_listing_loads_catalog(pages):
    listing, _ = pages
    assert await listing.load_catalog() is True
    assert listing.state.loading is False
    assert listing.state.error is None
    assert listing.state.pagination.total_pages == 2
    assert len(listing.visible_items()) == 12
    assert [c.id for c in listing.category_options()] == ["all", "A", "B", "uncategorized"]


@pytest.mark.asyncio
async def test_listing_load_failure_keeps_previous_products(fake_client, store, bus, settings):
    listing = ListingPage(fake_client, store, bus, settings)
    await listing.load_catalog()
    fake_client.fail = True

    assert await listing.load_catalog() is False
    assert listing.state.error == "Could not load products, please try again later."
    assert len(listing.state.products) == 13
    assert listing.state.loading is False


@pytest.mark.asyncio
async def test_detail_add_is_seen_by_listing(pages):
    listing, detail = pages
    await listing.load_catalog()
    listing.add_to_cart("p1")

    product = await detail.load_product("p2")
    assert product.id == "p2"
    assert detail.cart_item_count() == 1

    feedback = detail.add_selected("3")
    assert feedback == "Added Product 2 x3 to your cart"
    assert [(i.id, i.quantity) for i in listing.cart] == [("p1", 1), ("p2", 3)]
    assert listing.cart_item_count() == 4
    assert listing.cart_total() == 100 + 3 * 200


@pytest.mark.asyncio
async def test_listing_mutations_reach_detail(pages):
    listing, detail = pages
    await listing.load_catalog()

    listing.add_to_cart("p5", 2)
    assert [(i.id, i.quantity) for i in detail.cart] == [("p5", 2)]

    listing.decrement("p5")
    assert detail.cart[0].quantity == 1

    listing.remove_item("p5")
    assert detail.cart == []


def test_noop_mutation_does_not_notify(pages, bus):
    listing, _ = pages
    received = []
    bus.subscribe(CART_UPDATED, lambda: received.append(1))
    assert listing.increment("nothing") is False
    assert received == []


def test_sender_skips_its_own_notification(fake_client, broken_store, bus, settings, products):
    # With a failing store, re-reading would wipe the in-memory cart
    listing = ListingPage(fake_client, broken_store, bus, settings)
    listing.state.products = products
    listing.add_to_cart("p1")
    assert [(i.id, i.quantity) for i in listing.cart] == [("p1", 1)]


def test_closed_session_stops_listening(pages, bus):
    listing, detail = pages
    before = bus.listener_count(CART_UPDATED)
    detail.close()
    assert bus.listener_count(CART_UPDATED) == before - 1


@pytest.mark.asyncio
@pytest.mark.parametrize("product_id,message", [
    (None, "No product id given, please pick a product from the list."),
    ("", "No product id given, please pick a product from the list."),
    ("nope", "Product not found."),
])
async def test_detail_error_views(pages, product_id, message):
    _, detail = pages
    assert await detail.load_product(product_id) is None
    assert detail.state.error == message
    assert detail.add_selected(1) is None


@pytest.mark.asyncio
async def test_detail_transport_failure(fake_client, pages):
    _, detail = pages
    fake_client.fail = True
    assert await detail.load_product("p1") is None
    assert detail.state.error == "Could not load this product right now, please try again later."


@pytest.mark.parametrize("raw,expected", [("2", 2), (" 4 ", 4), ("0", 1), ("-3", 1), ("abc", 1), (None, 1), (5, 5), (True, 1)])
def test_parse_quantity(raw, expected):
    assert parse_quantity(raw) == expected


@pytest.mark.asyncio
async def test_checkout_clears_cart_everywhere(pages, fake_client):
    listing, detail = pages
    await listing.load_catalog()
    listing.add_to_cart("p1", 2)

    receipt = await listing.checkout(CUSTOMER)

    assert receipt.order.id == "order_1"
    assert listing.cart == []
    assert detail.cart == []


@pytest.mark.asyncio
async def test_checkout_with_empty_cart(pages, fake_client):
    listing, _ = pages
    await listing.load_catalog()
    with pytest.raises(EmptyCartError):
        await listing.checkout(CUSTOMER)
    assert "order" not in fake_client.calls


@pytest.mark.asyncio
async def test_checkout_without_loaded_catalog_fetches_snapshot(pages, fake_client, store, make_product):
    listing, _ = pages
    store.add_item(make_product(3), 1)
    listing.sync_cart()

    await listing.checkout(CUSTOMER)
    assert fake_client.calls == ["list", "order"]


# ---------------------------
# Against the real backend app
# ---------------------------
@pytest.fixture
def asgi_client():
    return StoreClient(base_url="http://test", transport=httpx.ASGITransport(app=app))


@pytest.mark.asyncio
async def test_end_to_end_against_backend(asgi_client, settings):
    store = CartStore(MemoryStorage())
    bus = EventBus()
    listing = ListingPage(asgi_client, store, bus, settings)
    detail = DetailPage(asgi_client, store, bus, settings)

    await listing.load_catalog()
    assert len(listing.state.products) == 13
    assert listing.state.pagination.total_pages == 2

    listing.set_category("B")
    gear = listing.visible_items()
    assert gear and all(p.category_id == "B" for p in gear)
    listing.add_to_cart(gear[0].id)

    await detail.load_product("bean-kenya-aa")
    detail.add_selected(2)
    assert listing.cart_item_count() == 3

    receipt = await listing.checkout(CUSTOMER)
    assert receipt.order.id.startswith("order_")
    assert {line.id for line in receipt.order.cart} == {gear[0].id, "bean-kenya-aa"}
    assert store.read_cart() == []
    assert detail.cart == []


@pytest.mark.asyncio
async def test_detail_adds_survive_failed_writes(fake_client, broken_store, bus, settings):
    detail = DetailPage(fake_client, broken_store, bus, settings)
    await detail.load_product("p1")
    detail.add_selected(1)
    await detail.load_product("p2")
    detail.add_selected("2")

    assert [(i.id, i.quantity) for i in detail.cart] == [("p1", 1), ("p2", 2)]
    detail.close()
