# storefront/session.py
"""
Page sessions: one per independently rendered page.

A ``ListingPage`` (catalog + cart drawer) and a ``DetailPage`` opened in
the same browsing session share a ``CartStore`` and an ``EventBus``.
Each keeps its own ``AppState`` and re-reads the store whenever the
other publishes ``cart:updated``.
"""
from typing import Any, List, Optional

from storefront import cart as cart_engine
from storefront import catalog as catalog_engine
from storefront import orders
from storefront.cart_store import CartStore
from storefront.config import Settings
from storefront.errors import CatalogUnavailableError, ProductNotFoundError
from storefront.events import CART_UPDATED, EventBus
from storefront.logging import get_logger
from storefront.messages import get_text
from storefront.models import (
    AppState,
    CartLineItem,
    Category,
    CustomerInfo,
    OrderReceipt,
    PageControl,
    PaginationState,
    Product,
)

logger = get_logger(__name__)


def parse_quantity(raw: Any) -> int:
    """Quantity from a form field: anything that is not a positive integer becomes 1."""
    if isinstance(raw, bool):
        return 1
    if isinstance(raw, int):
        return raw if raw > 0 else 1
    try:
        value = int(str(raw).strip(), 10)
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


class PageSession:
    def __init__(self, client: Any, store: CartStore, bus: EventBus, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.client = client
        self.store = store
        self.bus = bus
        self.state = AppState(pagination=PaginationState(page_size=self.settings.page_size))
        self._unsubscribe = bus.subscribe(CART_UPDATED, self.sync_cart, owner=self)
        self.sync_cart()

    def close(self) -> None:
        self._unsubscribe()

    def text(self, key: str, **kwargs) -> str:
        return get_text(key, self.settings.locale, **kwargs)

    # ---------------------------
    # Cart
    # ---------------------------
    def sync_cart(self) -> List[CartLineItem]:
        return cart_engine.sync_from_store(self.state, self.store)

    def _notify(self, changed: bool) -> bool:
        if changed:
            self.bus.publish(CART_UPDATED, sender=self)
        return changed

    def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        return self._notify(cart_engine.add_to_cart(self.state, self.store, product_id, quantity))

    def increment(self, product_id: str) -> bool:
        return self._notify(cart_engine.increment(self.state, self.store, product_id))

    def decrement(self, product_id: str) -> bool:
        return self._notify(cart_engine.decrement(self.state, self.store, product_id))

    def remove_item(self, product_id: str) -> bool:
        return self._notify(cart_engine.remove_item(self.state, self.store, product_id))

    @property
    def cart(self) -> List[CartLineItem]:
        return self.state.cart

    def cart_total(self) -> int:
        return cart_engine.cart_total(self.state.cart)

    def cart_item_count(self) -> int:
        return cart_engine.cart_item_count(self.state.cart)


class ListingPage(PageSession):
    """Catalog listing with keyword/category filters, pagination and the cart drawer."""

    async def load_catalog(self) -> bool:
        self.state.loading = True
        try:
            products = await self.client.list_products_async()
        except CatalogUnavailableError as e:
            logger.error("Catalog load failed: %s", e)
            self.state.error = self.text(e.message_key)
            return False
        finally:
            self.state.loading = False

        self.state.error = None
        catalog_engine.load_products(self.state, products)
        return True

    def set_keyword(self, text: Optional[str]) -> None:
        catalog_engine.set_keyword(self.state, text)

    def set_category(self, category_id: str) -> bool:
        return catalog_engine.set_category(self.state, category_id)

    def goto_page(self, page: Any) -> bool:
        return catalog_engine.goto_page(self.state, page)

    def visible_items(self) -> List[Product]:
        return catalog_engine.visible_items(self.state)

    def page_controls(self) -> List[PageControl]:
        return catalog_engine.page_controls(self.state)

    def category_options(self) -> List[Category]:
        return catalog_engine.category_options(self.state, self.settings.locale)

    async def checkout(self, customer: CustomerInfo) -> OrderReceipt:
        # Validate against the loaded catalog; fetch one if this page has none yet
        catalog = self.state.products
        if not catalog and self.state.cart:
            catalog = await self.client.list_products_async()

        receipt = await orders.submit_order(
            self.state.cart, customer, catalog, self.client, self.store, self.bus, sender=self
        )
        self.sync_cart()
        return receipt


class DetailPage(PageSession):
    """Single product view. Has no catalog loaded, so it adds to the cart through the store."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.product: Optional[Product] = None

    async def load_product(self, product_id: Optional[str]) -> Optional[Product]:
        self.product = None
        if not product_id:
            self.state.error = self.text("missing_product_id")
            return None

        self.state.loading = True
        try:
            self.product = await self.client.get_product_async(product_id)
        except ProductNotFoundError:
            self.state.error = self.text("product_not_found")
            return None
        except CatalogUnavailableError as e:
            logger.error("Product %s load failed: %s", product_id, e)
            self.state.error = self.text("product_unavailable")
            return None
        finally:
            self.state.loading = False

        self.state.error = None
        return self.product

    def add_selected(self, raw_quantity: Any = 1) -> Optional[str]:
        """Add the displayed product; returns the feedback line, or None if nothing is displayed."""
        if self.product is None:
            return None
        quantity = parse_quantity(raw_quantity)
        self._notify(cart_engine.add_product(self.state, self.store, self.product, quantity))
        return self.text("added_to_cart", name=self.product.name, quantity=quantity)
