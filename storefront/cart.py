# storefront/cart.py
"""
Cart reconciliation engine.

Mutations write the full cart through ``CartStore`` and then reload
``state.cart`` from the store. Each returns True when the cart changed;
the owning page session publishes ``cart:updated`` in that case.
"""
from typing import List, Optional, Sequence

from storefront.cart_store import CartStore
from storefront.logging import get_logger
from storefront.models import AppState, CartLineItem, Product

logger = get_logger(__name__)


def sync_from_store(state: AppState, store: CartStore) -> List[CartLineItem]:
    state.cart = store.read_cart()
    return state.cart


def _refresh(state: AppState, store: CartStore, expected: Sequence[CartLineItem]) -> None:
    """Reload ``state.cart`` from the store, keeping ``expected`` if the write did not land."""
    stored = store.read_cart()
    if stored != list(expected):
        logger.warning("Cart store did not accept the last write, keeping in-memory cart")
        state.cart = list(expected)
    else:
        state.cart = stored


def _commit(state: AppState, store: CartStore, cart: Sequence[CartLineItem]) -> None:
    store.write_cart(cart)
    _refresh(state, store, cart)


def _merge(items: Sequence[CartLineItem], product: Product, quantity: int) -> List[CartLineItem]:
    if any(i.id == product.id for i in items):
        return [
            i.model_copy(update={"quantity": i.quantity + quantity}) if i.id == product.id else i
            for i in items
        ]
    return list(items) + [CartLineItem(id=product.id, name=product.name, price=product.price, quantity=quantity)]


def _find(state: AppState, product_id: str) -> Optional[CartLineItem]:
    return next((item for item in state.cart if item.id == product_id), None)


def add_to_cart(state: AppState, store: CartStore, product_id: str, quantity: int = 1) -> bool:
    product = next((p for p in state.products if p.id == product_id), None)
    if product is None:
        logger.debug("add_to_cart ignored, unknown product %s", product_id)
        return False
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        logger.debug("add_to_cart ignored, bad quantity %r", quantity)
        return False

    return add_product(state, store, product, quantity)


def add_product(state: AppState, store: CartStore, product: Product, quantity: int) -> bool:
    """Add a product the caller already holds (the detail page has no catalog loaded)."""
    merged = store.add_item(product, quantity)
    if store.read_cart() != merged:
        # Write did not land: the session cart stays authoritative
        logger.warning("Cart store did not accept the last write, keeping in-memory cart")
        merged = _merge(state.cart, product, quantity)
    state.cart = merged
    return True


def increment(state: AppState, store: CartStore, product_id: str) -> bool:
    if _find(state, product_id) is None:
        return False
    cart = [
        i.model_copy(update={"quantity": i.quantity + 1}) if i.id == product_id else i
        for i in state.cart
    ]
    _commit(state, store, cart)
    return True


def decrement(state: AppState, store: CartStore, product_id: str) -> bool:
    item = _find(state, product_id)
    if item is None:
        return False
    if item.quantity - 1 <= 0:
        return remove_item(state, store, product_id)
    cart = [
        i.model_copy(update={"quantity": i.quantity - 1}) if i.id == product_id else i
        for i in state.cart
    ]
    _commit(state, store, cart)
    return True


def remove_item(state: AppState, store: CartStore, product_id: str) -> bool:
    if _find(state, product_id) is None:
        return False
    _commit(state, store, [i for i in state.cart if i.id != product_id])
    return True


def cart_total(items: Sequence[CartLineItem]) -> int:
    return sum(item.price * item.quantity for item in items)


def cart_item_count(items: Sequence[CartLineItem]) -> int:
    return sum(item.quantity for item in items)
