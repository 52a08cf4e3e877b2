# storefront/orders.py
from typing import Any, Iterable, Optional, Sequence

from storefront.cart_store import CartStore
from storefront.errors import EmptyCartError, InvalidCartItemError
from storefront.events import CART_UPDATED, EventBus
from storefront.logging import get_logger
from storefront.models import CartLineItem, CustomerInfo, OrderReceipt, Product

logger = get_logger(__name__)


def validate_cart(cart: Sequence[Any], catalog: Iterable[Product]) -> None:
    """
    Reject a cart before it reaches the network.

    Lines may be ``CartLineItem`` objects or raw ``{"id", "quantity"}``
    dicts (as read from an untrusted source).
    """
    if not cart:
        raise EmptyCartError()

    known_ids = {p.id for p in catalog}
    for line in cart:
        if isinstance(line, CartLineItem):
            product_id, quantity = line.id, line.quantity
        elif isinstance(line, dict):
            product_id, quantity = line.get("id"), line.get("quantity")
        else:
            raise InvalidCartItemError(None, "malformed line")

        if not isinstance(product_id, str) or product_id not in known_ids:
            raise InvalidCartItemError(product_id, "unknown product")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidCartItemError(product_id, f"bad quantity {quantity!r}")


async def submit_order(
    cart: Sequence[Any],
    customer: CustomerInfo,
    catalog: Iterable[Product],
    client: Any,
    store: CartStore,
    bus: Optional[EventBus] = None,
    sender: Any = None,
) -> OrderReceipt:
    """
    Validate, submit and, only on success, clear the persisted cart.

    Failures propagate to the caller with the cart untouched; nothing is retried.
    """
    validate_cart(cart, catalog)
    lines = [line if isinstance(line, CartLineItem) else CartLineItem.model_validate({"price": 0, **line}) for line in cart]

    receipt = await client.create_order_async(lines, customer)
    logger.info("Order %s created with %d lines", receipt.order.id, len(lines))

    store.clear_cart()
    if bus is not None:
        bus.publish(CART_UPDATED, sender=sender)
    return receipt
