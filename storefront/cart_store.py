# storefront/cart_store.py
"""
Persisted cart store: the only code that reads or writes the cart key.

Reads never raise. Writes that fail are logged and dropped; the caller's
in-memory cart stays authoritative for the rest of the session.
"""
import json
from typing import Any, List, Sequence

from pydantic import ValidationError

from storefront.logging import get_logger
from storefront.models import CartLineItem, Product

logger = get_logger(__name__)

STORAGE_KEY = "poc-cart"


class CartStore:
    def __init__(self, storage: Any, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def read_cart(self) -> List[CartLineItem]:
        try:
            raw = self.storage.get_item(self.key)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read cart, treating as empty: %s", e)
            return []
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.warning("Stored cart is not valid JSON, resetting: %s", e)
            return []
        if not isinstance(parsed, list):
            logger.warning("Stored cart is not a list (%s), resetting", type(parsed).__name__)
            return []

        items: List[CartLineItem] = []
        seen = set()
        for entry in parsed:
            try:
                item = CartLineItem.model_validate(entry)
            except ValidationError:
                logger.warning("Dropping malformed cart entry: %r", entry)
                continue
            if item.id in seen:
                logger.warning("Dropping duplicate cart entry for %s", item.id)
                continue
            seen.add(item.id)
            items.append(item)
        return items

    def write_cart(self, items: Sequence[CartLineItem]) -> None:
        payload = json.dumps([item.model_dump() for item in items], ensure_ascii=False)
        try:
            self.storage.set_item(self.key, payload)
        except OSError as e:
            logger.warning("Failed to persist cart (%d items): %s", len(items), e)

    def add_item(self, product: Product, quantity: int) -> List[CartLineItem]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"quantity must be a positive integer, got {quantity!r}")

        cart = self.read_cart()
        for index, item in enumerate(cart):
            if item.id == product.id:
                cart[index] = item.model_copy(update={"quantity": item.quantity + quantity})
                break
        else:
            cart.append(CartLineItem(id=product.id, name=product.name, price=product.price, quantity=quantity))

        self.write_cart(cart)
        return cart

    def update_quantity(self, product_id: str, quantity: int) -> List[CartLineItem]:
        cart = self.read_cart()
        if not any(item.id == product_id for item in cart):
            return cart

        if quantity <= 0:
            cart = [item for item in cart if item.id != product_id]
        else:
            cart = [
                item.model_copy(update={"quantity": quantity}) if item.id == product_id else item
                for item in cart
            ]
        self.write_cart(cart)
        return cart

    def clear_cart(self) -> None:
        self.write_cart([])
