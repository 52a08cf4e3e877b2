# sdk/dripclient.py
import json
from urllib.parse import quote
from typing import Any, Dict, List, Optional, Sequence

import httpx
import requests
from pydantic import ValidationError
from rich import print

from storefront.errors import CatalogUnavailableError, OrderRejectedError, ProductNotFoundError
from storefront.logging import get_logger
from storefront.models import CartLineItem, CustomerInfo, OrderReceipt, Product

logger = get_logger(__name__)


# ---------------------------
# Payload parsing (shared by sync and async calls)
# ---------------------------
def parse_product_list(data: Any) -> List[Product]:
    """Accept ``{"items": [...]}`` or a bare list; drop entries that fail validation."""
    if isinstance(data, list):
        raw_items = data
    elif isinstance(data, dict) and isinstance(data.get("items"), list):
        raw_items = data["items"]
    else:
        logger.warning("Unexpected product list payload: %s", type(data).__name__)
        return []

    products: List[Product] = []
    seen = set()
    for raw in raw_items:
        try:
            product = Product.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping malformed product %r: %s", raw.get("id") if isinstance(raw, dict) else raw, e)
            continue
        if product.id in seen:
            logger.warning("Skipping duplicate product id %s", product.id)
            continue
        seen.add(product.id)
        products.append(product)
    return products


def parse_product(data: Any) -> Product:
    try:
        return Product.model_validate(data)
    except ValidationError as e:
        raise CatalogUnavailableError(f"malformed product payload: {e}") from e


def build_order_payload(cart: Sequence[CartLineItem], customer: CustomerInfo) -> Dict[str, Any]:
    return {
        "cart": [{"id": item.id, "quantity": item.quantity} for item in cart],
        "customer": customer.model_dump(),
    }


def _error_message(status_code: int, body: Any, fallback: str) -> str:
    if isinstance(body, dict) and body.get("message"):
        return f"HTTP {status_code}: {body['message']}"
    return f"HTTP {status_code}: {fallback}"


def _json_or_none(resp: Any) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


class StoreClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3000",
        timeout: float = 10,
        session: Optional[Any] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # Anything with requests' get/post signature works (tests pass a TestClient)
        self.session = session if session is not None else requests.Session()
        self.transport = transport

    # ---------------------------
    # Response handling
    # ---------------------------
    def _products_response(self, resp: Any) -> List[Product]:
        if resp.status_code != 200:
            body = _json_or_none(resp)
            raise CatalogUnavailableError(_error_message(resp.status_code, body, "product list failed"), resp.status_code)
        data = _json_or_none(resp)
        if data is None:
            raise CatalogUnavailableError("product list is not JSON", resp.status_code)
        return parse_product_list(data)

    def _product_response(self, product_id: str, resp: Any) -> Product:
        if resp.status_code == 404:
            raise ProductNotFoundError(product_id)
        if resp.status_code != 200:
            body = _json_or_none(resp)
            raise CatalogUnavailableError(_error_message(resp.status_code, body, "product lookup failed"), resp.status_code)
        return parse_product(_json_or_none(resp))

    def _order_response(self, resp: Any) -> OrderReceipt:
        body = _json_or_none(resp)
        if 400 <= resp.status_code < 500:
            raise OrderRejectedError(_error_message(resp.status_code, body, "order rejected"), resp.status_code)
        if resp.status_code not in (200, 201):
            raise CatalogUnavailableError(_error_message(resp.status_code, body, "order failed"), resp.status_code)
        try:
            return OrderReceipt.model_validate(body)
        except ValidationError as e:
            raise CatalogUnavailableError(f"malformed order response: {e}", resp.status_code) from e

    # ---------------------------
    # Sync API (requests)
    # ---------------------------
    def list_products(self, q: Optional[str] = None) -> List[Product]:
        params = {"q": q} if q else None
        try:
            r = self.session.get(f"{self.base_url}/api/products", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Product list request failed: %s", e)
            raise CatalogUnavailableError(str(e)) from e
        return self._products_response(r)

    def get_product(self, product_id: str) -> Product:
        try:
            r = self.session.get(f"{self.base_url}/api/products/{quote(product_id, safe='')}", timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Product %s request failed: %s", product_id, e)
            raise CatalogUnavailableError(str(e)) from e
        return self._product_response(product_id, r)

    def create_order(self, cart: Sequence[CartLineItem], customer: CustomerInfo) -> OrderReceipt:
        payload = build_order_payload(cart, customer)
        try:
            r = self.session.post(f"{self.base_url}/api/orders", json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Order request failed: %s", e)
            raise CatalogUnavailableError(str(e)) from e
        return self._order_response(r)

    def reset(self) -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/api/reset", timeout=self.timeout)
        return r.json()

    # ---------------------------
    # Async API (httpx)
    # ---------------------------
    def _async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def list_products_async(self, q: Optional[str] = None) -> List[Product]:
        params = {"q": q} if q else None
        try:
            async with self._async_client() as client:
                r = await client.get("/api/products", params=params)
        except httpx.HTTPError as e:
            logger.error("Product list request failed: %s", e)
            raise CatalogUnavailableError(str(e)) from e
        return self._products_response(r)

    async def get_product_async(self, product_id: str) -> Product:
        try:
            async with self._async_client() as client:
                r = await client.get(f"/api/products/{quote(product_id, safe='')}")
        except httpx.HTTPError as e:
            logger.error("Product %s request failed: %s", product_id, e)
            raise CatalogUnavailableError(str(e)) from e
        return self._product_response(product_id, r)

    async def create_order_async(self, cart: Sequence[CartLineItem], customer: CustomerInfo) -> OrderReceipt:
        payload = build_order_payload(cart, customer)
        try:
            async with self._async_client() as client:
                r = await client.post("/api/orders", json=payload)
        except httpx.HTTPError as e:
            logger.error("Order request failed: %s", e)
            raise CatalogUnavailableError(str(e)) from e
        return self._order_response(r)


if __name__ == "__main__":
    import argparse

    from storefront.config import get_settings

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Drip & Brew store client")
    parser.add_argument("--base-url", default=settings.api_url, help="Backend base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List all products")
    lp.add_argument("--q", help="Server-side keyword filter")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    po = subparsers.add_parser("place-order", help="Submit a mock order")
    po.add_argument("--item", action="append", required=True, metavar="ID:QTY", help="Cart line, repeatable")
    po.add_argument("--name", default="POC 測試用戶", help="Customer name")
    po.add_argument("--email", default="customer@example.com", help="Customer email")

    args = parser.parse_args()
    c = StoreClient(base_url=args.base_url, timeout=settings.timeout)

    if args.command == "list-products":
        print([p.model_dump(by_alias=True) for p in c.list_products(args.q)])

    elif args.command == "get-product":
        print(c.get_product(args.product_id).model_dump(by_alias=True))

    elif args.command == "place-order":
        lines = []
        for raw in args.item:
            pid, _, qty = raw.partition(":")
            lines.append(CartLineItem(id=pid, name=pid, price=0, quantity=int(qty or 1)))
        receipt = c.create_order(lines, CustomerInfo(name=args.name, email=args.email))
        print(json.dumps(receipt.model_dump(by_alias=True), ensure_ascii=False, indent=2))
