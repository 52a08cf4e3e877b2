# backend/main.py
import json
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from backend.catalog import ORDERS, ProductCatalog
from backend.schemas import OrderIn
from storefront.config import get_settings
from storefront.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(title="drip-store (mock catalog & orders)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

catalog = ProductCatalog(get_settings().products_path)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products")
async def list_products(q: Optional[str] = Query(None)):
    items = catalog.search(q) if q else catalog.items()
    return {"items": items}


@app.get("/api/products/{product_id:path}")
async def get_product(product_id: str):
    product = catalog.get(product_id)
    if not product:
        return _message(404, "product not found")
    return product


# ---------------------------
# Orders
# ---------------------------
@app.post("/api/orders", status_code=201)
async def create_order(request: Request):
    try:
        body = json.loads(await request.body() or b"{}")
    except ValueError as e:
        logger.warning("Unparseable order body: %s", e)
        return _message(400, "could not parse order")

    if not isinstance(body, dict):
        return _message(400, "could not parse order")

    cart = body.get("cart")
    if not isinstance(cart, list) or not cart:
        return _message(422, "cart is empty")

    try:
        order_in = OrderIn.model_validate(body)
    except ValidationError as e:
        logger.info("Rejected malformed order: %s", e)
        return _message(400, "invalid cart contents")

    if any(catalog.get(line.id) is None for line in order_in.cart):
        return _message(400, "invalid cart contents")

    order = {
        "id": f"order_{int(time.time() * 1000)}",
        "cart": [line.model_dump() for line in order_in.cart],
        "customer": order_in.customer,
        "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    ORDERS.append(order)
    logger.info("Created mock order %s (%d lines)", order["id"], len(order["cart"]))
    return {"message": "mock order created", "order": order}


# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/api/reset")
async def reset_all():
    ORDERS.clear()
    return {"status": "reset"}


@app.get("/api/debug/orders")
async def debug_all_orders():
    return {"orders": ORDERS}


@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def unknown_api_path(path: str):
    return _message(404, "unknown API path")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.main:app", host="127.0.0.1", port=3000)
