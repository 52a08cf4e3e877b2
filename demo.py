#!/usr/bin/env python
import asyncio
import tempfile

from sdk.dripclient import StoreClient
from storefront.cart_store import CartStore
from storefront.config import get_settings
from storefront.events import EventBus
from storefront.models import CustomerInfo
from storefront.session import DetailPage, ListingPage
from storefront.storage import FileStorage


async def main():
    settings = get_settings()
    c = StoreClient(base_url=settings.api_url, timeout=settings.timeout)

    # -----------------------------
    # Reset orders for demo
    # -----------------------------
    print("Resetting store...")
    print(c.reset())

    # -----------------------------
    # Two page contexts sharing one cart store
    # -----------------------------
    store = CartStore(FileStorage(tempfile.mkdtemp(prefix="drip-demo-")))
    bus = EventBus()
    listing = ListingPage(c, store, bus, settings)
    detail = DetailPage(c, store, bus, settings)

    print("\nLoading catalog...")
    await listing.load_catalog()
    pagination = listing.state.pagination
    print(f"{len(listing.state.products)} products, page {pagination.current_page}/{pagination.total_pages}")
    print([p.name for p in listing.visible_items()])

    # -----------------------------
    # Filter
    # -----------------------------
    print("\nSearching for '濾'...")
    listing.set_keyword("濾")
    print([p.name for p in listing.visible_items()])
    listing.set_keyword("")

    print("\nCategories:")
    for category in listing.category_options():
        print(f"  {category.display_label} ({category.count})")

    # -----------------------------
    # Cart from the listing page
    # -----------------------------
    first = listing.visible_items()[0]
    print(f"\nAdding {first.name} twice from the listing page...")
    listing.add_to_cart(first.id)
    listing.add_to_cart(first.id)
    print([(i.name, i.quantity) for i in listing.cart])

    # -----------------------------
    # Cart from the detail page; listing page follows via cart:updated
    # -----------------------------
    second = listing.visible_items()[1]
    await detail.load_product(second.id)
    print("\n" + detail.add_selected("3"))
    print("Listing page now sees:", [(i.name, i.quantity) for i in listing.cart])
    print(f"Badge: {listing.cart_item_count()}  Total: NT${listing.cart_total():,}")

    # -----------------------------
    # Checkout
    # -----------------------------
    print("\nPlacing order...")
    receipt = await listing.checkout(CustomerInfo(name="POC 測試用戶", email="customer@example.com"))
    print(receipt.model_dump(by_alias=True))
    print("Cart after order:", listing.cart, detail.cart)

    listing.close()
    detail.close()


if __name__ == "__main__":
    asyncio.run(main())
