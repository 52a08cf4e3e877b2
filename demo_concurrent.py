import asyncio
import tempfile

from sdk.dripclient import StoreClient
from storefront.cart_store import CartStore
from storefront.config import get_settings
from storefront.events import EventBus
from storefront.session import ListingPage
from storefront.storage import FileStorage


def show(label: str, items):
    print(f"{label}: {[(i.id, i.quantity) for i in items]}")


async def main():
    settings = get_settings()
    c = StoreClient(base_url=settings.api_url, timeout=settings.timeout)

    # Two tabs share the storage directory but not an event bus,
    # like two browser windows that only meet in local storage.
    storage_dir = tempfile.mkdtemp(prefix="drip-race-")
    tab_a = ListingPage(c, CartStore(FileStorage(storage_dir)), EventBus(), settings)
    tab_b = ListingPage(c, CartStore(FileStorage(storage_dir)), EventBus(), settings)

    await asyncio.gather(tab_a.load_catalog(), tab_b.load_catalog())
    ids = [p.id for p in tab_a.state.products]

    print("\n⚡ Simulating two tabs editing the same cart...")
    tab_a.add_to_cart(ids[0])
    tab_b.sync_cart()
    show("Tab B loaded", tab_b.cart)

    tab_a.add_to_cart(ids[1])
    show("Tab A added a second item", tab_a.cart)

    # Tab B never heard about it and writes its full (stale) cart back
    tab_b.increment(ids[0])
    show("Tab B incremented", tab_b.cart)

    final = CartStore(FileStorage(storage_dir)).read_cart()
    show("\n📦 Stored cart (last writer wins)", final)
    tab_a.sync_cart()
    show("Tab A after re-read", tab_a.cart)


if __name__ == "__main__":
    asyncio.run(main())
