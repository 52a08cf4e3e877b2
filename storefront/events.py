# storefront/events.py
"""
Cross-context notifications.

Page sessions sharing one storage backend also share one ``EventBus``.
``cart:updated`` carries no payload: receivers re-read the cart store.
A publisher is not notified of its own event. Two sessions writing
concurrently race, and the last full-cart write wins; there is no merge.
"""
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Optional, Tuple

from storefront.logging import get_logger

logger = get_logger(__name__)

CART_UPDATED = "cart:updated"

Listener = Callable[[], None]


class EventBus:
    def __init__(self):
        self._listeners: DefaultDict[str, List[Tuple[Listener, Any]]] = defaultdict(list)

    def subscribe(self, topic: str, listener: Listener, owner: Any = None) -> Callable[[], None]:
        entry = (listener, owner)
        self._listeners[topic].append(entry)

        def unsubscribe() -> None:
            try:
                self._listeners[topic].remove(entry)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, topic: str, sender: Optional[Any] = None) -> None:
        # Snapshot so listeners may unsubscribe while being notified
        for listener, owner in list(self._listeners.get(topic, ())):
            if sender is not None and owner is sender:
                continue
            try:
                listener()
            except Exception:
                logger.exception("Listener for %s failed", topic)

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, ()))
