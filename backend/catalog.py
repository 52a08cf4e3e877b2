# backend/catalog.py
import json
import os
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from backend.schemas import ProductRecord
from storefront.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PRODUCTS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "products.json")


class ProductCatalog:
    """
    Products served by the API, read from a JSON file.

    The file is re-read whenever its mtime changes, so edits show up
    without a restart. A file that cannot be read or parsed yields an
    empty catalog.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or DEFAULT_PRODUCTS_PATH
        self._items: List[Dict[str, Any]] = []
        self._mtime: Optional[float] = None

    def _load(self) -> None:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error("Could not load products from %s: %s", self.path, e)
            self._items = []
            return

        if not isinstance(raw, list):
            logger.error("Products file %s does not hold a list", self.path)
            self._items = []
            return

        items = []
        for entry in raw:
            try:
                record = ProductRecord.model_validate(entry)
            except ValidationError as e:
                logger.warning("Skipping invalid product entry %r: %s", entry, e)
                continue
            items.append(record.model_dump(by_alias=True, exclude_none=True))
        self._items = items

    def items(self) -> List[Dict[str, Any]]:
        try:
            mtime = os.path.getmtime(self.path)
        except OSError:
            mtime = None
        if mtime is None or mtime != self._mtime:
            self._mtime = mtime
            self._load()
        return self._items

    def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        return next((p for p in self.items() if p["id"] == product_id), None)

    def search(self, keyword: str) -> List[Dict[str, Any]]:
        term = keyword.strip().lower()
        if not term:
            return self.items()
        return [
            p for p in self.items()
            if term in p.get("name", "").lower() or term in p.get("description", "").lower()
        ]


# In-memory order log; lost on restart
ORDERS: List[Dict[str, Any]] = []
