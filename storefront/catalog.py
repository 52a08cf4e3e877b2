# storefront/catalog.py
"""
Catalog filter/paginate engine.

All functions operate on an explicit ``AppState``. Any filter change
recomputes ``state.filtered`` and sends pagination back to page 1.
"""
import math
from typing import Any, Dict, List, Optional, Sequence

from storefront.messages import get_text
from storefront.models import (
    ALL_CATEGORIES,
    UNCATEGORIZED,
    AppState,
    Category,
    FilterState,
    PageControl,
    Product,
)


def format_category_label(label: str, category_id: str) -> str:
    return f"{label}（{category_id} 類）"


def category_badge(product: Product, locale: str = "zh-TW") -> str:
    if not product.category:
        return get_text("uncategorized", locale)
    return format_category_label(product.category, product.category_id)


# ---------------------------
# Categories
# ---------------------------
def build_categories(products: Sequence[Product]) -> List[Category]:
    """Aggregate products by category id, in first-seen order."""
    by_id: Dict[str, Category] = {}
    for product in products:
        category_id = product.category_id or UNCATEGORIZED
        if category_id not in by_id:
            label = product.category or category_id
            by_id[category_id] = Category(
                id=category_id,
                label=label,
                display_label=format_category_label(label, category_id),
            )
        by_id[category_id].count += 1
    return list(by_id.values())


def category_options(state: AppState, locale: str = "zh-TW") -> List[Category]:
    all_label = get_text("all_categories", locale)
    return [Category(ALL_CATEGORIES, all_label, all_label, len(state.products))] + list(state.categories)


# ---------------------------
# Filtering
# ---------------------------
def matches(product: Product, filters: FilterState) -> bool:
    keyword = filters.keyword.strip().lower()
    if keyword:
        haystacks = (product.name, product.description, product.category)
        if not any(keyword in (text or "").lower() for text in haystacks):
            return False
    if filters.category_id != ALL_CATEGORIES and product.category_id != filters.category_id:
        return False
    return True


def recompute(state: AppState, reset_page: bool = False) -> None:
    state.filtered = [p for p in state.products if matches(p, state.filters)]

    pagination = state.pagination
    count = len(state.filtered)
    pagination.total_pages = math.ceil(count / pagination.page_size) if count else 0

    if pagination.total_pages == 0 or reset_page:
        pagination.current_page = 1
    else:
        pagination.current_page = min(max(pagination.current_page, 1), pagination.total_pages)


def load_products(state: AppState, products: Sequence[Product]) -> None:
    state.products = list(products)
    state.filters = FilterState()
    state.categories = build_categories(state.products)
    recompute(state, reset_page=True)


def set_keyword(state: AppState, text: Optional[str]) -> None:
    state.filters.keyword = text or ""
    recompute(state, reset_page=True)


def set_category(state: AppState, category_id: str) -> bool:
    if not category_id or category_id == state.filters.category_id:
        return False
    state.filters.category_id = category_id
    recompute(state, reset_page=True)
    return True


# ---------------------------
# Pagination
# ---------------------------
def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return None
    return None


def goto_page(state: AppState, page: Any) -> bool:
    """Move to ``page`` (clamped into range). Returns False when nothing changed."""
    requested = _as_int(page)
    if requested is None:
        return False
    pagination = state.pagination
    target = min(max(requested, 1), pagination.total_pages or 1)
    if target == pagination.current_page:
        return False
    pagination.current_page = target
    return True


def visible_items(state: AppState) -> List[Product]:
    pagination = state.pagination
    start = (pagination.current_page - 1) * pagination.page_size
    return state.filtered[start:start + pagination.page_size]


def page_controls(state: AppState) -> List[PageControl]:
    current = state.pagination.current_page
    total = state.pagination.total_pages
    if total <= 1:
        return []

    controls = [PageControl("<", current - 1, disabled=current == 1)]
    controls.extend(PageControl(str(page), page, active=page == current) for page in range(1, total + 1))
    controls.append(PageControl(">", current + 1, disabled=current == total))
    return controls
