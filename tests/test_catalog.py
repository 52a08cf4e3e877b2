# tests/test_catalog.py
import pytest

from storefront import catalog
from storefront.models import AppState, PaginationState


def _state(products, page_size=12):
    state = AppState(pagination=PaginationState(page_size=page_size))
    catalog.load_products(state, products)
    return state


def test_thirteen_products_make_two_pages(products):
    state = _state(products)

    assert state.pagination.total_pages == 2
    assert state.pagination.current_page == 1
    assert [p.id for p in catalog.visible_items(state)] == [f"p{i}" for i in range(1, 13)]

    assert catalog.goto_page(state, 2) is True
    assert [p.id for p in catalog.visible_items(state)] == ["p13"]


@pytest.mark.parametrize("page_size", [1, 2, 5, 12, 20])
@pytest.mark.parametrize("keyword,category_id", [("", "all"), ("product 1", "all"), ("", "B"), ("DESCRIPTION", "A")])
def test_pages_partition_filtered_list(products, page_size, keyword, category_id):
    state = _state(products, page_size)
    catalog.set_keyword(state, keyword)
    catalog.set_category(state, category_id)

    seen = []
    for page in range(1, state.pagination.total_pages + 1):
        catalog.goto_page(state, page)
        items = catalog.visible_items(state)
        assert len(items) <= page_size
        seen.extend(items)

    assert seen == state.filtered


def test_keyword_is_trimmed_case_insensitive_and_matches_category_label(products, make_product):
    state = _state(products + [make_product(99, name="Hario Kettle", description="", category="器具", category_id="B")])

    catalog.set_keyword(state, "  hario ")
    assert [p.id for p in state.filtered] == ["p99"]

    catalog.set_keyword(state, "器具")
    assert {p.category_id for p in state.filtered} == {"B"}
    assert len(state.filtered) == 6


def test_category_and_keyword_combine(products):
    state = _state(products)
    catalog.set_category(state, "B")
    catalog.set_keyword(state, "product 1")
    assert [p.id for p in state.filtered] == ["p10", "p11"]


def test_empty_result_forces_page_one_and_hides_controls(products):
    state = _state(products, page_size=5)
    catalog.goto_page(state, 3)

    catalog.set_keyword(state, "no such coffee")

    assert state.filtered == []
    assert state.pagination.total_pages == 0
    assert state.pagination.current_page == 1
    assert catalog.visible_items(state) == []
    assert catalog.page_controls(state) == []


def test_narrowing_without_reset_clamps_current_page(products):
    state = _state(products, page_size=2)
    catalog.goto_page(state, 7)
    assert state.pagination.current_page == 7

    state.filters.category_id = "A"
    catalog.recompute(state, reset_page=False)

    assert state.pagination.total_pages == 3
    assert state.pagination.current_page == 3


def test_filter_change_resets_to_first_page(products):
    state = _state(products, page_size=2)
    catalog.goto_page(state, 4)
    catalog.set_category(state, "A")
    assert state.pagination.current_page == 1


def test_set_same_category_is_noop(products):
    state = _state(products)
    assert catalog.set_category(state, "all") is False
    assert catalog.set_category(state, "A") is True
    assert catalog.set_category(state, "A") is False


@pytest.mark.parametrize("page", [None, "abc", 1.5, True, "", [2]])
def test_goto_invalid_page_is_noop(products, page):
    state = _state(products)
    assert catalog.goto_page(state, page) is False
    assert state.pagination.current_page == 1


def test_goto_page_clamps_and_skips_current(products):
    state = _state(products)
    assert catalog.goto_page(state, 1) is False
    assert catalog.goto_page(state, "2") is True
    assert catalog.goto_page(state, 99) is False
    assert state.pagination.current_page == 2
    assert catalog.goto_page(state, -4) is True
    assert state.pagination.current_page == 1


def test_page_controls_shape(products):
    state = _state(products, page_size=5)
    catalog.goto_page(state, 2)

    controls = catalog.page_controls(state)
    assert [c.label for c in controls] == ["<", "1", "2", "3", ">"]
    assert [c.page for c in controls] == [1, 1, 2, 3, 3]
    assert [c.label for c in controls if c.active] == ["2"]
    assert not any(c.disabled for c in controls)

    catalog.goto_page(state, 3)
    assert catalog.page_controls(state)[-1].disabled


def test_single_page_has_no_controls(products):
    state = _state(products[:3])
    assert state.pagination.total_pages == 1
    assert catalog.page_controls(state) == []


def test_categories_first_seen_order_with_uncategorized_bucket(products, make_product):
    shuffled = [products[7], products[0], products[12], products[1]]
    shuffled.append(make_product(50, category_id="C", category=""))
    cats = catalog.build_categories(shuffled)

    assert [(c.id, c.label, c.count) for c in cats] == [
        ("B", "器具", 1),
        ("A", "咖啡豆", 2),
        ("uncategorized", "uncategorized", 1),
        ("C", "C", 1),
    ]
    assert cats[0].display_label == "器具（B 類）"


def test_category_options_prefixes_all(products):
    state = _state(products)
    options = catalog.category_options(state, "en")
    assert options[0].id == "all"
    assert options[0].label == "All"
    assert options[0].count == 13
    assert sum(c.count for c in options[1:]) == 13


def test_load_products_resets_filters(products):
    state = _state(products)
    catalog.set_keyword(state, "product 2")
    catalog.set_category(state, "A")

    catalog.load_products(state, products[:4])

    assert state.filters.keyword == ""
    assert state.filters.category_id == "all"
    assert len(state.filtered) == 4


def test_category_badge(make_product):
    assert catalog.category_badge(make_product(1)) == "咖啡豆（A 類）"
    assert catalog.category_badge(make_product(2, category="", category_id=""), "en") == "Uncategorized"
