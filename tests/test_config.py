# tests/test_config.py
from storefront.config import DEFAULT_API_URL, Settings
from storefront.messages import get_text


def test_defaults(monkeypatch):
    for name in ("DRIP_API_URL", "DRIP_PAGE_SIZE", "DRIP_LOCALE", "DRIP_TIMEOUT", "DRIP_PRODUCTS_PATH"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.api_url == DEFAULT_API_URL
    assert s.page_size == 12
    assert s.locale == "zh-TW"
    assert s.timeout == 10.0
    assert s.products_path is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DRIP_API_URL", "http://shop.local:8080")
    monkeypatch.setenv("DRIP_PAGE_SIZE", "4")
    monkeypatch.setenv("DRIP_TIMEOUT", "2.5")
    s = Settings()
    assert s.api_url == "http://shop.local:8080"
    assert s.page_size == 4
    assert s.timeout == 2.5


def test_bad_env_values_fall_back(monkeypatch, caplog):
    monkeypatch.setenv("DRIP_PAGE_SIZE", "twelve")
    monkeypatch.setenv("DRIP_TIMEOUT", "-1")
    s = Settings()
    assert s.page_size == 12
    assert s.timeout == 10.0
    assert "DRIP_PAGE_SIZE" in caplog.text

    monkeypatch.setenv("DRIP_PAGE_SIZE", "0")
    assert Settings().page_size == 12


def test_messages_fall_back():
    assert get_text("empty_cart") == "購物車目前沒有商品。"
    assert get_text("empty_cart", "en") == "Your cart is empty."
    assert get_text("empty_cart", "fr") == "購物車目前沒有商品。"
    assert get_text("no_such_key", "en") == "no_such_key"
    assert get_text("order_created", "en", order_id="order_1") == "Order created: order_1"
