"""User-facing messages, keyed by error/feedback kind."""
from typing import Dict

DEFAULT_LOCALE = "zh-TW"

MESSAGES: Dict[str, Dict[str, str]] = {
    "zh-TW": {
        "catalog_unavailable": "載入商品失敗，請稍後再試。",
        "product_unavailable": "目前無法載入商品資訊，請稍後再試。",
        "product_not_found": "查無此商品。",
        "missing_product_id": "未提供商品編號，請回到商品列表重新選擇。",
        "empty_cart": "購物車目前沒有商品。",
        "invalid_cart_item": "購物車內容有誤，請檢查後再試。",
        "invalid_cart": "購物車內容有誤。",
        "order_failed": "下單失敗，請稍後再試。",
        "order_created": "訂單建立成功：{order_id}",
        "added_to_cart": "已將 {name} x{quantity} 加入購物車",
        "no_results": "目前沒有符合條件的商品。",
        "loading": "商品載入中…",
        "uncategorized": "未分類",
        "all_categories": "全部",
        "unexpected_error": "發生未預期的錯誤。",
    },
    "en": {
        "catalog_unavailable": "Could not load products, please try again later.",
        "product_unavailable": "Could not load this product right now, please try again later.",
        "product_not_found": "Product not found.",
        "missing_product_id": "No product id given, please pick a product from the list.",
        "empty_cart": "Your cart is empty.",
        "invalid_cart_item": "Your cart contains an invalid item, please review it.",
        "invalid_cart": "Your cart is invalid.",
        "order_failed": "Order failed, please try again later.",
        "order_created": "Order created: {order_id}",
        "added_to_cart": "Added {name} x{quantity} to your cart",
        "no_results": "No products match your filters.",
        "loading": "Loading products…",
        "uncategorized": "Uncategorized",
        "all_categories": "All",
        "unexpected_error": "An unexpected error occurred.",
    },
}


def get_text(key: str, locale: str = DEFAULT_LOCALE, **kwargs) -> str:
    """Look up ``key`` for ``locale``, falling back to the default locale, then to the key."""
    table = MESSAGES.get(locale) or MESSAGES[DEFAULT_LOCALE]
    template = table.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    return template.format(**kwargs) if kwargs else template
