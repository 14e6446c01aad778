"""Read-only access to the Stripe product catalog."""
from integrations.http import request_json, require_setting

PRODUCTS_URL = "https://api.stripe.com/v1/products"
PAGE_SIZE = 100


def _price_id(default_price):
    if isinstance(default_price, dict):
        return default_price.get("id")
    return default_price or None


def list_active_products() -> list[dict]:
    """Every active product as ``{id, name, default_price}``, following pagination."""
    secret = require_setting("STRIPE_SECRET_KEY")
    products = []
    params = {"active": "true", "limit": PAGE_SIZE}
    while True:
        data = request_json("GET", PRODUCTS_URL, service="Stripe", auth=(secret, ""), params=params)
        page = data.get("data", [])
        for product in page:
            products.append({
                "id": product["id"],
                "name": product.get("name", ""),
                "default_price": _price_id(product.get("default_price")),
            })
        if not data.get("has_more") or not page:
            break
        params = {**params, "starting_after": page[-1]["id"]}
    return products
