"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's validation rules
and use the camelCase field names expected by its Pydantic request schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

CATEGORIES = ["jeans", "shirts", "shoes", "hats", "jackets"]

# ---------- Shipping ----------

_REGIONS = {
    "US": ["CA", "NY", "TX", "WA", "FL", "IL", "OR"],
    "CA": ["ON", "QC", "BC", "AB", "NS"],
    "MX": ["JAL", "NLE", "CMX", "YUC"],
}


def shipping_address(country: str | None = None) -> dict:
    """Generate an address in one of the served countries."""
    country = country or random.choices(["US", "CA", "MX"], weights=[8, 1, 1])[0]
    return {
        "street": fake.street_address(),
        "city": fake.city(),
        "state": random.choice(_REGIONS[country]),
        "zip": fake.postcode() if country == "US" else fake.bothify("?#? #?#").upper(),
        "country": country,
    }


def cart_items(max_lines: int = 4) -> list[dict]:
    """Generate cart lines; some omit the weight to exercise the default."""
    items = []
    for _ in range(random.randint(1, max_lines)):
        item = {"quantity": random.randint(1, 6), "productId": f"LT-{uuid.uuid4().hex[:8]}"}
        if random.random() < 0.8:
            item["weight"] = round(random.uniform(0.1, 8.0), 2)
        items.append(item)
    return items


# ---------- Tax ----------


def tax_request(address: dict | None = None) -> dict:
    address = address or shipping_address()
    return {
        "subtotal": round(random.uniform(5, 500), 2),
        "shipping": round(random.uniform(0, 40), 2),
        "country": address["country"],
        "state": address["state"],
    }


# ---------- Promotions ----------


def promotion_data() -> dict:
    """Generate a running promotion with random targeting."""
    now = datetime.now(UTC)
    applies_to = random.choice(["all", "category", "products"])
    payload = {
        "name": f"{fake.catch_phrase()[:40]} {uuid.uuid4().hex[:4]}",
        "discountType": random.choice(["percentage", "fixed"]),
        "discountValue": random.randint(5, 50),
        "appliesTo": applies_to,
        "startDate": (now - timedelta(hours=1)).isoformat(),
        "endDate": (now + timedelta(days=random.randint(1, 30))).isoformat(),
        "priority": random.randint(0, 10),
        "bannerText": fake.sentence(nb_words=5),
    }
    if applies_to == "category":
        payload["category"] = random.choice(CATEGORIES)
    elif applies_to == "products":
        payload["productIds"] = [f"LT-{uuid.uuid4().hex[:8]}" for _ in range(random.randint(1, 3))]
    return payload


def catalog_products(count: int = 5) -> list[dict]:
    return [
        {
            "productId": f"LT-{uuid.uuid4().hex[:8]}",
            "category": random.choice(CATEGORIES),
            "price": round(random.uniform(5, 200), 2),
        }
        for _ in range(count)
    ]
