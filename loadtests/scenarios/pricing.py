"""Pricing load test scenarios.

Three journeys: a checkout quoting shipping then tax, a shopper browsing
promotions, and an admin managing a promotion. Checkout and admin steps
execute in order; each depends on the previous step succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    CATEGORIES,
    cart_items,
    catalog_products,
    promotion_data,
    shipping_address,
    tax_request,
)
from loadtests.helpers.state import CheckoutState, PromotionState


class CheckoutPricingJourney(SequentialTaskSet):
    """Quote shipping -> pick the cheapest option -> calculate tax."""

    def on_start(self):
        self.state = CheckoutState(address=shipping_address())

    @task
    def quote_shipping(self):
        with self.client.post(
            "/shipping/calculate",
            json={"shippingAddress": self.state.address, "items": cart_items()},
            catch_response=True,
            name="POST /shipping/calculate",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Shipping quote failed: {resp.status_code}")
                self.interrupt()
                return

            options = resp.json()["options"]
            if not options:
                resp.failure("No shipping options offered")
                self.interrupt()
                return
            self.state.shipping_cost = options[0]["cost"]
            self.state.currency = options[0]["currency"]

    @task
    def calculate_tax(self):
        payload = tax_request(self.state.address)
        payload["shipping"] = self.state.shipping_cost
        payload["currency"] = self.state.currency
        with self.client.post(
            "/tax/calculate",
            json=payload,
            catch_response=True,
            name="POST /tax/calculate",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Tax calculation failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class PromotionBrowser(SequentialTaskSet):
    """Storefront promotion lookups by category, product and cart."""

    @task
    def promotions_for_category(self):
        self.client.get(
            "/promotions",
            params={"category": random.choice(CATEGORIES)},
            name="GET /promotions?category",
        )

    @task
    def promotions_for_product(self):
        self.client.get(
            "/promotions",
            params={"productId": catalog_products(1)[0]["productId"]},
            name="GET /promotions?productId",
        )

    @task
    def price_cart(self):
        with self.client.post(
            "/promotions/apply",
            json={"products": catalog_products(), "subtotal": round(random.uniform(20, 400), 2)},
            catch_response=True,
            name="POST /promotions/apply",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Promotion pricing failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class PromotionAdminJourney(SequentialTaskSet):
    """Create -> Update -> Pause -> Resume -> Delete a promotion."""

    def on_start(self):
        self.state = PromotionState()

    @task
    def create_promotion(self):
        with self.client.post(
            "/admin/promotions",
            json=promotion_data(),
            catch_response=True,
            name="POST /admin/promotions",
        ) as resp:
            if resp.status_code == 201:
                self.state.promotion_id = resp.json()["promotion"]["id"]
            else:
                resp.failure(f"Create promotion failed: {resp.status_code}")
                self.interrupt()

    @task
    def update_promotion(self):
        with self.client.put(
            f"/admin/promotions/{self.state.promotion_id}",
            json={"priority": random.randint(0, 10)},
            catch_response=True,
            name="PUT /admin/promotions/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update promotion failed: {resp.status_code}")

    @task
    def pause_promotion(self):
        self._toggle(False)

    @task
    def resume_promotion(self):
        self._toggle(True)

    @task
    def delete_promotion(self):
        with self.client.delete(
            f"/admin/promotions/{self.state.promotion_id}",
            catch_response=True,
            name="DELETE /admin/promotions/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delete promotion failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()

    def _toggle(self, is_active: bool):
        with self.client.patch(
            f"/admin/promotions/{self.state.promotion_id}/toggle-active",
            json={"isActive": is_active},
            catch_response=True,
            name="PATCH /admin/promotions/{id}/toggle-active",
        ) as resp:
            if resp.status_code == 200:
                self.state.is_active = is_active
            else:
                resp.failure(f"Toggle promotion failed: {resp.status_code}")


class PricingUser(HttpUser):
    """Locust user simulating storefront pricing traffic.

    Weighted distribution:
    - 60% Checkout pricing (shipping + tax)
    - 30% Promotion browsing
    - 10% Promotion administration
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        CheckoutPricingJourney: 6,
        PromotionBrowser: 3,
        PromotionAdminJourney: 1,
    }
