"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across users.
State tracks values returned by earlier requests so follow-up requests
can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CheckoutState:
    """Tracks a simulated checkout's address and chosen shipping cost."""

    address: dict = field(default_factory=dict)
    shipping_cost: float = 0.0
    currency: str = "USD"


@dataclass
class PromotionState:
    """Tracks state for a single simulated promotion lifecycle."""

    promotion_id: str | None = None
    is_active: bool = True
