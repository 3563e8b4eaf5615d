"""Pricing API package."""

from pricing.api.errors import register_error_handlers
from pricing.api.routes import (
    admin_promotion_router,
    promotion_router,
    shipping_router,
    tax_router,
)

__all__ = [
    "admin_promotion_router",
    "promotion_router",
    "register_error_handlers",
    "shipping_router",
    "tax_router",
]
