"""Pricing bounded context — shipping, tax and promotion calculations.

Computes checkout-time costs for the storefront: package estimation,
carrier shipping quotes, jurisdiction taxes and promotion eligibility.
Promotions are the only persisted aggregate; everything else is a pure
calculation over explicit inputs.
"""

from protean.domain import Domain

from pricing.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

pricing = Domain(name="pricing")
