"""Promotion eligibility filtering and ordering.

Product queries match only store-wide promotions and explicit product
lists; category queries match only store-wide and same-category
promotions. Single-product and category promotions are therefore never
returned for a product query. This mirrors the storefront's promotion
endpoint and is kept deliberately narrow.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from pricing.exceptions import InvalidInputError
from pricing.promotion.promotion import (
    AllProducts,
    CategoryTarget,
    ProductListTarget,
    Promotion,
    as_utc,
)


def _matches_product(promotion: Promotion, product_id: str) -> bool:
    target = promotion.target
    if isinstance(target, AllProducts):
        return True
    return isinstance(target, ProductListTarget) and product_id in target.product_ids


def _matches_category(promotion: Promotion, category: str) -> bool:
    target = promotion.target
    if isinstance(target, AllProducts):
        return True
    return isinstance(target, CategoryTarget) and target.category == category


def _newest_first_key(promotion: Promotion) -> float:
    return as_utc(promotion.created_at).timestamp() if promotion.created_at else 0.0


def match_promotions(
    promotions: Iterable[Promotion],
    *,
    product_id: str | None = None,
    category: str | None = None,
    now: datetime | None = None,
) -> list[Promotion]:
    """Return the eligible promotions for an optional product or category.

    Without a filter every eligible promotion is returned. Results are
    ordered by priority, highest first, then newest first.
    """
    if product_id and category:
        raise InvalidInputError({"filter": ["Filter by productId or category, not both"]})

    now = as_utc(now) if now else datetime.now(UTC)
    eligible = [promotion for promotion in promotions if promotion.is_eligible(now)]

    if product_id:
        eligible = [promotion for promotion in eligible if _matches_product(promotion, product_id)]
    elif category:
        eligible = [promotion for promotion in eligible if _matches_category(promotion, category)]

    # Two stable sorts: newest first, then priority descending
    eligible.sort(key=_newest_first_key, reverse=True)
    eligible.sort(key=lambda promotion: promotion.priority or 0, reverse=True)
    return eligible
