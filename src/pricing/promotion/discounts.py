"""Discount application helpers for storefront price display."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from pricing.promotion.promotion import (
    AllProducts,
    CategoryTarget,
    DiscountType,
    ProductListTarget,
    Promotion,
)
from pricing.shared.money import round_money, to_decimal


@dataclass(frozen=True)
class CatalogProduct:
    product_id: str
    category: str
    price: float


@dataclass(frozen=True)
class PricedProduct:
    product_id: str
    category: str
    original_price: Decimal
    discounted_price: Decimal
    discount_amount: Decimal
    promotion: Promotion | None = None


def calculate_discounted_price(price, promotion: Promotion) -> tuple[Decimal, Decimal]:
    """Return ``(discounted_price, discount_amount)``, both rounded to cents.

    Fixed discounts never exceed the price, so the result is never negative.
    """
    price = to_decimal(price)
    value = to_decimal(promotion.discount_value)

    if promotion.discount_type == DiscountType.PERCENTAGE.value:
        discount = price * value / 100
    else:
        discount = min(value, price)

    discounted = max(Decimal("0"), price - discount)
    return round_money(discounted), round_money(discount)


def _applies_to_product(promotion: Promotion, product_id: str, category: str) -> bool:
    target = promotion.target
    if isinstance(target, AllProducts):
        return True
    if isinstance(target, CategoryTarget):
        return target.category == category
    if isinstance(target, ProductListTarget):
        return product_id in target.product_ids
    return False


def find_best_promotion(
    promotions: Iterable[Promotion],
    product_id: str,
    category: str,
    subtotal: float = 0,
) -> Promotion | None:
    """Highest-priority promotion applicable to the product at this subtotal.

    ``promotions`` are expected to be eligible already (see ``match_promotions``).
    """
    applicable = [
        promotion
        for promotion in promotions
        if not (promotion.min_purchase_amount and subtotal < promotion.min_purchase_amount)
        and _applies_to_product(promotion, product_id, category)
    ]
    if not applicable:
        return None
    return max(applicable, key=lambda promotion: promotion.priority or 0)


def apply_promotions_to_products(
    products: Sequence[CatalogProduct],
    promotions: Sequence[Promotion],
    subtotal: float = 0,
) -> list[PricedProduct]:
    priced = []
    for product in products:
        original = round_money(product.price)
        promotion = find_best_promotion(promotions, product.product_id, product.category, subtotal)

        if promotion is None:
            priced.append(
                PricedProduct(
                    product_id=product.product_id,
                    category=product.category,
                    original_price=original,
                    discounted_price=original,
                    discount_amount=Decimal("0.00"),
                )
            )
            continue

        discounted, discount = calculate_discounted_price(product.price, promotion)
        priced.append(
            PricedProduct(
                product_id=product.product_id,
                category=product.category,
                original_price=original,
                discounted_price=discounted,
                discount_amount=discount,
                promotion=promotion,
            )
        )
    return priced
