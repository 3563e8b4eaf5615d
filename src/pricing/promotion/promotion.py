"""Promotion aggregate — a time-boxed discount targeting products.

A promotion targets everything, one category, one product or an explicit
list of products. ``target`` exposes that choice as a tagged union so
callers never have to guess which of ``category``/``product_ids`` is
meaningful for a given ``applies_to``.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from pricing.domain import pricing


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class AppliesTo(Enum):
    ALL = "all"
    CATEGORY = "category"
    PRODUCT = "product"
    PRODUCTS = "products"


@dataclass(frozen=True)
class AllProducts:
    pass


@dataclass(frozen=True)
class CategoryTarget:
    category: str


@dataclass(frozen=True)
class ProductTarget:
    product_id: str


@dataclass(frozen=True)
class ProductListTarget:
    product_ids: frozenset[str]


PromotionTarget = AllProducts | CategoryTarget | ProductTarget | ProductListTarget

# Fields an admin may change after creation
EDITABLE_FIELDS = (
    "name",
    "description",
    "discount_type",
    "discount_value",
    "applies_to",
    "category",
    "product_ids",
    "start_date",
    "end_date",
    "priority",
    "promo_code",
    "min_purchase_amount",
    "max_uses",
    "banner_text",
)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment


def _scoped_targeting(applies_to, category, product_ids):
    """Drop targeting fields the chosen mode does not use."""
    ids = list(product_ids or [])
    category = category if applies_to == AppliesTo.CATEGORY.value else None
    ids = ids if applies_to in (AppliesTo.PRODUCT.value, AppliesTo.PRODUCTS.value) else []
    return category, json.dumps(ids)


@pricing.aggregate
class Promotion:
    name: String(required=True, max_length=200)
    description: Text()
    discount_type: String(required=True, choices=DiscountType)
    discount_value: Float(required=True, min_value=0.0)
    applies_to: String(choices=AppliesTo, default=AppliesTo.ALL.value)
    category: String(max_length=100)
    product_ids: Text()  # JSON array of product ids
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    is_active: Boolean(default=True)
    priority: Integer(default=0)
    promo_code: String(max_length=50)
    min_purchase_amount: Float(default=0.0, min_value=0.0)
    max_uses: Integer(min_value=0)
    current_uses: Integer(default=0, min_value=0)
    banner_text: String(max_length=255)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def end_date_must_follow_start_date(self):
        if self.start_date and self.end_date and as_utc(self.end_date) <= as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    @invariant.post
    def percentage_cannot_exceed_100(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and (self.discount_value or 0) > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @invariant.post
    def targeting_must_be_complete(self):
        if self.applies_to == AppliesTo.CATEGORY.value and not self.category:
            raise ValidationError({"category": ["Category is required for category promotions"]})

        ids = self.product_id_list
        if self.applies_to == AppliesTo.PRODUCT.value and len(ids) != 1:
            raise ValidationError({"product_ids": ["Single-product promotions need exactly one product id"]})
        if self.applies_to == AppliesTo.PRODUCTS.value and not ids:
            raise ValidationError({"product_ids": ["At least one product id is required"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        discount_type,
        discount_value,
        start_date,
        end_date,
        applies_to=AppliesTo.ALL.value,
        category=None,
        product_ids=None,
        description=None,
        is_active=True,
        priority=0,
        promo_code=None,
        min_purchase_amount=0.0,
        max_uses=None,
        banner_text=None,
    ):
        from pricing.promotion.events import PromotionCreated

        now = datetime.now(UTC)
        category, product_ids_json = _scoped_targeting(applies_to, category, product_ids)

        promotion = cls(
            name=name,
            description=description,
            discount_type=discount_type,
            discount_value=discount_value,
            applies_to=applies_to,
            category=category,
            product_ids=product_ids_json,
            start_date=as_utc(start_date),
            end_date=as_utc(end_date),
            is_active=is_active,
            priority=priority,
            promo_code=promo_code or None,
            min_purchase_amount=min_purchase_amount,
            max_uses=max_uses or None,
            current_uses=0,
            banner_text=banner_text,
            created_at=now,
            updated_at=now,
        )
        promotion.raise_(
            PromotionCreated(
                promotion_id=promotion.id,
                name=name,
                discount_type=discount_type,
                discount_value=discount_value,
                applies_to=applies_to,
                start_date=promotion.start_date,
                end_date=promotion.end_date,
            )
        )
        return promotion

    # -------------------------------------------------------------------
    # Targeting
    # -------------------------------------------------------------------
    @property
    def product_id_list(self) -> list[str]:
        return json.loads(self.product_ids) if self.product_ids else []

    @property
    def target(self) -> PromotionTarget:
        if self.applies_to == AppliesTo.CATEGORY.value:
            return CategoryTarget(category=self.category)
        if self.applies_to == AppliesTo.PRODUCT.value:
            return ProductTarget(product_id=self.product_id_list[0])
        if self.applies_to == AppliesTo.PRODUCTS.value:
            return ProductListTarget(product_ids=frozenset(self.product_id_list))
        return AllProducts()

    # -------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------
    def usage_exhausted(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses

    def is_running(self, now: datetime) -> bool:
        now = as_utc(now)
        return as_utc(self.start_date) <= now <= as_utc(self.end_date)

    def is_eligible(self, now: datetime) -> bool:
        """Active, inside its validity window and below its usage cap."""
        return bool(self.is_active) and self.is_running(now) and not self.usage_exhausted()

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Apply a partial update; unknown fields are rejected."""
        from pricing.promotion.events import PromotionUpdated

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        applies_to = changes.get("applies_to", self.applies_to)
        category = changes.get("category", self.category)
        product_ids = changes.get("product_ids", self.product_id_list)
        category, product_ids_json = _scoped_targeting(applies_to, category, product_ids)

        with atomic_change(self):
            for field_name, value in changes.items():
                if field_name in ("category", "product_ids"):
                    continue
                if field_name in ("start_date", "end_date") and value is not None:
                    if isinstance(value, str):
                        value = datetime.fromisoformat(value)
                    value = as_utc(value)
                if field_name == "max_uses":
                    value = value or None  # 0 means unlimited
                setattr(self, field_name, value)
            self.category = category
            self.product_ids = product_ids_json
            self.updated_at = datetime.now(UTC)

        self.raise_(
            PromotionUpdated(
                promotion_id=self.id,
                changed_fields=json.dumps(sorted(changes)),
            )
        )

    def activate(self):
        from pricing.promotion.events import PromotionActivated

        if self.is_active:
            raise ValidationError({"is_active": ["Promotion is already active"]})

        self.is_active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(PromotionActivated(promotion_id=self.id))

    def deactivate(self):
        from pricing.promotion.events import PromotionDeactivated

        if not self.is_active:
            raise ValidationError({"is_active": ["Promotion is already inactive"]})

        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(PromotionDeactivated(promotion_id=self.id))

    def record_redemption(self):
        """Count one use of the promotion at checkout."""
        from pricing.promotion.events import PromotionRedeemed

        if self.usage_exhausted():
            raise ValidationError({"current_uses": ["Promotion has reached its usage limit"]})

        self.current_uses = (self.current_uses or 0) + 1
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PromotionRedeemed(
                promotion_id=self.id,
                current_uses=self.current_uses,
            )
        )

