"""Pydantic request/response schemas for the Pricing API.

The storefront speaks camelCase JSON; fields are declared in snake_case
and aliased by the generator.
"""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # Amounts must be finite numbers; Infinity and NaN are rejected at the edge
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Shipping
# ---------------------------------------------------------------------------
class AddressSchema(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = Field("", validation_alias=AliasChoices("zip", "postalCode", "postal_code"))
    country: str = ""


class ShippingItemSchema(CamelModel):
    quantity: int
    weight: float | None = None
    product_id: str | None = None


class ShippingCalculateRequest(CamelModel):
    shipping_address: AddressSchema | None = None
    items: list[ShippingItemSchema] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shippingAddress": {
                        "street": "500 Market St",
                        "city": "San Francisco",
                        "state": "CA",
                        "zip": "94105",
                        "country": "US",
                    },
                    "items": [{"quantity": 2, "weight": 1.5}],
                }
            ]
        }
    }


class DeliveryWindowSchema(CamelModel):
    min: int
    max: int


class ShippingOptionSchema(CamelModel):
    carrier: str
    service_level: str
    service_name: str
    cost: float
    currency: str
    estimated_days: DeliveryWindowSchema


class PackageDimensionsSchema(CamelModel):
    weight: float
    length: float
    width: float
    height: float


class ShippingCalculateResponse(CamelModel):
    success: bool = True
    options: list[ShippingOptionSchema]
    package_dimensions: PackageDimensionsSchema


# ---------------------------------------------------------------------------
# Tax
# ---------------------------------------------------------------------------
class TaxCalculateRequest(CamelModel):
    subtotal: float | None = None
    shipping: float | None = None
    country: str | None = None
    state: str | None = None
    currency: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [{"subtotal": 100.0, "shipping": 10.0, "country": "US", "state": "CA"}]
        }
    }


class TaxRateSchema(CamelModel):
    country: str
    state: str | None = None
    rate: float
    name: str


class TaxCalculateResponse(CamelModel):
    success: bool = True
    tax_amount: float
    total: float
    subtotal: float
    shipping: float
    tax_rate: TaxRateSchema
    currency: str


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------
DiscountTypeLiteral = Literal["percentage", "fixed"]
AppliesToLiteral = Literal["all", "category", "product", "products"]


class PromotionSchema(CamelModel):
    id: str
    name: str
    description: str | None = None
    discount_type: str
    discount_value: float
    applies_to: str
    category: str | None = None
    product_ids: list[str] = Field(default_factory=list)
    start_date: datetime
    end_date: datetime
    is_active: bool
    priority: int
    promo_code: str | None = None
    min_purchase_amount: float = 0.0
    max_uses: int | None = None
    current_uses: int = 0
    banner_text: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_promotion(cls, promotion) -> "PromotionSchema":
        return cls(
            id=str(promotion.id),
            name=promotion.name,
            description=promotion.description,
            discount_type=promotion.discount_type,
            discount_value=promotion.discount_value,
            applies_to=promotion.applies_to,
            category=promotion.category,
            product_ids=promotion.product_id_list,
            start_date=promotion.start_date,
            end_date=promotion.end_date,
            is_active=promotion.is_active,
            priority=promotion.priority or 0,
            promo_code=promotion.promo_code,
            min_purchase_amount=promotion.min_purchase_amount or 0.0,
            max_uses=promotion.max_uses,
            current_uses=promotion.current_uses or 0,
            banner_text=promotion.banner_text,
            created_at=promotion.created_at,
        )


class PromotionListResponse(CamelModel):
    success: bool = True
    promotions: list[PromotionSchema]


class PromotionResponse(CamelModel):
    success: bool = True
    promotion: PromotionSchema


class CreatePromotionRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    discount_type: DiscountTypeLiteral
    discount_value: float = Field(..., ge=0)
    applies_to: AppliesToLiteral = "all"
    category: str | None = None
    product_ids: list[str] = Field(default_factory=list)
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    priority: int = 0
    promo_code: str | None = None
    min_purchase_amount: float = Field(0.0, ge=0)
    max_uses: int | None = Field(None, ge=0)
    banner_text: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Spring denim sale",
                    "discountType": "percentage",
                    "discountValue": 20,
                    "appliesTo": "category",
                    "category": "jeans",
                    "startDate": "2026-03-01T00:00:00Z",
                    "endDate": "2026-03-31T23:59:59Z",
                    "priority": 10,
                }
            ]
        }
    }


class UpdatePromotionRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    discount_type: DiscountTypeLiteral | None = None
    discount_value: float | None = Field(None, ge=0)
    applies_to: AppliesToLiteral | None = None
    category: str | None = None
    product_ids: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    priority: int | None = None
    promo_code: str | None = None
    min_purchase_amount: float | None = Field(None, ge=0)
    max_uses: int | None = Field(None, ge=0)
    banner_text: str | None = None


class TogglePromotionRequest(CamelModel):
    is_active: bool


class PricedProductRequest(CamelModel):
    product_id: str
    category: str
    price: float = Field(..., ge=0)


class ApplyPromotionsRequest(CamelModel):
    products: list[PricedProductRequest]
    subtotal: float = Field(0.0, ge=0)


class PricedProductSchema(CamelModel):
    product_id: str
    category: str
    original_price: float
    discounted_price: float
    discount_amount: float
    promotion_id: str | None = None


class ApplyPromotionsResponse(CamelModel):
    success: bool = True
    products: list[PricedProductSchema]


class StatusResponse(CamelModel):
    success: bool = True
    message: str | None = None
