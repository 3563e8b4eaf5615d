"""FastAPI endpoints for shipping, tax and promotions."""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from pricing.api.errors import internal_errors
from pricing.api.schemas import (
    ApplyPromotionsRequest,
    ApplyPromotionsResponse,
    CreatePromotionRequest,
    DeliveryWindowSchema,
    PackageDimensionsSchema,
    PricedProductSchema,
    PromotionListResponse,
    PromotionResponse,
    PromotionSchema,
    ShippingCalculateRequest,
    ShippingCalculateResponse,
    ShippingOptionSchema,
    StatusResponse,
    TaxCalculateRequest,
    TaxCalculateResponse,
    TaxRateSchema,
    TogglePromotionRequest,
    UpdatePromotionRequest,
)
from pricing.config import get_rates_config, get_shipping_settings
from pricing.domain import pricing
from pricing.exceptions import InvalidAddressError
from pricing.promotion.discounts import CatalogProduct, apply_promotions_to_products
from pricing.promotion.management import (
    CreatePromotion,
    DeletePromotion,
    TogglePromotion,
    UpdatePromotion,
)
from pricing.promotion.matching import match_promotions
from pricing.promotion.promotion import Promotion
from pricing.shipping.models import Address, CartLineItem
from pricing.shipping.package import estimate_package
from pricing.shipping.resolver import resolve_shipping_options
from pricing.tax.calculator import calculate_tax

shipping_router = APIRouter(prefix="/shipping", tags=["shipping"])
tax_router = APIRouter(prefix="/tax", tags=["tax"])
promotion_router = APIRouter(prefix="/promotions", tags=["promotions"])
admin_promotion_router = APIRouter(prefix="/admin/promotions", tags=["admin"])


# --- Shipping ---


@shipping_router.post("/calculate", response_model=ShippingCalculateResponse)
async def calculate_shipping(body: ShippingCalculateRequest) -> ShippingCalculateResponse:
    if body.shipping_address is None:
        raise InvalidAddressError({"shippingAddress": ["Shipping address is required"]})

    address = body.shipping_address
    destination = Address(
        street=address.street.strip(),
        city=address.city.strip(),
        state=address.state.strip().upper(),
        postal_code=address.postal_code.strip(),
        country=address.country.strip().upper(),
    )
    items = [
        CartLineItem(quantity=item.quantity, unit_weight=item.weight, product_id=item.product_id)
        for item in body.items
    ]

    with internal_errors("shipping calculation"):
        package = estimate_package(items)
        options = await resolve_shipping_options(
            destination,
            package,
            settings=get_shipping_settings(),
            rates=get_rates_config(),
        )

    return ShippingCalculateResponse(
        options=[
            ShippingOptionSchema(
                carrier=option.carrier,
                service_level=option.service_level,
                service_name=option.service_name,
                cost=option.cost,
                currency=option.currency,
                estimated_days=DeliveryWindowSchema(
                    min=option.estimated_days.min,
                    max=option.estimated_days.max,
                ),
            )
            for option in options
        ],
        package_dimensions=PackageDimensionsSchema(**package.to_dict()),
    )


# --- Tax ---


@tax_router.post("/calculate", response_model=TaxCalculateResponse)
async def calculate_tax_endpoint(body: TaxCalculateRequest) -> TaxCalculateResponse:
    with internal_errors("tax calculation"):
        result = calculate_tax(
            get_rates_config(),
            subtotal=body.subtotal,
            shipping=body.shipping,
            country=body.country,
            state=body.state,
            currency=body.currency,
        )

    return TaxCalculateResponse(
        tax_amount=float(result.tax_amount),
        total=float(result.total),
        subtotal=float(result.subtotal),
        shipping=float(result.shipping),
        tax_rate=TaxRateSchema(**result.tax_rate.to_dict()),
        currency=result.currency,
    )


# --- Storefront promotions ---


@promotion_router.get("", response_model=PromotionListResponse)
async def list_promotions(
    product_id: str | None = Query(None, alias="productId"),
    category: str | None = Query(None),
) -> PromotionListResponse:
    with pricing.domain_context(), internal_errors("promotion lookup"):
        candidates = current_domain.repository_for(Promotion).active_promotions()
        promotions = match_promotions(candidates, product_id=product_id, category=category)

    return PromotionListResponse(promotions=[PromotionSchema.from_promotion(p) for p in promotions])


@promotion_router.post("/apply", response_model=ApplyPromotionsResponse)
async def apply_promotions(body: ApplyPromotionsRequest) -> ApplyPromotionsResponse:
    products = [
        CatalogProduct(product_id=product.product_id, category=product.category, price=product.price)
        for product in body.products
    ]

    with pricing.domain_context(), internal_errors("promotion pricing"):
        candidates = current_domain.repository_for(Promotion).active_promotions()
        priced = apply_promotions_to_products(products, match_promotions(candidates), subtotal=body.subtotal)

    return ApplyPromotionsResponse(
        products=[
            PricedProductSchema(
                product_id=item.product_id,
                category=item.category,
                original_price=float(item.original_price),
                discounted_price=float(item.discounted_price),
                discount_amount=float(item.discount_amount),
                promotion_id=str(item.promotion.id) if item.promotion else None,
            )
            for item in priced
        ]
    )


# --- Promotion administration ---


@admin_promotion_router.get("", response_model=PromotionListResponse)
async def list_all_promotions() -> PromotionListResponse:
    with pricing.domain_context(), internal_errors("promotion listing"):
        promotions = current_domain.repository_for(Promotion).all_promotions()
        promotions = sorted(promotions, key=lambda p: (p.priority or 0, p.created_at), reverse=True)

    return PromotionListResponse(promotions=[PromotionSchema.from_promotion(p) for p in promotions])


@admin_promotion_router.post("", status_code=201, response_model=PromotionResponse)
async def create_promotion(body: CreatePromotionRequest) -> PromotionResponse:
    command = CreatePromotion(
        name=body.name,
        description=body.description,
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        applies_to=body.applies_to,
        category=body.category,
        product_ids=json.dumps(body.product_ids),
        start_date=body.start_date,
        end_date=body.end_date,
        is_active=body.is_active,
        priority=body.priority,
        promo_code=body.promo_code,
        min_purchase_amount=body.min_purchase_amount,
        max_uses=body.max_uses,
        banner_text=body.banner_text,
    )
    with pricing.domain_context(), internal_errors("promotion creation"):
        promotion_id = current_domain.process(command, asynchronous=False)
        promotion = current_domain.repository_for(Promotion).get(promotion_id)

    return PromotionResponse(promotion=PromotionSchema.from_promotion(promotion))


@admin_promotion_router.put("/{promotion_id}", response_model=PromotionResponse)
async def update_promotion(promotion_id: str, body: UpdatePromotionRequest) -> PromotionResponse:
    changes = body.model_dump(exclude_unset=True, mode="json")
    with pricing.domain_context(), internal_errors("promotion update"):
        current_domain.process(
            UpdatePromotion(promotion_id=promotion_id, changes=json.dumps(changes)),
            asynchronous=False,
        )
        promotion = current_domain.repository_for(Promotion).get(promotion_id)

    return PromotionResponse(promotion=PromotionSchema.from_promotion(promotion))


@admin_promotion_router.patch("/{promotion_id}/toggle-active", response_model=PromotionResponse)
async def toggle_promotion(promotion_id: str, body: TogglePromotionRequest) -> PromotionResponse:
    with pricing.domain_context(), internal_errors("promotion toggle"):
        current_domain.process(
            TogglePromotion(promotion_id=promotion_id, is_active=body.is_active),
            asynchronous=False,
        )
        promotion = current_domain.repository_for(Promotion).get(promotion_id)

    return PromotionResponse(promotion=PromotionSchema.from_promotion(promotion))


@admin_promotion_router.delete("/{promotion_id}", response_model=StatusResponse)
async def delete_promotion(promotion_id: str) -> StatusResponse:
    with pricing.domain_context(), internal_errors("promotion deletion"):
        current_domain.process(DeletePromotion(promotion_id=promotion_id), asynchronous=False)

    return StatusResponse(message="Promotion deleted")
