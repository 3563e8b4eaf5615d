"""Promotion administration — commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from pricing.domain import pricing
from pricing.promotion.promotion import Promotion


@pricing.command(part_of="Promotion")
class CreatePromotion:
    name: String(required=True, max_length=200)
    description: Text()
    discount_type: String(required=True)
    discount_value: Float(required=True)
    applies_to: String(default="all")
    category: String(max_length=100)
    product_ids: Text()  # JSON array
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    is_active: Boolean(default=True)
    priority: Integer(default=0)
    promo_code: String(max_length=50)
    min_purchase_amount: Float(default=0.0)
    max_uses: Integer()
    banner_text: String(max_length=255)


@pricing.command(part_of="Promotion")
class UpdatePromotion:
    """Partial update; ``changes`` is a JSON object of editable fields."""

    promotion_id: Identifier(required=True)
    changes: Text(required=True)


@pricing.command(part_of="Promotion")
class TogglePromotion:
    promotion_id: Identifier(required=True)
    is_active: Boolean(required=True)


@pricing.command(part_of="Promotion")
class DeletePromotion:
    promotion_id: Identifier(required=True)


@pricing.command(part_of="Promotion")
class RecordPromotionRedemption:
    promotion_id: Identifier(required=True)


@pricing.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        promotion = Promotion.create(
            name=command.name,
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            applies_to=command.applies_to,
            category=command.category,
            product_ids=json.loads(command.product_ids) if command.product_ids else [],
            start_date=command.start_date,
            end_date=command.end_date,
            is_active=command.is_active,
            priority=command.priority,
            promo_code=command.promo_code,
            min_purchase_amount=command.min_purchase_amount,
            max_uses=command.max_uses,
            banner_text=command.banner_text,
        )
        current_domain.repository_for(Promotion).add(promotion)
        return str(promotion.id)

    @handle(UpdatePromotion)
    def update_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.update_details(**json.loads(command.changes))
        repo.add(promotion)

    @handle(TogglePromotion)
    def toggle_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        if command.is_active == promotion.is_active:
            return
        if command.is_active:
            promotion.activate()
        else:
            promotion.deactivate()
        repo.add(promotion)

    @handle(DeletePromotion)
    def delete_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        repo.remove(promotion)

    @handle(RecordPromotionRedemption)
    def record_redemption(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.record_redemption()
        repo.add(promotion)
