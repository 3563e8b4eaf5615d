"""Application tests for promotion management handlers."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from pricing.promotion.management import (
    CreatePromotion,
    DeletePromotion,
    RecordPromotionRedemption,
    TogglePromotion,
    UpdatePromotion,
)
from pricing.promotion.matching import match_promotions
from pricing.promotion.promotion import Promotion
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

NOW = datetime.now(UTC)


def _create_promotion(**overrides):
    defaults = {
        "name": "Spring Sale",
        "discount_type": "percentage",
        "discount_value": 15,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=30),
    }
    defaults.update(overrides)
    command = CreatePromotion(**defaults)
    return current_domain.process(command, asynchronous=False)


def _get(promotion_id):
    return current_domain.repository_for(Promotion).get(promotion_id)


class TestCreatePromotionHandler:
    def test_create_store_wide_promotion(self):
        promotion_id = _create_promotion()
        assert promotion_id is not None

        promotion = _get(promotion_id)
        assert promotion.name == "Spring Sale"
        assert promotion.applies_to == "all"
        assert promotion.is_active is True

    def test_create_product_list_promotion(self):
        promotion_id = _create_promotion(applies_to="products", product_ids=json.dumps(["p1", "p2"]))
        assert _get(promotion_id).product_id_list == ["p1", "p2"]

    def test_invalid_promotion_is_not_stored(self):
        with pytest.raises(ValidationError):
            _create_promotion(applies_to="category")

        assert current_domain.repository_for(Promotion).all_promotions() == []


class TestUpdatePromotionHandler:
    def test_partial_update(self):
        promotion_id = _create_promotion()
        current_domain.process(
            UpdatePromotion(promotion_id=promotion_id, changes=json.dumps({"priority": 7, "banner_text": "Hurry!"})),
            asynchronous=False,
        )

        promotion = _get(promotion_id)
        assert promotion.priority == 7
        assert promotion.banner_text == "Hurry!"
        assert promotion.name == "Spring Sale"

    def test_zero_usage_cap_means_unlimited(self):
        promotion_id = _create_promotion(max_uses=5)
        current_domain.process(
            UpdatePromotion(promotion_id=promotion_id, changes=json.dumps({"max_uses": 0})),
            asynchronous=False,
        )

        promotion = _get(promotion_id)
        assert promotion.max_uses is None
        assert promotion.usage_exhausted() is False

        matched = match_promotions(current_domain.repository_for(Promotion).all_promotions())
        assert [match.id for match in matched] == [promotion_id]

    def test_update_unknown_promotion(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdatePromotion(promotion_id="missing", changes=json.dumps({"priority": 1})),
                asynchronous=False,
            )


class TestTogglePromotionHandler:
    def test_deactivate(self):
        promotion_id = _create_promotion()
        current_domain.process(TogglePromotion(promotion_id=promotion_id, is_active=False), asynchronous=False)
        assert _get(promotion_id).is_active is False

    def test_toggle_to_current_state_is_a_no_op(self):
        promotion_id = _create_promotion()
        current_domain.process(TogglePromotion(promotion_id=promotion_id, is_active=True), asynchronous=False)
        assert _get(promotion_id).is_active is True


class TestDeletePromotionHandler:
    def test_delete(self):
        promotion_id = _create_promotion()
        current_domain.process(DeletePromotion(promotion_id=promotion_id), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            _get(promotion_id)


class TestRecordRedemptionHandler:
    def test_redemptions_are_counted_up_to_the_limit(self):
        promotion_id = _create_promotion(max_uses=2)
        for _ in range(2):
            current_domain.process(RecordPromotionRedemption(promotion_id=promotion_id), asynchronous=False)

        assert _get(promotion_id).current_uses == 2

        with pytest.raises(ValidationError):
            current_domain.process(RecordPromotionRedemption(promotion_id=promotion_id), asynchronous=False)


class TestPromotionRepository:
    def test_active_promotions(self):
        active_id = _create_promotion(name="Active")
        _create_promotion(name="Paused", is_active=False)

        active = current_domain.repository_for(Promotion).active_promotions()
        assert [promotion.id for promotion in active] == [active_id]
