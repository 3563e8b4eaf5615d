"""Shared BDD fixtures and step definitions for the Pricing domain."""

from datetime import UTC, datetime, timedelta

import pytest
from pricing.promotion.events import (
    PromotionActivated,
    PromotionCreated,
    PromotionDeactivated,
    PromotionRedeemed,
    PromotionUpdated,
)
from pricing.promotion.promotion import Promotion
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup
_PROMOTION_EVENT_CLASSES = {
    "PromotionCreated": PromotionCreated,
    "PromotionUpdated": PromotionUpdated,
    "PromotionActivated": PromotionActivated,
    "PromotionDeactivated": PromotionDeactivated,
    "PromotionRedeemed": PromotionRedeemed,
}


def running_promotion(name="Store promotion", **overrides):
    now = datetime.now(UTC)
    defaults = {
        "name": name,
        "discount_type": "percentage",
        "discount_value": 10,
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=7),
    }
    defaults.update(overrides)
    return Promotion.create(**defaults)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def promotions():
    return []


# ---------------------------------------------------------------------------
# Given steps: Promotion
# ---------------------------------------------------------------------------
@given("a running store-wide promotion", target_fixture="promotion")
def store_wide_promotion():
    return running_promotion()


@given("a paused store-wide promotion", target_fixture="promotion")
def paused_promotion():
    promotion = running_promotion(is_active=False)
    promotion._events.clear()
    return promotion


@given(
    parsers.cfparse("a running store-wide promotion limited to {max_uses:d} uses"),
    target_fixture="promotion",
)
def limited_promotion(max_uses):
    promotion = running_promotion(max_uses=max_uses)
    promotion._events.clear()
    return promotion


@given(parsers.cfparse('a running store-wide promotion "{name}" with priority {priority:d}'))
def prioritised_promotion(promotions, name, priority):
    promotions.append(running_promotion(name=name, priority=priority))


@given(parsers.cfparse('a running category promotion "{name}" for "{category}"'))
def category_promotion(promotions, name, category):
    promotions.append(running_promotion(name=name, applies_to="category", category=category))


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("the calculation fails with a validation error")
def calculation_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} promotion event is raised"))
def promotion_event_raised(promotion, event_type):
    event_cls = _PROMOTION_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in promotion._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in promotion._events]}"
