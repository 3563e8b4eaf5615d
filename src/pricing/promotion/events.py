"""Domain events for the Promotion aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from pricing.domain import pricing


@pricing.event(part_of="Promotion")
class PromotionCreated:
    """An admin scheduled a new promotion."""

    __version__ = 1

    promotion_id: Identifier(required=True)
    name: String(required=True)
    discount_type: String(required=True)
    discount_value: Float(required=True)
    applies_to: String(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)


@pricing.event(part_of="Promotion")
class PromotionUpdated:
    """Promotion details were edited. ``changed_fields`` is a JSON list."""

    __version__ = 1

    promotion_id: Identifier(required=True)
    changed_fields: Text()


@pricing.event(part_of="Promotion")
class PromotionActivated:
    __version__ = 1

    promotion_id: Identifier(required=True)


@pricing.event(part_of="Promotion")
class PromotionDeactivated:
    __version__ = 1

    promotion_id: Identifier(required=True)


@pricing.event(part_of="Promotion")
class PromotionRedeemed:
    """A checkout used the promotion."""

    __version__ = 1

    promotion_id: Identifier(required=True)
    current_uses: Integer(required=True)
