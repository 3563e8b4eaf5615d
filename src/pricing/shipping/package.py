"""Package dimension estimation from cart contents."""

import math
from collections.abc import Sequence

from pricing.exceptions import InvalidInputError
from pricing.shipping.models import CartLineItem, PackageDescriptor

DEFAULT_ITEM_WEIGHT = 1.0  # pounds
MINIMUM_WEIGHT = 0.1
MAX_PACKAGE_HEIGHT = 108.0  # USPS length-plus-girth limit
STACK_HEIGHT_PER_PAIR = 6.0

# (max weight, max items, length, width, height), smallest box first
BOX_TIERS = (
    (5.0, 4, 12.0, 10.0, 6.0),
    (20.0, 12, 16.0, 12.0, 10.0),
    (math.inf, 24, 24.0, 18.0, 12.0),
)


def _validate(items: Sequence[CartLineItem]) -> None:
    if not items:
        raise InvalidInputError({"items": ["At least one cart item is required"]})

    for index, item in enumerate(items):
        if item.quantity is None or item.quantity <= 0:
            raise InvalidInputError({f"items[{index}].quantity": ["Quantity must be greater than zero"]})
        if item.unit_weight is not None and item.unit_weight < 0:
            raise InvalidInputError({f"items[{index}].weight": ["Weight cannot be negative"]})


def estimate_package(items: Sequence[CartLineItem]) -> PackageDescriptor:
    """Derive one package's weight and box size from the cart lines.

    Items without a weight count as ``DEFAULT_ITEM_WEIGHT`` pounds each, and so
    do items whose weight is ``0``: a zero weight is read as "not recorded",
    not as weightless. The
    box is the smallest tier fitting both the weight and the item count;
    beyond the largest tier's capacity items are stacked, two per layer,
    up to ``MAX_PACKAGE_HEIGHT``.
    """
    _validate(items)

    total_weight = sum(item.quantity * (item.unit_weight or DEFAULT_ITEM_WEIGHT) for item in items)
    item_count = sum(item.quantity for item in items)

    for max_weight, max_items, length, width, height in BOX_TIERS:
        if total_weight <= max_weight and item_count <= max_items:
            break
        if max_weight == math.inf:
            extra_layers = math.ceil(max(0, item_count - max_items) / 2)
            height += STACK_HEIGHT_PER_PAIR * extra_layers
            break

    return PackageDescriptor(
        weight=round(max(MINIMUM_WEIGHT, total_weight), 2),
        length=length,
        width=width,
        height=min(height, MAX_PACKAGE_HEIGHT),
    )
