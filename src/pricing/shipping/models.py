"""Value types exchanged by the package estimator and shipping resolver."""

from dataclasses import dataclass, field

SUPPORTED_COUNTRIES = ("US", "CA", "MX")


@dataclass(frozen=True)
class Address:
    """Postal address. ``postal_code`` is a ZIP code for US destinations."""

    street: str
    city: str
    state: str
    postal_code: str
    country: str

    def missing_fields(self) -> list[str]:
        """Names of the fields a carrier needs that are blank."""
        return [
            name
            for name in ("street", "city", "state", "postal_code")
            if not (getattr(self, name) or "").strip()
        ]


@dataclass(frozen=True)
class CartLineItem:
    quantity: int
    unit_weight: float | None = None
    product_id: str | None = None


@dataclass(frozen=True)
class PackageDescriptor:
    """Shippable package; weight in pounds, dimensions in inches."""

    weight: float
    length: float
    width: float
    height: float

    def to_dict(self) -> dict:
        return {
            "weight": self.weight,
            "length": self.length,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class DeliveryWindow:
    min: int
    max: int


@dataclass(frozen=True)
class ShippingOption:
    """A costed way to ship the package, priced in ``currency``."""

    carrier: str
    service_level: str
    service_name: str
    cost: float
    currency: str
    estimated_days: DeliveryWindow = field(default_factory=lambda: DeliveryWindow(3, 7))
