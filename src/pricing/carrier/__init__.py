"""Carrier adapter factory — builds the rate adapters named in settings."""

import structlog

from pricing.carrier.fake_adapter import FakeCarrier
from pricing.carrier.fedex_adapter import FedExCarrier
from pricing.carrier.port import CarrierQuote, CarrierRatePort
from pricing.carrier.usps_adapter import UspsCarrier
from pricing.config import ShippingSettings, get_shipping_settings

logger = structlog.get_logger(__name__)

__all__ = ["CarrierQuote", "CarrierRatePort", "build_carriers", "get_carriers", "reset_carriers", "set_carriers"]

_carriers: list[CarrierRatePort] | None = None


def build_carriers(settings: ShippingSettings) -> list[CarrierRatePort]:
    """Instantiate the adapters listed in ``settings.carrier_adapters``."""
    carriers: list[CarrierRatePort] = []
    for adapter in settings.carrier_adapters:
        if adapter == "usps":
            carriers.append(
                UspsCarrier(
                    user_id=settings.usps_user_id,
                    environment=settings.usps_environment,
                    timeout=settings.carrier_timeout,
                )
            )
        elif adapter == "fedex":
            carriers.append(
                FedExCarrier(
                    api_key=settings.fedex_api_key,
                    api_secret=settings.fedex_api_secret,
                    account_number=settings.fedex_account_number,
                    environment=settings.fedex_environment,
                    oauth_url=settings.fedex_oauth_url,
                    rate_url=settings.fedex_rate_url,
                    timeout=settings.carrier_timeout,
                )
            )
        elif adapter == "fake":
            carriers.append(FakeCarrier())
        else:
            raise ValueError(f"Unknown carrier adapter: {adapter}")
    return carriers


def get_carriers() -> list[CarrierRatePort]:
    """Return the configured carrier adapters (built once per process)."""
    global _carriers
    if _carriers is None:
        _carriers = build_carriers(get_shipping_settings())
        logger.info("carriers_configured", carriers=[carrier.name for carrier in _carriers])
    return _carriers


def set_carriers(carriers: list[CarrierRatePort]) -> None:
    """Override the active carrier adapters (useful for tests)."""
    global _carriers
    _carriers = list(carriers)


def reset_carriers() -> None:
    global _carriers
    _carriers = None
