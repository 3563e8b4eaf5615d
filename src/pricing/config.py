"""Runtime configuration for pricing calculations.

Rate tables are wrapped once into an immutable ``RatesConfig`` and passed
explicitly to the calculators. Shipping settings (origin address, carrier
credentials) are read from the environment.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from pricing.exceptions import InvalidInputError
from pricing.rates import tables
from pricing.shipping.models import Address


@dataclass(frozen=True)
class FlatRate:
    cost: float
    min_days: int
    max_days: int


@dataclass(frozen=True)
class RatesConfig:
    """Read-only tax, flat-rate and exchange-rate tables."""

    state_tax_rates: Mapping[tuple[str, str], tuple[float, str]]
    country_tax_rates: Mapping[str, tuple[float, str]]
    flat_rates: Mapping[str, FlatRate]
    exchange_rates: Mapping[str, float]
    country_currencies: Mapping[str, str]

    def currency_for(self, country: str) -> str:
        return self.country_currencies.get(country, "USD")

    def exchange_rate(self, currency: str) -> float:
        try:
            return self.exchange_rates[currency]
        except KeyError:
            raise InvalidInputError({"currency": [f"Unsupported currency: {currency}"]}) from None


@dataclass(frozen=True)
class ShippingSettings:
    origin: Address
    carrier_adapters: tuple[str, ...] = ("usps", "fedex")
    carrier_timeout: float = 10.0
    usps_user_id: str | None = None
    usps_environment: str = "production"
    fedex_api_key: str | None = None
    fedex_api_secret: str | None = None
    fedex_account_number: str | None = None
    fedex_environment: str = "production"
    fedex_oauth_url: str | None = None
    fedex_rate_url: str | None = None


def load_rates_config(
    state_tax_rates=None,
    country_tax_rates=None,
    flat_rates=None,
    exchange_rates=None,
) -> RatesConfig:
    """Build a ``RatesConfig`` from the static tables, with optional overrides."""
    if state_tax_rates is None:
        state_tax_rates = tables.STATE_TAX_RATES
    if country_tax_rates is None:
        country_tax_rates = tables.COUNTRY_DEFAULT_TAX_RATES
    if flat_rates is None:
        flat_rates = tables.FLAT_SHIPPING_RATES
    if exchange_rates is None:
        exchange_rates = tables.EXCHANGE_RATES

    return RatesConfig(
        state_tax_rates=MappingProxyType(dict(state_tax_rates)),
        country_tax_rates=MappingProxyType(dict(country_tax_rates)),
        flat_rates=MappingProxyType({country: FlatRate(*entry) for country, entry in flat_rates.items()}),
        exchange_rates=MappingProxyType(dict(exchange_rates)),
        country_currencies=MappingProxyType(dict(tables.COUNTRY_CURRENCIES)),
    )


def load_shipping_settings() -> ShippingSettings:
    """Read origin address and carrier credentials from the environment."""
    origin = Address(
        street=os.environ.get("SHIPPING_ORIGIN_STREET", "123 Main St"),
        city=os.environ.get("SHIPPING_ORIGIN_CITY", "New York"),
        state=os.environ.get("SHIPPING_ORIGIN_STATE", "NY"),
        postal_code=os.environ.get("SHIPPING_ORIGIN_ZIP", "10001"),
        country=os.environ.get("SHIPPING_ORIGIN_COUNTRY", "US"),
    )
    adapters = os.environ.get("CARRIER_ADAPTERS", "usps,fedex")
    return ShippingSettings(
        origin=origin,
        carrier_adapters=tuple(name.strip().lower() for name in adapters.split(",") if name.strip()),
        carrier_timeout=float(os.environ.get("CARRIER_TIMEOUT_SECONDS", "10")),
        usps_user_id=os.environ.get("USPS_USER_ID") or None,
        usps_environment=os.environ.get("USPS_ENVIRONMENT", "production"),
        fedex_api_key=os.environ.get("FEDEX_API_KEY") or None,
        fedex_api_secret=os.environ.get("FEDEX_API_SECRET") or None,
        fedex_account_number=os.environ.get("FEDEX_ACCOUNT_NUMBER") or None,
        fedex_environment=os.environ.get("FEDEX_ENVIRONMENT", "production"),
        fedex_oauth_url=os.environ.get("FEDEX_OAUTH_URL") or None,
        fedex_rate_url=os.environ.get("FEDEX_RATE_URL") or None,
    )


_rates_config: RatesConfig | None = None
_shipping_settings: ShippingSettings | None = None


def get_rates_config() -> RatesConfig:
    """Return the process-wide rates configuration, loading it on first use."""
    global _rates_config
    if _rates_config is None:
        _rates_config = load_rates_config()
    return _rates_config


def get_shipping_settings() -> ShippingSettings:
    global _shipping_settings
    if _shipping_settings is None:
        _shipping_settings = load_shipping_settings()
    return _shipping_settings


def reset_config() -> None:
    """Forget cached configuration (useful for testing)."""
    global _rates_config, _shipping_settings
    _rates_config = None
    _shipping_settings = None
