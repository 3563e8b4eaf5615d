"""Shipping option resolution.

Carrier lookups fan out concurrently, each bounded by the configured
timeout. A failing or slow carrier only drops its own options; when no
carrier yields anything the destination's flat rate is offered instead.
"""

import asyncio

import httpx
import structlog

from pricing.carrier import get_carriers
from pricing.carrier.port import CarrierQuote, CarrierRatePort
from pricing.config import RatesConfig, ShippingSettings
from pricing.exceptions import InvalidAddressError, UpstreamServiceError
from pricing.shared.money import round_money, to_decimal
from pricing.shipping.models import (
    SUPPORTED_COUNTRIES,
    Address,
    DeliveryWindow,
    PackageDescriptor,
    ShippingOption,
)

logger = structlog.get_logger(__name__)

FLAT_RATE_CARRIER = "Flat Rate"


def validate_destination(destination: Address) -> None:
    missing = destination.missing_fields()
    if missing:
        raise InvalidAddressError({field: ["Required for shipping calculation"] for field in missing})
    if destination.country not in SUPPORTED_COUNTRIES:
        raise InvalidAddressError(
            {"country": [f"Shipping is only available to {', '.join(SUPPORTED_COUNTRIES)}"]}
        )


async def _quote_carrier(
    carrier: CarrierRatePort,
    origin: Address,
    destination: Address,
    package: PackageDescriptor,
    timeout: float,
) -> list[CarrierQuote]:
    try:
        return await asyncio.wait_for(carrier.fetch_rates(origin, destination, package), timeout)
    except TimeoutError:
        logger.warning("carrier_timed_out", carrier=carrier.name, timeout=timeout)
    except (UpstreamServiceError, httpx.HTTPError) as exc:
        logger.warning("carrier_rates_unavailable", carrier=carrier.name, reason=str(exc))
    except Exception:
        logger.exception("carrier_adapter_failed", carrier=carrier.name)
    return []


def flat_rate_quotes(country: str, rates: RatesConfig) -> list[CarrierQuote]:
    flat = rates.flat_rates.get(country)
    if flat is None:
        return []
    return [
        CarrierQuote(
            carrier=FLAT_RATE_CARRIER,
            service_level="flat_rate",
            service_name=f"Standard Shipping ({country})",
            price=flat.cost,
            min_days=flat.min_days,
            max_days=flat.max_days,
        )
    ]


async def resolve_shipping_options(
    destination: Address,
    package: PackageDescriptor,
    settings: ShippingSettings,
    rates: RatesConfig,
    carriers: list[CarrierRatePort] | None = None,
) -> list[ShippingOption]:
    """Quote every way to ship ``package`` to ``destination``, cheapest first.

    Costs are presented in the destination country's currency. An empty list
    means nothing could be quoted; it is not an error.
    """
    validate_destination(destination)

    if carriers is None:
        carriers = get_carriers()

    origin = settings.origin
    eligible = [carrier for carrier in carriers if carrier.serves(origin.country, destination.country)]

    results = await asyncio.gather(
        *(_quote_carrier(carrier, origin, destination, package, settings.carrier_timeout) for carrier in eligible)
    )
    quotes = [quote for carrier_quotes in results for quote in carrier_quotes]

    if not quotes:
        quotes = flat_rate_quotes(destination.country, rates)
        if quotes:
            logger.info("flat_rate_fallback", country=destination.country, carriers=[c.name for c in eligible])
        else:
            logger.warning("no_shipping_options", country=destination.country)

    currency = rates.currency_for(destination.country)
    exchange_rate = to_decimal(rates.exchange_rate(currency))

    options = [
        ShippingOption(
            carrier=quote.carrier,
            service_level=quote.service_level,
            service_name=quote.service_name,
            cost=float(round_money(to_decimal(quote.price) * exchange_rate)),
            currency=currency,
            estimated_days=DeliveryWindow(min=quote.min_days, max=quote.max_days),
        )
        for quote in quotes
    ]
    return sorted(options, key=lambda option: option.cost)
