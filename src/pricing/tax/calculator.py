"""Sales tax calculation by country and state/province.

Tax applies to subtotal plus shipping. A configured (country, state) rate
always wins; otherwise the country default applies, and unlisted countries
are not taxed.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from pricing.config import RatesConfig
from pricing.exceptions import InvalidAmountError, InvalidInputError
from pricing.shared.money import round_money, to_decimal


@dataclass(frozen=True)
class TaxRate:
    country: str
    rate: float  # percent
    name: str
    state: str | None = None

    def to_dict(self) -> dict:
        return {"country": self.country, "state": self.state, "rate": self.rate, "name": self.name}


@dataclass(frozen=True)
class TaxResult:
    """Amounts are exact decimals so ``total == subtotal + shipping + tax_amount``."""

    subtotal: Decimal
    shipping: Decimal
    tax_amount: Decimal
    total: Decimal
    tax_rate: TaxRate
    currency: str


def lookup_tax_rate(rates: RatesConfig, country: str, state: str | None = None) -> TaxRate:
    """Find the most specific configured rate for the jurisdiction."""
    country = country.strip().upper()
    normalized_state = state.strip().upper() if state else None

    if normalized_state:
        specific = rates.state_tax_rates.get((country, normalized_state))
        if specific is not None:
            rate, name = specific
            return TaxRate(country=country, state=normalized_state, rate=rate, name=name)

    default = rates.country_tax_rates.get(country)
    if default is not None:
        rate, name = default
        return TaxRate(country=country, rate=rate, name=name)

    return TaxRate(country=country, rate=0.0, name="No Tax")


def calculate_tax(
    rates: RatesConfig,
    subtotal: float,
    shipping: float,
    country: str | None,
    state: str | None = None,
    currency: str | None = None,
) -> TaxResult:
    """Compute tax on ``subtotal + shipping`` rounded to cents, and the total.

    ``currency`` labels the result; it defaults to the destination country's
    currency.
    """
    if not country or not country.strip():
        raise InvalidInputError({"country": ["Country is required"]})
    if subtotal is None or shipping is None:
        raise InvalidInputError({"amount": ["Subtotal and shipping are required"]})

    errors = {}
    for field, amount in (("subtotal", subtotal), ("shipping", shipping)):
        if not math.isfinite(amount):
            errors[field] = [f"{field.capitalize()} must be a finite number"]
    if errors:
        raise InvalidAmountError(errors)

    if subtotal < 0:
        errors["subtotal"] = ["Subtotal cannot be negative"]
    if shipping < 0:
        errors["shipping"] = ["Shipping cannot be negative"]
    if errors:
        raise InvalidAmountError(errors)

    tax_rate = lookup_tax_rate(rates, country, state)

    result_currency = (currency or rates.currency_for(tax_rate.country)).upper()
    rates.exchange_rate(result_currency)  # rejects unknown currencies

    subtotal_d = to_decimal(subtotal)
    shipping_d = to_decimal(shipping)
    tax_amount = round_money((subtotal_d + shipping_d) * to_decimal(tax_rate.rate) / 100)
    total = subtotal_d + shipping_d + tax_amount

    return TaxResult(
        subtotal=subtotal_d,
        shipping=shipping_d,
        tax_amount=tax_amount,
        total=total,
        tax_rate=tax_rate,
        currency=result_currency,
    )
