"""Fake carrier adapter — deterministic rates for testing and development.

Prices follow a base-plus-weight formula so results depend on the package.
Can be configured to fail or stall to exercise the resolver's isolation of
carrier errors and timeouts.
"""

import asyncio

from pricing.carrier.port import CarrierQuote, CarrierRatePort
from pricing.exceptions import UpstreamServiceError

# service level -> (name, base USD, per-pound USD, min days, max days)
_SERVICES = {
    "fake_ground": ("Fake Ground", 6.0, 0.5, 4, 7),
    "fake_express": ("Fake Express", 14.0, 0.9, 1, 2),
}


class FakeCarrier(CarrierRatePort):
    """Fake carrier that quotes every destination by default."""

    def __init__(self, name: str = "FakeCarrier"):
        self.name = name
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.delay = 0.0
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Carrier unavailable", delay: float = 0.0):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.delay = delay

    def serves(self, _origin_country: str, _destination_country: str) -> bool:
        return True

    async def fetch_rates(self, origin, destination, package) -> list[CarrierQuote]:
        self.calls.append({"origin": origin, "destination": destination, "package": package})

        if self.delay:
            await asyncio.sleep(self.delay)

        if not self.should_succeed:
            raise UpstreamServiceError(self.name, self.failure_reason)

        return [
            CarrierQuote(
                carrier=self.name,
                service_level=level,
                service_name=service_name,
                price=round(base + per_pound * package.weight, 2),
                min_days=min_days,
                max_days=max_days,
            )
            for level, (service_name, base, per_pound, min_days, max_days) in _SERVICES.items()
        ]
