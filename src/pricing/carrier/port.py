"""Carrier rate port — abstract interface for shipping rate lookups.

The shipping resolver programs against this port; adapters for real
carrier APIs and the fake used in development are swapped via settings.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from pricing.shipping.models import Address, PackageDescriptor


@dataclass(frozen=True)
class CarrierQuote:
    """One service-level price returned by a carrier, in USD."""

    carrier: str
    service_level: str
    service_name: str
    price: float
    min_days: int = 3
    max_days: int = 7


class CarrierRatePort(ABC):
    """Abstract interface for carrier rate adapters."""

    name: str = "carrier"

    @abstractmethod
    def serves(self, origin_country: str, destination_country: str) -> bool:
        """Whether this carrier ships between the two countries."""
        ...

    @abstractmethod
    async def fetch_rates(
        self,
        origin: Address,
        destination: Address,
        package: PackageDescriptor,
    ) -> list[CarrierQuote]:
        """Quote every service level for the package.

        Raises:
            UpstreamServiceError: credentials missing or the carrier API failed.
        """
        ...


class HttpCarrier(CarrierRatePort):
    """Base for adapters calling a carrier's HTTP API.

    An injected ``httpx.AsyncClient`` is reused as-is (and never closed here);
    otherwise a short-lived client is opened per lookup.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 10.0):
        self._client = client
        self.timeout = timeout

    @asynccontextmanager
    async def http_client(self):
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client
