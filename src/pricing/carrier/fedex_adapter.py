"""FedEx adapter — OAuth client credentials plus the Rate Quotes API.

FedEx serves every destination. Access tokens are cached on the adapter and
renewed five minutes before they expire.
"""

import time

import httpx
import structlog

from pricing.carrier.port import CarrierQuote, HttpCarrier
from pricing.exceptions import UpstreamServiceError

logger = structlog.get_logger(__name__)

_URLS = {
    "production": ("https://apis.fedex.com/oauth/token", "https://apis.fedex.com/rate/v1/rates/quotes"),
    "sandbox": (
        "https://apis-sandbox.fedex.com/oauth/token",
        "https://apis-sandbox.fedex.com/rate/v1/rates/quotes",
    ),
}

TOKEN_RENEWAL_MARGIN = 5 * 60  # seconds

SERVICE_NAMES = {
    "FEDEX_GROUND": "FedEx Ground",
    "FEDEX_2_DAY": "FedEx 2Day",
    "FEDEX_2_DAY_AM": "FedEx 2Day AM",
    "FEDEX_EXPRESS_SAVER": "FedEx Express Saver",
    "STANDARD_OVERNIGHT": "FedEx Standard Overnight",
    "PRIORITY_OVERNIGHT": "FedEx Priority Overnight",
    "FIRST_OVERNIGHT": "FedEx First Overnight",
    "FEDEX_INTERNATIONAL_ECONOMY": "FedEx International Economy",
    "FEDEX_INTERNATIONAL_PRIORITY": "FedEx International Priority",
    "FEDEX_INTERNATIONAL_FIRST": "FedEx International First",
    "INTERNATIONAL_ECONOMY": "FedEx International Economy",
    "INTERNATIONAL_PRIORITY": "FedEx International Priority",
    "INTERNATIONAL_FIRST": "FedEx International First",
}

_DELIVERY_DAYS = {
    "FEDEX_GROUND": (3, 7),
    "FEDEX_2_DAY": (2, 2),
    "FEDEX_2_DAY_AM": (2, 2),
    "FEDEX_EXPRESS_SAVER": (3, 3),
    "STANDARD_OVERNIGHT": (1, 1),
    "PRIORITY_OVERNIGHT": (1, 1),
    "FIRST_OVERNIGHT": (1, 1),
    "FEDEX_INTERNATIONAL_ECONOMY": (4, 6),
    "INTERNATIONAL_ECONOMY": (4, 6),
    "FEDEX_INTERNATIONAL_PRIORITY": (1, 3),
    "INTERNATIONAL_PRIORITY": (1, 3),
    "FEDEX_INTERNATIONAL_FIRST": (1, 2),
    "INTERNATIONAL_FIRST": (1, 2),
}


def service_name(service_type: str) -> str:
    return SERVICE_NAMES.get(service_type, service_type.replace("_", " "))


def _address_payload(address) -> dict:
    return {
        "streetLines": [address.street],
        "city": address.city,
        "stateOrProvinceCode": address.state,
        "postalCode": address.postal_code,
        "countryCode": address.country,
    }


def build_rate_request(account_number: str, origin, destination, package) -> dict:
    return {
        "accountNumber": {"value": account_number},
        "requestedShipment": {
            "shipper": {"address": _address_payload(origin)},
            "recipients": [{"address": _address_payload(destination)}],
            "pickupType": "DROPOFF_AT_FEDEX_LOCATION",
            "rateRequestType": ["ACCOUNT", "LIST"],
            "requestedPackageLineItems": [
                {
                    "weight": {"units": "LB", "value": max(0.1, package.weight)},
                    "dimensions": {
                        "length": package.length,
                        "width": package.width,
                        "height": package.height,
                        "units": "IN",
                    },
                }
            ],
        },
    }


def parse_rate_response(data: dict) -> list[CarrierQuote]:
    quotes = []
    for detail in (data.get("output") or {}).get("rateReplyDetails") or []:
        service_type = detail.get("serviceType") or "UNKNOWN"
        min_days, max_days = _DELIVERY_DAYS.get(service_type, (3, 7))

        for shipment in detail.get("ratedShipmentDetails") or []:
            charge = shipment.get("totalNetCharge")
            if isinstance(charge, dict):
                charge = charge.get("amount")
            if not charge:
                continue
            quotes.append(
                CarrierQuote(
                    carrier="FedEx",
                    service_level=service_type.lower(),
                    service_name=service_name(service_type),
                    price=float(charge),
                    min_days=min_days,
                    max_days=max_days,
                )
            )

    return sorted(quotes, key=lambda quote: quote.price)


class FedExCarrier(HttpCarrier):
    name = "FedEx"

    def __init__(
        self,
        api_key: str | None,
        api_secret: str | None,
        account_number: str | None,
        environment: str = "production",
        oauth_url: str | None = None,
        rate_url: str | None = None,
        client=None,
        timeout: float = 10.0,
    ):
        super().__init__(client=client, timeout=timeout)
        self.api_key = api_key
        self.api_secret = api_secret
        self.account_number = account_number

        default_oauth, default_rate = _URLS["production" if environment == "production" else "sandbox"]
        self.oauth_url = oauth_url or default_oauth
        self.rate_url = rate_url or default_rate

        self._token: str | None = None
        self._token_expires_at = 0.0

    def serves(self, _origin_country: str, _destination_country: str) -> bool:
        return True

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        if self._token and time.monotonic() < self._token_expires_at - TOKEN_RENEWAL_MARGIN:
            return self._token

        response = await client.post(
            self.oauth_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.api_key,
                "client_secret": self.api_secret,
            },
        )
        if response.is_error:
            raise UpstreamServiceError(self.name, f"OAuth failed: {response.status_code} {response.text[:200]}")

        try:
            payload = response.json()
            token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 3600))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise UpstreamServiceError(self.name, f"Malformed OAuth response: {exc!r}") from exc

        self._token = token
        self._token_expires_at = time.monotonic() + expires_in
        return self._token

    async def fetch_rates(self, origin, destination, package) -> list[CarrierQuote]:
        if not (self.api_key and self.api_secret and self.account_number):
            raise UpstreamServiceError(self.name, "FedEx credentials not configured")

        try:
            async with self.http_client() as client:
                token = await self._access_token(client)
                response = await client.post(
                    self.rate_url,
                    json=build_rate_request(self.account_number, origin, destination, package),
                    headers={"Authorization": f"Bearer {token}", "X-locale": "en_US"},
                )
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(self.name, f"Rate request failed: {exc}") from exc

        if response.is_error:
            raise UpstreamServiceError(self.name, f"Rate API error: {response.status_code} {response.text[:200]}")

        try:
            quotes = parse_rate_response(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise UpstreamServiceError(self.name, f"Malformed rate response: {exc!r}") from exc

        logger.debug("fedex_rates_received", count=len(quotes), destination_country=destination.country)
        return quotes
