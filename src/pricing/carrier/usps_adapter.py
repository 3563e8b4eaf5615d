"""USPS adapter — RateV4 web tools API.

USPS quotes domestic US shipments only through RateV4; international
destinations it serves still fail here and the resolver moves on.
"""

import math
import xml.etree.ElementTree as ET

import httpx
import structlog

from pricing.carrier.port import CarrierQuote, HttpCarrier
from pricing.exceptions import UpstreamServiceError
from pricing.rates.tables import USPS_INTERNATIONAL_COUNTRIES

logger = structlog.get_logger(__name__)

PRODUCTION_URL = "https://secure.shippingapis.com/ShippingAPI.dll"
TEST_URL = "https://stg-secure.shippingapis.com/ShippingAPI.dll"

MAX_WEIGHT_LBS = 70
MAX_DIMENSION_IN = 108

SERVICE_NAMES = {
    "0": "First-Class Mail",
    "1": "Priority Mail",
    "2": "Priority Mail Express",
    "3": "Parcel Post",
    "4": "Media Mail",
    "6": "Library Mail",
    "7": "Priority Mail Express International",
    "8": "Priority Mail International",
    "9": "First-Class Mail International",
}

_DELIVERY_DAYS = {
    "2": (1, 2),
    "7": (1, 2),
    "1": (2, 5),
    "8": (2, 5),
    "0": (3, 7),
    "9": (3, 7),
    "3": (5, 10),
}


def build_rate_request(user_id: str, origin_zip: str, destination_zip: str, package) -> str:
    """Render the RateV4 XML document for one package."""
    ounces = math.ceil(min(package.weight, MAX_WEIGHT_LBS) * 16)

    root = ET.Element("RateV4Request", USERID=user_id)
    ET.SubElement(root, "Revision").text = "2"
    pkg = ET.SubElement(root, "Package", ID="1")
    ET.SubElement(pkg, "Service").text = "ALL"
    ET.SubElement(pkg, "ZipOrigination").text = origin_zip[:5]
    ET.SubElement(pkg, "ZipDestination").text = destination_zip[:5]
    ET.SubElement(pkg, "Pounds").text = str(ounces // 16)
    ET.SubElement(pkg, "Ounces").text = str(ounces % 16)
    ET.SubElement(pkg, "Size").text = "REGULAR"
    for tag, value in (("Length", package.length), ("Width", package.width), ("Height", package.height)):
        ET.SubElement(pkg, tag).text = f"{min(value, MAX_DIMENSION_IN):g}"
    ET.SubElement(pkg, "Machinable").text = "true"
    return ET.tostring(root, encoding="unicode")


def parse_rate_response(body: str) -> list[CarrierQuote]:
    """Extract quotes from a RateV4 response, raising on USPS error documents."""
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise UpstreamServiceError("USPS", f"Malformed response: {exc}") from exc

    error = root if root.tag == "Error" else root.find(".//Error")
    if error is not None:
        description = error.findtext("Description") or "Unknown error"
        raise UpstreamServiceError("USPS", description)

    quotes = []
    for postage in root.iter("Postage"):
        class_id = postage.get("CLASSID", "")
        try:
            rate = float(postage.findtext("Rate") or 0)
        except ValueError:
            continue
        if rate <= 0 or not class_id:
            continue

        min_days, max_days = _DELIVERY_DAYS.get(class_id, (3, 7))
        quotes.append(
            CarrierQuote(
                carrier="USPS",
                service_level=f"usps_{class_id}",
                service_name=postage.findtext("MailService") or SERVICE_NAMES.get(class_id, class_id),
                price=rate,
                min_days=min_days,
                max_days=max_days,
            )
        )

    return sorted(quotes, key=lambda quote: quote.price)


class UspsCarrier(HttpCarrier):
    name = "USPS"

    def __init__(self, user_id: str | None, environment: str = "production", client=None, timeout: float = 10.0):
        super().__init__(client=client, timeout=timeout)
        self.user_id = user_id
        self.url = PRODUCTION_URL if environment == "production" else TEST_URL

    def serves(self, origin_country: str, destination_country: str) -> bool:
        if origin_country == destination_country:
            return True
        return origin_country == "US" and destination_country in USPS_INTERNATIONAL_COUNTRIES

    async def fetch_rates(self, origin, destination, package) -> list[CarrierQuote]:
        if not self.user_id:
            raise UpstreamServiceError(self.name, "USPS user id not configured")
        if origin.country != "US" or destination.country != "US":
            raise UpstreamServiceError(self.name, "RateV4 only supports US addresses")

        xml_request = build_rate_request(self.user_id, origin.postal_code, destination.postal_code, package)

        try:
            async with self.http_client() as client:
                response = await client.get(self.url, params={"API": "RateV4", "XML": xml_request})
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(self.name, f"Rate request failed: {exc}") from exc

        quotes = parse_rate_response(response.text)
        logger.debug("usps_rates_received", count=len(quotes), destination_zip=destination.postal_code[:5])
        return quotes
