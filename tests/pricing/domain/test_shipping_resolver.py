"""Tests for shipping option resolution across carriers."""

import asyncio

import pytest
from pricing.carrier import set_carriers
from pricing.carrier.fake_adapter import FakeCarrier
from pricing.config import ShippingSettings, load_rates_config
from pricing.exceptions import InvalidAddressError
from pricing.shipping.models import Address, DeliveryWindow, PackageDescriptor
from pricing.shipping.resolver import flat_rate_quotes, resolve_shipping_options

PACKAGE = PackageDescriptor(weight=2.0, length=12.0, width=10.0, height=6.0)


def _address(country="US", **overrides):
    defaults = {
        "US": {"street": "500 Market St", "city": "San Francisco", "state": "CA", "postal_code": "94105"},
        "CA": {"street": "1 Yonge St", "city": "Toronto", "state": "ON", "postal_code": "M5E 1E5"},
        "MX": {"street": "Av. Juárez 1", "city": "Guadalajara", "state": "JAL", "postal_code": "44100"},
    }.get(country, {"street": "1 Rue de Rivoli", "city": "Paris", "state": "IDF", "postal_code": "75001"})
    defaults.update(overrides)
    return Address(country=country, **defaults)


@pytest.fixture()
def settings(us_origin):
    return ShippingSettings(origin=us_origin, carrier_adapters=("fake",), carrier_timeout=0.2)


def _resolve(destination, settings, rates, carriers=None):
    return asyncio.run(resolve_shipping_options(destination, PACKAGE, settings=settings, rates=rates, carriers=carriers))


class TestCarrierQuotes:
    def test_options_are_sorted_cheapest_first(self, settings, rates):
        options = _resolve(_address("US"), settings, rates, carriers=[FakeCarrier()])

        assert [option.service_level for option in options] == ["fake_ground", "fake_express"]
        assert [option.cost for option in options] == [7.0, 15.8]
        assert all(option.currency == "USD" for option in options)
        assert options[1].estimated_days == DeliveryWindow(min=1, max=2)

    def test_costs_are_converted_to_destination_currency(self, settings, rates):
        options = _resolve(_address("MX"), settings, rates, carriers=[FakeCarrier()])

        assert options[0].currency == "MXN"
        assert options[0].cost == 122.5

    def test_quotes_from_every_carrier_are_merged(self, settings, rates):
        options = _resolve(_address("US"), settings, rates, carriers=[FakeCarrier("One"), FakeCarrier("Two")])
        assert len(options) == 4
        assert {option.carrier for option in options} == {"One", "Two"}

    def test_configured_carriers_are_used_by_default(self, settings, rates):
        carrier = FakeCarrier()
        set_carriers([carrier])

        options = _resolve(_address("US"), settings, rates)

        assert len(options) == 2
        assert carrier.calls[0]["package"] == PACKAGE


class TestCarrierIsolation:
    def test_failing_carrier_does_not_affect_others(self, settings, rates):
        broken = FakeCarrier("Broken")
        broken.configure(should_succeed=False)

        options = _resolve(_address("US"), settings, rates, carriers=[broken, FakeCarrier("Healthy")])

        assert {option.carrier for option in options} == {"Healthy"}

    def test_slow_carrier_is_dropped(self, settings, rates):
        slow = FakeCarrier("Slow")
        slow.configure(delay=2.0)

        options = _resolve(_address("US"), settings, rates, carriers=[slow, FakeCarrier("Fast")])

        assert {option.carrier for option in options} == {"Fast"}


class TestFlatRateFallback:
    def test_no_carriers_yields_flat_rate(self, settings, rates):
        options = _resolve(_address("CA"), settings, rates, carriers=[])

        assert len(options) == 1
        option = options[0]
        assert option.carrier == "Flat Rate"
        assert option.service_level == "flat_rate"
        assert option.cost == 26.99
        assert option.currency == "CAD"
        assert option.estimated_days == DeliveryWindow(min=7, max=12)

    def test_all_carriers_failing_yields_flat_rate(self, settings, rates):
        broken = FakeCarrier()
        broken.configure(should_succeed=False)

        options = _resolve(_address("US"), settings, rates, carriers=[broken])

        assert [(option.carrier, option.cost) for option in options] == [("Flat Rate", 9.99)]

    def test_no_flat_rate_yields_empty_list(self, settings):
        rates = load_rates_config(flat_rates={})
        assert _resolve(_address("MX"), settings, rates, carriers=[]) == []

    def test_flat_rate_quotes_for_unlisted_country(self, rates):
        assert flat_rate_quotes("FR", rates) == []


class TestDestinationValidation:
    @pytest.mark.parametrize("field", ["street", "city", "state", "postal_code"])
    def test_missing_field_is_rejected(self, settings, rates, field):
        carrier = FakeCarrier()
        with pytest.raises(InvalidAddressError) as exc:
            _resolve(_address("US", **{field: " "}), settings, rates, carriers=[carrier])

        assert field in exc.value.messages
        assert carrier.calls == []

    def test_unsupported_country_is_rejected(self, settings, rates):
        with pytest.raises(InvalidAddressError) as exc:
            _resolve(_address("FR"), settings, rates, carriers=[FakeCarrier()])
        assert "country" in exc.value.messages


class ExplodingCarrier(FakeCarrier):
    async def fetch_rates(self, origin, destination, package):
        raise RuntimeError("unexpected adapter bug")


class CancellationTrackingCarrier(FakeCarrier):
    def __init__(self, name="Slow"):
        super().__init__(name)
        self.cancelled = False

    async def fetch_rates(self, origin, destination, package):
        try:
            return await super().fetch_rates(origin, destination, package)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


class TestUnexpectedCarrierErrors:
    def test_adapter_bug_only_drops_that_carrier(self, settings, rates):
        options = _resolve(_address("US"), settings, rates, carriers=[ExplodingCarrier("Buggy"), FakeCarrier("Healthy")])

        assert {option.carrier for option in options} == {"Healthy"}

    def test_adapter_bug_falls_back_to_flat_rate(self, settings, rates):
        options = _resolve(_address("US"), settings, rates, carriers=[ExplodingCarrier()])

        assert [(option.carrier, option.cost) for option in options] == [("Flat Rate", 9.99)]


class TestCancellation:
    def test_cancelling_the_caller_cancels_carrier_calls(self, us_origin, rates):
        settings = ShippingSettings(origin=us_origin, carrier_adapters=("fake",), carrier_timeout=30.0)
        carrier = CancellationTrackingCarrier()
        carrier.configure(delay=5)

        async def cancel_in_flight():
            task = asyncio.create_task(
                resolve_shipping_options(_address("US"), PACKAGE, settings=settings, rates=rates, carriers=[carrier])
            )
            while not carrier.calls:
                await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(cancel_in_flight())

        assert len(carrier.calls) == 1
        assert carrier.cancelled is True
