"""Tests for rate tables and runtime configuration."""

import pytest
from pricing.config import (
    FlatRate,
    get_rates_config,
    get_shipping_settings,
    load_rates_config,
    load_shipping_settings,
)
from pricing.exceptions import InvalidInputError
from pricing.rates import tables


class TestRateTables:
    def test_every_served_country_has_a_flat_rate(self):
        assert set(tables.FLAT_SHIPPING_RATES) == {"US", "CA", "MX"}

    def test_every_country_currency_has_an_exchange_rate(self):
        assert set(tables.COUNTRY_CURRENCIES.values()) <= set(tables.EXCHANGE_RATES)

    def test_all_us_states_and_dc_are_listed(self):
        us_states = [state for country, state in tables.STATE_TAX_RATES if country == "US"]
        assert len(us_states) == 51

    def test_all_canadian_provinces_and_territories_are_listed(self):
        provinces = [state for country, state in tables.STATE_TAX_RATES if country == "CA"]
        assert len(provinces) == 13


class TestRatesConfig:
    def test_flat_rates_are_typed(self):
        config = load_rates_config()
        assert config.flat_rates["CA"] == FlatRate(cost=19.99, min_days=7, max_days=12)

    def test_tables_are_read_only(self):
        config = load_rates_config()
        with pytest.raises(TypeError):
            config.exchange_rates["EUR"] = 0.9

    def test_overrides_replace_tables(self):
        config = load_rates_config(flat_rates={"US": (4.99, 2, 3)}, country_tax_rates={})
        assert config.flat_rates["US"].cost == 4.99
        assert "CA" not in config.flat_rates
        assert dict(config.country_tax_rates) == {}

    def test_currency_for_unlisted_country_is_usd(self):
        assert load_rates_config().currency_for("FR") == "USD"

    def test_unknown_currency_is_rejected(self):
        with pytest.raises(InvalidInputError):
            load_rates_config().exchange_rate("EUR")

    def test_config_is_cached(self):
        assert get_rates_config() is get_rates_config()


class TestShippingSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SHIPPING_ORIGIN_ZIP", "CARRIER_ADAPTERS", "CARRIER_TIMEOUT_SECONDS", "USPS_USER_ID"):
            monkeypatch.delenv(name, raising=False)

        settings = load_shipping_settings()
        assert settings.origin.postal_code == "10001"
        assert settings.origin.country == "US"
        assert settings.carrier_adapters == ("usps", "fedex")
        assert settings.carrier_timeout == 10.0
        assert settings.usps_user_id is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SHIPPING_ORIGIN_ZIP", "94105")
        monkeypatch.setenv("CARRIER_ADAPTERS", " Fake , usps ,")
        monkeypatch.setenv("CARRIER_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("FEDEX_ENVIRONMENT", "sandbox")

        settings = load_shipping_settings()
        assert settings.origin.postal_code == "94105"
        assert settings.carrier_adapters == ("fake", "usps")
        assert settings.carrier_timeout == 2.5
        assert settings.fedex_environment == "sandbox"

    def test_settings_are_cached(self):
        assert get_shipping_settings() is get_shipping_settings()
