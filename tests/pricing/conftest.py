import os

import pytest


@pytest.fixture(scope="session")
def _pricing_domain(request):
    """Initialize the pricing domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from pricing.domain import pricing

    pricing.init()
    return pricing


@pytest.fixture(autouse=True)
def run_around_tests(_pricing_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _pricing_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def rates():
    from pricing.config import load_rates_config

    return load_rates_config()


@pytest.fixture()
def us_origin():
    from pricing.shipping.models import Address

    return Address(street="123 Main St", city="New York", state="NY", postal_code="10001", country="US")
