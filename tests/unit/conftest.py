"""
Shared fixtures: an in-memory venue and a context with a stubbed transport.
"""

import httpx
import pytest

from core.context import ExchangeContext
from core.pair_filter import StaticPriceReference
from core.query_client import PublicQueryClient

from dummy_exchange import DummyExchange, make_orderbook


@pytest.fixture
def mock_transport():
    """MockTransport answering every request with HTTP 200 and body 'ok'"""
    return httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))


@pytest.fixture
def context(mock_transport):
    """Context with fixed average rates and a stubbed public transport"""
    prices = StaticPriceReference({"LTC": 0.01, "ETH": 0.05, "XRP": 0.00002})
    ctx = ExchangeContext.from_settings(
        prices,
        query_client=PublicQueryClient(transport=mock_transport)
    )
    yield ctx
    ctx.close()


@pytest.fixture
def exchange(context):
    return DummyExchange("key", "secret", context)


@pytest.fixture
def orderbook_factory():
    return make_orderbook
