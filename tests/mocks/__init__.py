"""Mock implementations for testing."""

from tests.mocks.exchange import FakeAdapter, FakeRestClient, make_response
from tests.mocks.market import make_opportunity, make_snapshot


__all__ = [
    "FakeAdapter",
    "FakeRestClient",
    "make_opportunity",
    "make_response",
    "make_snapshot",
]
