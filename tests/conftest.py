"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from arbwatch.config.constants import COMMON_PAIRS, EXCHANGES
from arbwatch.config.settings import Settings
from arbwatch.core.types import CurrencyPair, ExchangeId, FeeSchedule
from arbwatch.strategy.calculator import ProfitCalculator
from tests.mocks.exchange import FakeAdapter
from tests.mocks.market import BB, BF, CC


# =============================================================================
# Pair & Fee Fixtures
# =============================================================================


@pytest.fixture
def btc_pair() -> CurrencyPair:
    """BTC/JPY on all three exchanges."""
    return COMMON_PAIRS[0]


@pytest.fixture
def zero_fees() -> FeeSchedule:
    """No maker, taker or transfer fees."""
    return FeeSchedule.flat(EXCHANGES)


@pytest.fixture
def default_fees() -> FeeSchedule:
    """Maker 0%, taker 0.1%, transfer 0.1% everywhere."""
    return FeeSchedule.flat(
        EXCHANGES,
        maker=Decimal("0"),
        taker=Decimal("0.1"),
        transfer=Decimal("0.1"),
    )


@pytest.fixture
def calculator(zero_fees: FeeSchedule) -> ProfitCalculator:
    """Profit calculator without fees."""
    return ProfitCalculator(zero_fees)


# =============================================================================
# Adapter Fixtures
# =============================================================================


@pytest.fixture
def fake_adapters() -> dict[ExchangeId, FakeAdapter]:
    """
    Fake adapters quoting BTC, ETH and XRP.

    BTC: without fees, Coincheck -> bitFlyer (+0.5%) and
    bitbank -> bitFlyer (+0.49%) are profitable.
    ETH and XRP: identical books everywhere, nothing profitable.
    """
    return {
        CC: FakeAdapter(CC, {
            "BTC": ("9999000", "10000000"),
            "ETH": ("399000", "400000"),
            "XRP": ("99", "100"),
        }),
        BF: FakeAdapter(BF, {
            "BTC": ("10050000", "10060000"),
            "ETH": ("399000", "400000"),
            "XRP": ("99", "100"),
        }),
        BB: FakeAdapter(BB, {
            "BTC": ("9998000", "10001000"),
            "ETH": ("399000", "400000"),
            "XRP": ("99", "100"),
        }),
    }


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Zero-fee settings writing logs to a temp directory."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        coincheck_taker_fee=Decimal("0"),
        bitflyer_taker_fee=Decimal("0"),
        bitbank_taker_fee=Decimal("0"),
        transfer_fee=Decimal("0"),
        tick_interval=0.1,
        error_backoff=0.2,
        log_interval=60.0,
        log_dir=tmp_path / "logs",
    )
