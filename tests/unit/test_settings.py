"""
Unit tests for application settings.
"""

from collections.abc import Iterator
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from arbwatch.__main__ import main
from arbwatch.config.settings import Settings, get_settings
from tests.mocks.market import BB, BF, CC


def make_settings(**kwargs: object) -> Settings:
    """Settings that ignore any local .env file."""
    return Settings(_env_file=None, **kwargs)  # type: ignore[arg-type]


class TestDefaults:
    """Tests for default values."""

    def test_default_schedule(self) -> None:
        """One-second ticks, one-minute log flushes, five-second backoff."""
        settings = make_settings()

        assert settings.tick_interval == 1.0
        assert settings.log_interval == 60.0
        assert settings.error_backoff == 5.0
        assert settings.log_dir == Path("logs")
        assert settings.log_file is None

    def test_default_fee_schedule(self) -> None:
        """Maker 0%, taker 0.1%, transfer 0.1% on every exchange."""
        fees = make_settings().fee_schedule

        for exchange in (CC, BF, BB):
            assert fees.maker_fee(exchange) == Decimal("0")
            assert fees.taker_fee(exchange) == Decimal("0.1")
        assert fees.transfer == Decimal("0.1")

    def test_default_pairs(self) -> None:
        """All three common pairs, in order."""
        pairs = make_settings().currency_pairs

        assert [p.symbol for p in pairs] == ["BTC", "ETH", "XRP"]
        assert pairs[0].identifier(BF) == "BTC_JPY"
        assert pairs[2].identifier(BB) == "xrp_jpy"


class TestEnvironment:
    """Tests for environment overrides."""

    def test_fee_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Per-exchange fees are read from the environment."""
        monkeypatch.setenv("BITFLYER_TAKER_FEE", "0.15")
        monkeypatch.setenv("TRANSFER_FEE", "0")

        fees = make_settings().fee_schedule

        assert fees.taker_fee(BF) == Decimal("0.15")
        assert fees.taker_fee(CC) == Decimal("0.1")
        assert fees.transfer == Decimal("0")

    def test_symbols_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Symbols can be given as a JSON list."""
        monkeypatch.setenv("SYMBOLS", '["xrp", "btc"]')

        assert make_settings().symbols == ["XRP", "BTC"]

    def test_symbols_comma_separated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A plain comma-separated list is accepted as well."""
        monkeypatch.setenv("SYMBOLS", "BTC, eth,")

        assert make_settings().symbols == ["BTC", "ETH"]

    def test_malformed_symbols_list_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A broken JSON list is a validation error, not a parse crash."""
        monkeypatch.setenv("SYMBOLS", '["BTC", ')

        with pytest.raises(ValidationError, match="JSON list"):
            make_settings()


class TestValidation:
    """Tests for settings validation."""

    def test_symbols_normalized_and_deduplicated(self) -> None:
        """Case and whitespace are ignored; first occurrence wins."""
        settings = make_settings(symbols=[" eth", "BTC", "Eth"])

        assert settings.symbols == ["ETH", "BTC"]
        assert [p.symbol for p in settings.currency_pairs] == ["ETH", "BTC"]

    def test_unknown_symbol_rejected(self) -> None:
        """Only pairs listed on every exchange are accepted."""
        with pytest.raises(ValidationError, match="DOGE"):
            make_settings(symbols=["BTC", "DOGE"])

    def test_empty_symbols_rejected(self) -> None:
        """At least one pair must be monitored."""
        with pytest.raises(ValidationError, match="At least one symbol"):
            make_settings(symbols=[])

    def test_negative_fee_rejected(self) -> None:
        """Fees cannot be negative."""
        with pytest.raises(ValidationError):
            make_settings(coincheck_taker_fee=Decimal("-0.1"))

    def test_backoff_must_exceed_tick(self) -> None:
        """Error backoff shorter than a tick is rejected."""
        with pytest.raises(ValidationError, match="error_backoff"):
            make_settings(tick_interval=2.0, error_backoff=1.0)

    def test_tick_interval_bounds(self) -> None:
        """Tick interval must stay within its range."""
        with pytest.raises(ValidationError):
            make_settings(tick_interval=0.0)

    def test_invalid_log_level(self) -> None:
        """Unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            make_settings(log_level="VERBOSE")


class TestEntryPoint:
    """Tests for configuration errors at startup."""

    @pytest.fixture(autouse=True)
    def isolated_settings(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> Iterator[None]:
        """Run from an empty directory with a fresh settings cache."""
        monkeypatch.chdir(tmp_path)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    @pytest.mark.parametrize("symbols", ["BTC,DOGE", '["BTC", ', ""])
    def test_bad_symbols_exit_with_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        symbols: str,
    ) -> None:
        """An invalid SYMBOLS value is reported and main returns 1."""
        monkeypatch.setenv("SYMBOLS", symbols)

        assert main() == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_bad_backoff_exits_with_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Cross-field errors stop startup the same way."""
        monkeypatch.setenv("TICK_INTERVAL", "2")
        monkeypatch.setenv("ERROR_BACKOFF", "1")

        assert main() == 1
        assert "error_backoff" in capsys.readouterr().out
