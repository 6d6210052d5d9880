"""
Monitor settings: fees, monitored pairs, polling schedule and output.

Loaded with pydantic-settings from the environment (or a .env file) and
validated once at startup; a bad value stops the monitor before the
first request is sent.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

import orjson
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from arbwatch.config.constants import (
    COMMON_PAIRS,
    DEFAULT_ERROR_BACKOFF,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_INTERVAL,
    DEFAULT_MAKER_FEE_PCT,
    DEFAULT_REQUESTS_PER_SECOND,
    DEFAULT_TAKER_FEE_PCT,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TRANSFER_FEE_PCT,
)
from arbwatch.core.types import CurrencyPair, ExchangeId, FeeSchedule


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Fees are percentages (0.1 means 0.1%).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Fee Configuration
    # =========================================================================

    coincheck_maker_fee: Decimal = Field(
        default=DEFAULT_MAKER_FEE_PCT,
        ge=0,
        le=10,
        description="Coincheck maker fee (%)",
    )
    coincheck_taker_fee: Decimal = Field(
        default=DEFAULT_TAKER_FEE_PCT,
        ge=0,
        le=10,
        description="Coincheck taker fee (%)",
    )
    bitflyer_maker_fee: Decimal = Field(
        default=DEFAULT_MAKER_FEE_PCT,
        ge=0,
        le=10,
        description="bitFlyer maker fee (%)",
    )
    bitflyer_taker_fee: Decimal = Field(
        default=DEFAULT_TAKER_FEE_PCT,
        ge=0,
        le=10,
        description="bitFlyer taker fee (%)",
    )
    bitbank_maker_fee: Decimal = Field(
        default=DEFAULT_MAKER_FEE_PCT,
        ge=0,
        le=10,
        description="bitbank maker fee (%)",
    )
    bitbank_taker_fee: Decimal = Field(
        default=DEFAULT_TAKER_FEE_PCT,
        ge=0,
        le=10,
        description="bitbank taker fee (%)",
    )
    transfer_fee: Decimal = Field(
        default=DEFAULT_TRANSFER_FEE_PCT,
        ge=0,
        le=10,
        description="Estimated cost of moving the asset between exchanges (%)",
    )

    # =========================================================================
    # Market Selection
    # =========================================================================

    symbols: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [pair.symbol for pair in COMMON_PAIRS],
        description="Currency pair symbols to monitor",
    )

    # =========================================================================
    # Polling Schedule
    # =========================================================================

    tick_interval: float = Field(
        default=DEFAULT_TICK_INTERVAL,
        ge=0.1,
        le=60.0,
        description="Seconds between polling ticks",
    )

    log_interval: float = Field(
        default=DEFAULT_LOG_INTERVAL,
        ge=1.0,
        le=86_400.0,
        description="Seconds between opportunity log flushes",
    )

    advance_empty_flush: bool = Field(
        default=True,
        description="Restart the log interval when a due flush finds nothing to write",
    )

    error_backoff: float = Field(
        default=DEFAULT_ERROR_BACKOFF,
        ge=0.1,
        le=300.0,
        description="Seconds to wait after a tick that raised an error",
    )

    fetch_timeout: float = Field(
        default=DEFAULT_FETCH_TIMEOUT,
        ge=0.5,
        le=60.0,
        description="Total timeout of one order book request in seconds",
    )

    requests_per_second: float = Field(
        default=DEFAULT_REQUESTS_PER_SECOND,
        ge=0.1,
        le=100.0,
        description="Request budget per exchange",
    )

    # =========================================================================
    # Output
    # =========================================================================

    log_dir: Path = Field(
        default=Path(DEFAULT_LOG_DIR),
        description="Directory for opportunity CSV files",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional diagnostic log file",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("symbols", mode="before")
    @classmethod
    def split_symbols(cls, v: Any) -> Any:
        """Accept `BTC,ETH` or a JSON list such as `["BTC", "ETH"]`."""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            try:
                return orjson.loads(v)
            except orjson.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON list of symbols: {e}") from e
        return [s for s in v.split(",") if s.strip()]

    @field_validator("symbols", mode="after")
    @classmethod
    def validate_symbols(cls, v: list[str]) -> list[str]:
        """Normalize symbols and reject pairs not listed on all exchanges."""
        known = {pair.symbol for pair in COMMON_PAIRS}
        normalized = [s.strip().upper() for s in v]

        unknown = [s for s in normalized if s not in known]
        if unknown:
            raise ValueError(
                f"Unsupported symbols {unknown}, expected a subset of {sorted(known)}"
            )
        if not normalized:
            raise ValueError("At least one symbol is required")

        # Keep first occurrence order
        return list(dict.fromkeys(normalized))

    @model_validator(mode="after")
    def validate_backoff(self) -> "Settings":
        """Backoff after an error must be longer than a normal tick."""
        if self.error_backoff <= self.tick_interval:
            raise ValueError(
                f"error_backoff ({self.error_backoff}s) must exceed "
                f"tick_interval ({self.tick_interval}s)"
            )
        return self

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def fee_schedule(self) -> FeeSchedule:
        """Build the fee schedule used by the profit calculator."""
        return FeeSchedule(
            maker={
                ExchangeId.COINCHECK: self.coincheck_maker_fee,
                ExchangeId.BITFLYER: self.bitflyer_maker_fee,
                ExchangeId.BITBANK: self.bitbank_maker_fee,
            },
            taker={
                ExchangeId.COINCHECK: self.coincheck_taker_fee,
                ExchangeId.BITFLYER: self.bitflyer_taker_fee,
                ExchangeId.BITBANK: self.bitbank_taker_fee,
            },
            transfer=self.transfer_fee,
        )

    @property
    def currency_pairs(self) -> tuple[CurrencyPair, ...]:
        """Configured pairs in the order given by `symbols`."""
        by_symbol = {pair.symbol: pair for pair in COMMON_PAIRS}
        return tuple(by_symbol[s] for s in self.symbols)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
