"""Configuration module for the arbitrage monitor."""

from arbwatch.config.constants import (
    COMMON_PAIRS,
    DEFAULT_LOG_INTERVAL,
    DEFAULT_TICK_INTERVAL,
    EXCHANGES,
)
from arbwatch.config.settings import Settings, get_settings


__all__ = [
    "COMMON_PAIRS",
    "DEFAULT_LOG_INTERVAL",
    "DEFAULT_TICK_INTERVAL",
    "EXCHANGES",
    "Settings",
    "get_settings",
]
