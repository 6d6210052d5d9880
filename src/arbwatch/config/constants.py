"""
Monitoring constants and configuration values.

This module contains all hardcoded values used throughout the monitor.
Values are organized by category for easy maintenance and auditing.
"""

from decimal import Decimal
from typing import Final

from arbwatch.core.types import CurrencyPair, ExchangeId


# =============================================================================
# Exchange API Endpoints (public, no authentication)
# =============================================================================

COINCHECK_REST_URL: Final[str] = "https://coincheck.com"
BITFLYER_REST_URL: Final[str] = "https://api.bitflyer.com"
BITBANK_PUBLIC_URL: Final[str] = "https://public.bitbank.cc"

ENDPOINT_COINCHECK_ORDER_BOOKS: Final[str] = "/api/order_books"
ENDPOINT_BITFLYER_BOARD: Final[str] = "/v1/board"
ENDPOINT_BITBANK_DEPTH: Final[str] = "/{pair}/depth"

# bitbank envelope flag for a successful response
BITBANK_SUCCESS: Final[int] = 1


# =============================================================================
# Exchanges & Currency Pairs
# =============================================================================

# Fixed exchange order; route enumeration follows it
EXCHANGES: Final[tuple[ExchangeId, ...]] = (
    ExchangeId.COINCHECK,
    ExchangeId.BITFLYER,
    ExchangeId.BITBANK,
)

# Pairs listed on all three exchanges
COMMON_PAIRS: Final[tuple[CurrencyPair, ...]] = (
    CurrencyPair.of("BTC", coincheck="btc_jpy", bitflyer="BTC_JPY", bitbank="btc_jpy"),
    CurrencyPair.of("ETH", coincheck="eth_jpy", bitflyer="ETH_JPY", bitbank="eth_jpy"),
    CurrencyPair.of("XRP", coincheck="xrp_jpy", bitflyer="XRP_JPY", bitbank="xrp_jpy"),
)


# =============================================================================
# Trading Fees (percent)
# =============================================================================

DEFAULT_MAKER_FEE_PCT: Final[Decimal] = Decimal("0.0")
DEFAULT_TAKER_FEE_PCT: Final[Decimal] = Decimal("0.1")

# Rough cost of moving the asset between exchanges
DEFAULT_TRANSFER_FEE_PCT: Final[Decimal] = Decimal("0.1")


# =============================================================================
# Polling Schedule
# =============================================================================

DEFAULT_TICK_INTERVAL: Final[float] = 1.0  # seconds
DEFAULT_LOG_INTERVAL: Final[float] = 60.0  # seconds
DEFAULT_ERROR_BACKOFF: Final[float] = 5.0  # seconds
DEFAULT_FETCH_TIMEOUT: Final[float] = 5.0  # seconds

# Per-exchange request budget
DEFAULT_REQUESTS_PER_SECOND: Final[float] = 5.0


# =============================================================================
# Precision & Formatting
# =============================================================================

# Decimal places of a profit rate (percent)
PROFIT_RATE_PLACES: Final[int] = 3


# =============================================================================
# Opportunity Log
# =============================================================================

DEFAULT_LOG_DIR: Final[str] = "logs"
OPPORTUNITY_FILE_PREFIX: Final[str] = "arbitrage_"
OPPORTUNITY_FILE_TIME_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
OPPORTUNITY_ROW_TIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000
