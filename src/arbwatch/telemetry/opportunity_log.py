"""
CSV writer for drained opportunities.

Each flush produces one file named after the flush time, with a header
row and one row per opportunity.
"""

import csv
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from arbwatch.config.constants import (
    EXCHANGES,
    OPPORTUNITY_FILE_PREFIX,
    OPPORTUNITY_FILE_TIME_FORMAT,
    OPPORTUNITY_ROW_TIME_FORMAT,
)
from arbwatch.core.types import ExchangeId, Opportunity
from arbwatch.utils.time import format_timestamp, now


logger = logging.getLogger(__name__)


def csv_header(exchanges: Sequence[ExchangeId] = EXCHANGES) -> list[str]:
    """Column names: route fields, then bid/ask per exchange."""
    columns = ["timestamp", "symbol", "buy_exchange", "sell_exchange", "profit_rate_pct"]
    for exchange in exchanges:
        columns += [f"{exchange.value}_bid", f"{exchange.value}_ask"]
    return columns


def csv_row(opportunity: Opportunity, exchanges: Sequence[ExchangeId] = EXCHANGES) -> list[str]:
    """Render one opportunity as CSV fields."""
    row = [
        format_timestamp(opportunity.timestamp, OPPORTUNITY_ROW_TIME_FORMAT),
        opportunity.symbol,
        opportunity.from_exchange.value,
        opportunity.to_exchange.value,
        str(opportunity.profit_rate),
    ]

    quotes = {q.exchange: q for q in opportunity.quotes}
    for exchange in exchanges:
        quote = quotes.get(exchange)
        row += [str(quote.bid), str(quote.ask)] if quote else ["", ""]
    return row


class OpportunityLogWriter:
    """Writes opportunity batches to timestamped CSV files."""

    def __init__(
        self,
        log_dir: Path,
        exchanges: Sequence[ExchangeId] = EXCHANGES,
    ) -> None:
        """
        Initialize writer.

        Args:
            log_dir: Output directory, created on first write.
            exchanges: Exchange column order.
        """
        self._log_dir = Path(log_dir)
        self._exchanges = tuple(exchanges)

    def _target_path(self, written_at: datetime) -> Path:
        """Pick a file name for this flush without overwriting older ones."""
        stem = f"{OPPORTUNITY_FILE_PREFIX}{written_at.strftime(OPPORTUNITY_FILE_TIME_FORMAT)}"
        path = self._log_dir / f"{stem}.csv"

        suffix = 1
        while path.exists():
            path = self._log_dir / f"{stem}_{suffix}.csv"
            suffix += 1
        return path

    def write(
        self,
        opportunities: Sequence[Opportunity],
        written_at: datetime | None = None,
    ) -> Path | None:
        """
        Write a batch of opportunities.

        Args:
            opportunities: Drained opportunities, in order.
            written_at: Time used for the file name (default: now).

        Returns:
            Path of the written file, or None if there was nothing to write.
        """
        if not opportunities:
            return None

        self._log_dir.mkdir(parents=True, exist_ok=True)
        path = self._target_path(written_at or now())

        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(csv_header(self._exchanges))
            for opportunity in opportunities:
                writer.writerow(csv_row(opportunity, self._exchanges))

        logger.info(f"Wrote {len(opportunities)} opportunities to {path}")
        return path

    @property
    def log_dir(self) -> Path:
        return self._log_dir
