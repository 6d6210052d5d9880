"""
CLI reporter for the refreshing terminal display.

Renders the best bid/ask of every exchange and the profit rate of
every route, highlighting profitable routes.
"""

import sys
from collections.abc import Sequence
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import TextIO

from arbwatch.config.constants import EXCHANGES
from arbwatch.core.types import ExchangeId, PairResult
from arbwatch.telemetry.metrics import MetricsCollector
from arbwatch.utils.time import format_elapsed_us, format_timestamp


class TerminalReporter:
    """
    Real-time terminal view of the latest tick.

    Displays:
    - Last update time and pending opportunity count
    - Best bid/ask per exchange
    - Every route's profit rate, profitable ones in green
    """

    GREEN = "\033[32m"
    RESET = "\033[0m"
    CLEAR = "\033[2J\033[H"

    def __init__(
        self,
        log_interval: float,
        log_dir: Path,
        exchanges: Sequence[ExchangeId] = EXCHANGES,
        output: TextIO | None = None,
        color: bool = True,
        clear_screen: bool = True,
    ) -> None:
        """
        Initialize terminal reporter.

        Args:
            log_interval: Flush interval shown in the footer.
            log_dir: Log directory shown in the footer.
            exchanges: Column order.
            output: Output stream (default: stdout).
            color: Whether to use ANSI colors.
            clear_screen: Whether to clear the screen before each frame.
        """
        self._log_interval = log_interval
        self._log_dir = log_dir
        self._exchanges = tuple(exchanges)
        self._output = output or sys.stdout
        self._color = color
        self._clear_screen = clear_screen

    def _green(self, text: str) -> str:
        return f"{self.GREEN}{text}{self.RESET}" if self._color else text

    @staticmethod
    def _format_rate(rate: Decimal) -> str:
        """Signed percentage, '+' for profitable rates."""
        return f"+{rate}%" if rate > 0 else f"{rate}%"

    def render(
        self,
        results: Sequence[PairResult],
        updated_at: datetime,
        pending_count: int,
    ) -> str:
        """
        Render one frame.

        Returns:
            Formatted display string.
        """
        ordered = sorted(results, key=lambda r: r.best_rate, reverse=True)
        lines: list[str] = []

        lines.append("=" * 20 + " ARBITRAGE MONITOR " + "=" * 20)
        lines.append(f"Last update: {format_timestamp(updated_at)}")
        lines.append(f"Opportunities pending log: {pending_count}")
        lines.append("")

        # Best bid/ask table
        lines.append("=" * 20 + " BEST BID / ASK " + "=" * 23)
        header = "Symbol | " + " | ".join(f"{ex.value + ' bid/ask':<25}" for ex in self._exchanges)
        lines.append(header)
        lines.append("-" * len(header))
        for result in ordered:
            cells = []
            for ex in self._exchanges:
                quote = result.quote(ex)
                cells.append(f"{quote.bid:.1f}/{quote.ask:.1f}".ljust(25))
            lines.append(f"{result.symbol:<6} | " + " | ".join(cells))
        lines.append("")

        # Route rates
        lines.append("=" * 20 + " ROUTE PROFIT RATES " + "=" * 19)
        lines.append("Positive values may be profitable after fees")
        lines.append("")

        for result in ordered:
            lines.append(f"{result.symbol}:")
            for route_rate in result.rates:
                text = f"  {route_rate.route}: {self._format_rate(route_rate.rate)}"
                lines.append(self._green(text) if route_rate.is_profitable else text)

            profitable = sorted(
                (r for r in result.rates if r.is_profitable),
                key=lambda r: r.rate,
                reverse=True,
            )
            lines.append("")
            lines.append("  Profitable routes:")
            if profitable:
                for route_rate in profitable:
                    lines.append(self._green(f"  - {route_rate.route} ({route_rate.rate}%)"))
            else:
                lines.append("  No route is profitable after fees right now.")
            lines.append("")

        lines.append(
            f"Ctrl+C to exit | opportunities are saved to {self._log_dir}/ "
            f"every {self._log_interval:g}s"
        )

        return "\n".join(lines)

    def display(
        self,
        results: Sequence[PairResult],
        updated_at: datetime,
        pending_count: int,
    ) -> None:
        """Display one frame."""
        if self._clear_screen:
            self._output.write(self.CLEAR)
        self._output.write(self.render(results, updated_at, pending_count))
        self._output.write("\n")
        self._output.flush()

    @staticmethod
    def _format_uptime(seconds: float) -> str:
        """Format uptime as HH:MM:SS."""
        td = timedelta(seconds=int(seconds))
        hours, remainder = divmod(int(td.total_seconds()), 3600)
        minutes, secs = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"

    def render_summary(self, metrics: MetricsCollector) -> str:
        """Render the end-of-session summary."""
        stats = metrics.stats
        durations = metrics.tick_durations()
        best = f"{stats.best_profit_rate}%" if stats.best_profit_rate is not None else "---"
        avg_tick = format_elapsed_us(int(durations.mean_us)) if durations.count else "---"
        median_tick = format_elapsed_us(durations.median_us) if durations.count else "---"
        worst_tick = format_elapsed_us(durations.worst_us) if durations.count else "---"

        lines = [
            "=" * 50,
            "  SESSION SUMMARY",
            "=" * 50,
            f"  Uptime: {self._format_uptime(metrics.uptime_seconds)}",
            f"  Ticks:  {stats.ticks:,} (avg {avg_tick}, median {median_tick}, worst {worst_tick})",
            "",
            "  EVALUATIONS:",
            f"    Completed:  {stats.pairs_evaluated:,}",
            f"    Skipped:    {stats.pairs_skipped:,}",
            f"    Errors:     {stats.total_errors:,}",
            "",
            "  OPPORTUNITIES:",
            f"    Found:      {stats.opportunities_found:,}",
            f"    Logged:     {stats.opportunities_logged:,} in {stats.log_flushes:,} files",
            f"    Best rate:  {best}",
            "=" * 50,
        ]
        return "\n".join(lines)

    def print_summary(self, metrics: MetricsCollector) -> None:
        """Print the end-of-session summary."""
        self._output.write("\n" + self.render_summary(metrics) + "\n")
        self._output.flush()
