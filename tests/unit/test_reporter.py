"""
Unit tests for the terminal reporter.
"""

import io
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from arbwatch.config.constants import EXCHANGES
from arbwatch.core.types import PairResult, Quote, RouteRate
from arbwatch.strategy.evaluator import build_routes
from arbwatch.telemetry.metrics import MetricsCollector
from arbwatch.telemetry.reporter import TerminalReporter
from tests.mocks.market import BB, BF, CC


UPDATED_AT = datetime(2024, 3, 9, 14, 30, 5)


def make_result(symbol: str, rates: list[str]) -> PairResult:
    """PairResult with fixed quotes and the given route rates."""
    return PairResult(
        timestamp=UPDATED_AT,
        symbol=symbol,
        quotes=(
            Quote(CC, Decimal("9999000"), Decimal("10000000")),
            Quote(BF, Decimal("10050000"), Decimal("10060000")),
            Quote(BB, Decimal("9998000"), Decimal("10001000")),
        ),
        rates=tuple(
            RouteRate(route, Decimal(rate))
            for route, rate in zip(build_routes(EXCHANGES), rates, strict=True)
        ),
    )


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> TerminalReporter:
    """Colored reporter writing to a buffer."""
    return TerminalReporter(
        log_interval=60.0,
        log_dir=Path("logs"),
        output=output,
    )


class TestRender:
    """Tests for frame rendering."""

    def test_header_and_footer(self, reporter: TerminalReporter) -> None:
        """Frame shows update time, pending count and log location."""
        frame = reporter.render([], UPDATED_AT, pending_count=7)

        assert "Last update: 2024-03-09 14:30:05" in frame
        assert "Opportunities pending log: 7" in frame
        assert "opportunities are saved to logs/ every 60s" in frame

    def test_quote_table(self, reporter: TerminalReporter) -> None:
        """Every exchange's bid/ask appears for each pair."""
        frame = reporter.render([make_result("BTC", ["0"] * 6)], UPDATED_AT, 0)

        assert "Coincheck bid/ask" in frame
        assert "9999000.0/10000000.0" in frame
        assert "10050000.0/10060000.0" in frame
        assert "9998000.0/10001000.0" in frame

    def test_profitable_routes_highlighted(self, reporter: TerminalReporter) -> None:
        """Positive rates are green and signed; others are plain."""
        frame = reporter.render(
            [make_result("BTC", ["0.500", "-0.600", "0", "-0.010", "-0.700", "0.490"])],
            UPDATED_AT,
            0,
        )

        assert f"{TerminalReporter.GREEN}  Coincheck → bitFlyer: +0.500%{TerminalReporter.RESET}" in frame
        assert "  bitFlyer → Coincheck: -0.600%" in frame
        assert f"{TerminalReporter.GREEN}  bitFlyer → Coincheck" not in frame
        assert "  Coincheck → bitbank: 0%" in frame

    def test_profitable_list_sorted_by_rate(self, output: io.StringIO) -> None:
        """The profitable list is ordered best first."""
        reporter = TerminalReporter(60.0, Path("logs"), output=output, color=False)

        frame = reporter.render(
            [make_result("BTC", ["0.200", "-1", "-1", "-1", "-1", "0.900"])],
            UPDATED_AT,
            0,
        )

        best = frame.index("  - bitbank → bitFlyer (0.900%)")
        second = frame.index("  - Coincheck → bitFlyer (0.200%)")
        assert best < second

    def test_no_profitable_route(self, reporter: TerminalReporter) -> None:
        """A pair without positive rates says so."""
        frame = reporter.render([make_result("ETH", ["-0.250"] * 6)], UPDATED_AT, 0)

        assert "No route is profitable after fees right now." in frame
        assert TerminalReporter.GREEN not in frame

    def test_pairs_sorted_by_best_rate(self, reporter: TerminalReporter) -> None:
        """The most profitable pair is rendered first."""
        results = [
            make_result("BTC", ["0.1"] + ["-1"] * 5),
            make_result("XRP", ["2.0"] + ["-1"] * 5),
            make_result("ETH", ["-0.5"] * 6),
        ]

        frame = reporter.render(results, UPDATED_AT, 0)

        assert frame.index("XRP:") < frame.index("BTC:") < frame.index("ETH:")


class TestDisplay:
    """Tests for writing frames."""

    def test_clears_screen_before_frame(
        self,
        reporter: TerminalReporter,
        output: io.StringIO,
    ) -> None:
        """Each frame starts with a screen clear."""
        reporter.display([], UPDATED_AT, 0)

        assert output.getvalue().startswith(TerminalReporter.CLEAR)

    def test_no_clear_when_disabled(self, output: io.StringIO) -> None:
        """Screen clearing can be turned off."""
        reporter = TerminalReporter(60.0, Path("logs"), output=output, clear_screen=False)

        reporter.display([], UPDATED_AT, 0)

        assert TerminalReporter.CLEAR not in output.getvalue()


class TestSummary:
    """Tests for the session summary."""

    def test_summary_counts(self, reporter: TerminalReporter) -> None:
        """Summary reports counters and the best rate."""
        metrics = MetricsCollector()
        metrics.record_tick(evaluated=2, skipped=1, errors=0)
        metrics.record_opportunity(Decimal("0.5"))
        metrics.record_opportunity(Decimal("1.25"))
        metrics.record_flush(2)

        summary = reporter.render_summary(metrics)

        assert "Ticks:  1" in summary
        assert "Completed:  2" in summary
        assert "Skipped:    1" in summary
        assert "Found:      2" in summary
        assert "Logged:     2 in 1 files" in summary
        assert "Best rate:  1.25%" in summary

    def test_summary_tick_durations(self, reporter: TerminalReporter) -> None:
        """Tick timing shows mean, median and worst duration."""
        metrics = MetricsCollector()
        for duration_us in (400, 500, 3_000):
            metrics.record_tick(evaluated=3, skipped=0, errors=0, duration_us=duration_us)

        summary = reporter.render_summary(metrics)

        assert "Ticks:  3 (avg 1.3ms, median 500μs, worst 3.0ms)" in summary

    def test_summary_without_opportunities(self, reporter: TerminalReporter) -> None:
        """No best rate is shown when nothing was found."""
        summary = reporter.render_summary(MetricsCollector())

        assert "Best rate:  ---" in summary
