"""
Main polling loop.

Coordinates the evaluator, the opportunity buffer, the display and the
opportunity log, and manages the monitoring lifecycle.
"""

import asyncio
import logging
import signal
from collections.abc import Callable, Mapping
from contextlib import suppress
from dataclasses import dataclass, field
from enum import Enum

from arbwatch.config.constants import EXCHANGES
from arbwatch.config.settings import Settings
from arbwatch.core.types import (
    DisplaySink,
    ExchangeAdapter,
    ExchangeId,
    LogSink,
    Opportunity,
    PairResult,
)
from arbwatch.exchange.adapters import create_adapters
from arbwatch.strategy.buffer import OpportunityBuffer
from arbwatch.strategy.calculator import ProfitCalculator
from arbwatch.strategy.evaluator import ArbitrageEvaluator
from arbwatch.telemetry.metrics import MetricsCollector
from arbwatch.telemetry.opportunity_log import OpportunityLogWriter
from arbwatch.telemetry.reporter import TerminalReporter
from arbwatch.utils.time import Stopwatch, monotonic, now


logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    """Lifecycle state of the polling loop."""

    RUNNING = "RUNNING"
    TERMINATING = "TERMINATING"


@dataclass(slots=True)
class TickOutcome:
    """What one tick produced."""

    results: list[PairResult] = field(default_factory=list)
    opportunities: list[Opportunity] = field(default_factory=list)
    skipped: int = 0
    errors: int = 0

    @property
    def errored(self) -> bool:
        """Whether any pair raised an unexpected error."""
        return self.errors > 0


class ArbitrageMonitor:
    """
    Polling loop orchestrator.

    Each tick evaluates every configured pair, buffers the opportunities,
    flushes the buffer when the log interval has elapsed and refreshes
    the display. A failing pair never stops the others; an unexpected
    error makes the loop back off before the next tick. On termination
    the remaining opportunities are written regardless of the interval.
    """

    def __init__(
        self,
        settings: Settings,
        adapters: Mapping[ExchangeId, ExchangeAdapter] | None = None,
        reporter: DisplaySink | None = None,
        log_writer: LogSink | None = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            settings: Application settings.
            adapters: Exchange adapters (default: real HTTP adapters).
            reporter: Display sink (default: terminal display).
            log_writer: Opportunity log sink (default: CSV files).
            clock: Monotonic clock used for flush scheduling.
        """
        self._settings = settings
        self._clock = clock
        self._state = MonitorState.RUNNING
        self._shutdown_event = asyncio.Event()
        self._closed = False

        self._pairs = settings.currency_pairs
        self._adapters = adapters or create_adapters(
            timeout=settings.fetch_timeout,
            requests_per_second=settings.requests_per_second,
        )
        self._evaluator = ArbitrageEvaluator(
            adapters=self._adapters,
            calculator=ProfitCalculator(settings.fee_schedule),
            exchanges=EXCHANGES,
        )
        self._buffer = OpportunityBuffer(
            start_time=clock(),
            advance_when_empty=settings.advance_empty_flush,
        )
        self._reporter = reporter or TerminalReporter(
            log_interval=settings.log_interval,
            log_dir=settings.log_dir,
        )
        self._log_writer = log_writer or OpportunityLogWriter(settings.log_dir)
        self._metrics = MetricsCollector()

    async def run_once(self) -> TickOutcome:
        """
        Run a single tick.

        Returns:
            The tick's results and opportunities.
        """
        outcome = TickOutcome()
        tick_time = now()

        with Stopwatch() as stopwatch:
            for pair in self._pairs:
                try:
                    result = await self._evaluator.evaluate(pair)
                except Exception:
                    logger.exception(f"Unexpected error while evaluating {pair.symbol}")
                    outcome.errors += 1
                    continue

                if result is None:
                    outcome.skipped += 1
                    continue

                outcome.results.append(result)
                found = self._evaluator.extract_opportunities(result)
                for opportunity in found:
                    self._metrics.record_opportunity(opportunity.profit_rate)
                    logger.debug(
                        f"Opportunity {opportunity.symbol} {opportunity.route}: "
                        f"{opportunity.profit_rate}%"
                    )
                outcome.opportunities.extend(found)

            self._buffer.append(outcome.opportunities)

            drained = self._buffer.flush_if_due(self._clock(), self._settings.log_interval)
            if drained:
                self._write_log(drained)

        self._metrics.record_tick(
            evaluated=len(outcome.results),
            skipped=outcome.skipped,
            errors=outcome.errors,
            duration_us=stopwatch.elapsed_us,
        )

        self._reporter.display(outcome.results, tick_time, len(self._buffer))
        return outcome

    def _write_log(self, opportunities: list[Opportunity]) -> None:
        """
        Hand drained opportunities to the log sink.

        On a write error the opportunities go back into the buffer before
        the error propagates, so the next flush or the shutdown drain
        still sees them.
        """
        try:
            path = self._log_writer.write(opportunities)
        except Exception:
            self._buffer.restore(opportunities)
            raise
        if path is not None:
            self._metrics.record_flush(len(opportunities))

    async def run(self) -> None:
        """Run the polling loop until a shutdown is requested."""
        self._state = MonitorState.RUNNING

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.stop)

        logger.info(
            f"Monitoring {', '.join(p.symbol for p in self._pairs)} every "
            f"{self._settings.tick_interval:g}s; opportunities are logged every "
            f"{self._settings.log_interval:g}s to {self._settings.log_dir}"
        )

        try:
            while self._state is MonitorState.RUNNING:
                started = self._clock()

                try:
                    outcome = await self.run_once()
                except Exception:
                    logger.exception("Tick failed")
                    self._metrics.record_tick_error()
                    delay = self._settings.error_backoff
                else:
                    if outcome.errored:
                        delay = self._settings.error_backoff
                    else:
                        elapsed = self._clock() - started
                        delay = max(0.0, self._settings.tick_interval - elapsed)

                await self._wait(delay)

        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
            await self.shutdown()

    async def _wait(self, delay: float) -> None:
        """Sleep until the next tick, waking early on shutdown."""
        if delay <= 0:
            await asyncio.sleep(0)
            return
        with suppress(TimeoutError):
            await asyncio.wait_for(self._shutdown_event.wait(), timeout=delay)

    def stop(self) -> None:
        """Request termination (signal handler)."""
        if self._state is MonitorState.RUNNING:
            logger.info("Shutdown signal received")
        self._state = MonitorState.TERMINATING
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Write pending opportunities and release resources."""
        if self._closed:
            return
        self._closed = True
        self._state = MonitorState.TERMINATING

        logger.info("Shutting down monitor...")

        try:
            remaining = self._buffer.drain()
            if remaining:
                self._write_log(remaining)
        finally:
            for adapter in self._adapters.values():
                await adapter.close()

            if isinstance(self._reporter, TerminalReporter):
                self._reporter.print_summary(self._metrics)

        logger.info("Monitor shutdown complete")

    @property
    def state(self) -> MonitorState:
        """Get the lifecycle state."""
        return self._state

    @property
    def buffer(self) -> OpportunityBuffer:
        """Get the opportunity buffer."""
        return self._buffer

    @property
    def metrics(self) -> MetricsCollector:
        """Get metrics collector."""
        return self._metrics
