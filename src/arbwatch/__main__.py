"""
Entry point for the arbitrage monitor.

Usage:
    python -m arbwatch
    arbwatch  # if installed via pip
"""

import asyncio
import sys

from pydantic import ValidationError
from pydantic_settings import SettingsError


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from arbwatch import __version__
    from arbwatch.config.settings import get_settings
    from arbwatch.core.monitor import ArbitrageMonitor
    from arbwatch.telemetry.logger import setup_logging

    print(f"Cross-exchange arbitrage monitor v{__version__}")

    # Load settings
    try:
        settings = get_settings()
    except (ValidationError, SettingsError) as e:
        print(f"Configuration error: {e}")
        return 1

    # Print configuration summary
    fees = settings.fee_schedule
    print("Configuration:")
    print(f"  Symbols:        {', '.join(settings.symbols)}")
    for exchange in fees.maker:
        print(
            f"  {exchange.value + ':':<15} maker {fees.maker_fee(exchange)}% / "
            f"taker {fees.taker_fee(exchange)}%"
        )
    print(f"  Transfer fee:   {fees.transfer}%")
    print(f"  Tick interval:  {settings.tick_interval:g}s")
    print(f"  Log interval:   {settings.log_interval:g}s -> {settings.log_dir}")
    print("Press Ctrl+C to exit.")
    print()

    log_pipeline = setup_logging(level=settings.log_level, log_file=settings.log_file)

    async def run_monitor() -> int:
        monitor = ArbitrageMonitor(settings)

        try:
            await monitor.run()
            return 0

        except Exception as e:
            print(f"\nFatal error: {e}")
            import traceback

            traceback.print_exc()
            return 1

        finally:
            await monitor.shutdown()

    try:
        return asyncio.run(run_monitor())
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 0
    finally:
        log_pipeline.stop()


if __name__ == "__main__":
    sys.exit(main())
