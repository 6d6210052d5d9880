"""Telemetry module for logging, metrics, display and opportunity logs."""

from arbwatch.telemetry.logger import LogPipeline, setup_logging
from arbwatch.telemetry.metrics import MetricsCollector
from arbwatch.telemetry.opportunity_log import OpportunityLogWriter
from arbwatch.telemetry.reporter import TerminalReporter


__all__ = [
    "LogPipeline",
    "MetricsCollector",
    "OpportunityLogWriter",
    "TerminalReporter",
    "setup_logging",
]
