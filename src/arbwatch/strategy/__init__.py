"""Strategy module for arbitrage evaluation and calculation."""

from arbwatch.strategy.buffer import OpportunityBuffer
from arbwatch.strategy.calculator import ProfitCalculator, profit_rate
from arbwatch.strategy.evaluator import ArbitrageEvaluator, build_routes


__all__ = [
    "ArbitrageEvaluator",
    "OpportunityBuffer",
    "ProfitCalculator",
    "build_routes",
    "profit_rate",
]
