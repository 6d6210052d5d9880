"""
Cross-Exchange Arbitrage Monitor.

Polls the public order books of Coincheck, bitFlyer and bitbank, computes
fee-adjusted profit rates for every directed exchange route and logs the
profitable ones.
"""

__version__ = "1.0.0"
__author__ = "Tim"
