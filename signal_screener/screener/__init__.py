"""Screener: scan symbols and timeframes, rank tiered signals."""

from signal_screener.screener.scanner import (
    ScanError,
    ScanResult,
    Screener,
    is_excluded_symbol,
    rank_signals,
)
from signal_screener.screener.source import CsvMarketData, MarketDataSource

__all__ = [
    "ScanError",
    "ScanResult",
    "Screener",
    "is_excluded_symbol",
    "rank_signals",
    "CsvMarketData",
    "MarketDataSource",
]
