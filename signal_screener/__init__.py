"""Tiered signal screener and backtester for OHLCV bars."""

from signal_screener.backtesting.engine import run_backtest
from signal_screener.strategies.tiered import score_signal

__all__ = ["run_backtest", "score_signal"]
__version__ = "0.1.0"
