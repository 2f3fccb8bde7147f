"""Backtesting engine: bar-by-bar FLAT/OPEN simulation with stop/target/time exits."""

from signal_screener.backtesting.engine import BacktestEngine, BacktestResult, run_backtest

__all__ = ["BacktestEngine", "BacktestResult", "run_backtest"]
