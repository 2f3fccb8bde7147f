"""Analytics: trade statistics in R-multiples."""

from signal_screener.analytics.metrics import (
    Stats,
    compute_stats,
    equity_curve,
    max_drawdown,
    win_rate,
    profit_factor,
)

__all__ = [
    "Stats",
    "compute_stats",
    "equity_curve",
    "max_drawdown",
    "win_rate",
    "profit_factor",
]
