"""
Trade statistics in R-multiples: win rate, average/total/best/worst R,
cumulative R equity curve, max drawdown, average holding period.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from signal_screener.core.types import Trade


@dataclass
class Stats:
    """Aggregate over a trade ledger."""
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    total_r: float = 0.0
    avg_r: float = 0.0
    best_r: float = 0.0
    worst_r: float = 0.0
    profit_factor: float = 0.0
    max_drawdown_r: float = 0.0
    avg_bars_held: float = 0.0
    equity_curve: List[float] = field(default_factory=list)


def equity_curve(r_multiples: Sequence[float]) -> List[float]:
    """Cumulative R after each trade."""
    return np.cumsum(np.asarray(r_multiples, dtype=float)).tolist()


def max_drawdown(curve: Sequence[float]) -> float:
    """Deepest fall below the running peak, in R (<= 0). The curve starts from 0 R."""
    if len(curve) == 0:
        return 0.0
    arr = np.concatenate([[0.0], np.asarray(curve, dtype=float)])
    peak = np.maximum.accumulate(arr)
    return float(np.min(arr - peak))


def win_rate(r_multiples: Sequence[float]) -> float:
    """Fraction of trades with positive R."""
    if len(r_multiples) == 0:
        return 0.0
    return sum(1 for r in r_multiples if r > 0) / len(r_multiples)


def profit_factor(r_multiples: Sequence[float]) -> float:
    """Gross R won / gross R lost. inf if nothing lost, 0 if nothing won."""
    wins = sum(r for r in r_multiples if r > 0)
    losses = sum(-r for r in r_multiples if r < 0)
    if losses <= 0:
        return float("inf") if wins > 0 else 0.0
    return wins / losses


def compute_stats(trades: Sequence[Trade]) -> Stats:
    """Recompute every statistic from the full ledger."""
    if not trades:
        return Stats()
    rs = [t.r_multiple for t in trades]
    curve = equity_curve(rs)
    return Stats(
        total_trades=len(trades),
        winning_trades=sum(1 for r in rs if r > 0),
        losing_trades=sum(1 for r in rs if r < 0),
        win_rate=win_rate(rs),
        total_r=float(sum(rs)),
        avg_r=float(sum(rs)) / len(rs),
        best_r=max(rs),
        worst_r=min(rs),
        profit_factor=profit_factor(rs),
        max_drawdown_r=max_drawdown(curve),
        avg_bars_held=sum(t.held_bars for t in trades) / len(trades),
        equity_curve=curve,
    )
