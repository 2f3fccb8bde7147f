"""
Backtest engine: FLAT/OPEN state machine over closed bars, no lookahead.

At bar i the strategy only sees bars[0..i] and enters at that bar's close.
An open position is checked on every later bar: stop and target on the same
bar exits at the stop, then target, then stop, then the time limit.
One position at a time; signals are ignored while a position is open.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from signal_screener.analytics.metrics import Stats, compute_stats
from signal_screener.core.config import Config
from signal_screener.core.errors import InsufficientDataError
from signal_screener.core.types import Bar, Position, Side, Signal, Trade
from signal_screener.strategies.base import BaseStrategy
from signal_screener.strategies.tiered import TieredSignalStrategy
from signal_screener.utils.frames import BarsLike, as_bars

logger = logging.getLogger("signal_screener.backtest")

EXIT_SAME_BAR = "stop-and-target-same-bar"
EXIT_TAKE_PROFIT = "tp"
EXIT_STOP_LOSS = "sl"
EXIT_TIME = "time"
EXIT_END = "end"


@dataclass
class BacktestResult:
    """Backtest output: trade ledger and stats."""
    trades: List[Trade] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)


def pnl_pct(side: Side, entry_price: float, exit_price: float) -> float:
    """Percent P&L, positive when the trade made money."""
    if side == Side.LONG:
        return (exit_price - entry_price) / entry_price * 100.0
    return (entry_price - exit_price) / entry_price * 100.0


class BacktestEngine:
    """
    Replays bars through a strategy. Each run() owns its own position slot,
    so one engine can be reused across instruments.
    """

    def __init__(
        self,
        strategy: Optional[BaseStrategy] = None,
        max_hold_bars: int = 24,
        warmup_bars: int = 55,
    ):
        self.strategy = strategy or TieredSignalStrategy()
        self.max_hold_bars = max_hold_bars
        self.warmup_bars = warmup_bars

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "BacktestEngine":
        config = config or Config()
        return cls(
            strategy=TieredSignalStrategy(config),
            max_hold_bars=config.max_hold_bars,
            warmup_bars=config.warmup_bars,
        )

    def _check_exit(self, pos: Position, bar: Bar, index: int) -> Optional[Tuple[float, str]]:
        """Exit price and reason for this bar, or None to stay open."""
        if pos.side == Side.LONG:
            stop_hit = bar.low <= pos.stop
            target_hit = bar.high >= pos.target
        else:
            stop_hit = bar.high >= pos.stop
            target_hit = bar.low <= pos.target
        if stop_hit and target_hit:
            return pos.stop, EXIT_SAME_BAR
        if target_hit:
            return pos.target, EXIT_TAKE_PROFIT
        if stop_hit:
            return pos.stop, EXIT_STOP_LOSS
        if index - pos.open_index >= self.max_hold_bars:
            return bar.close, EXIT_TIME
        return None

    def _open(self, signal: Signal, bar: Bar, index: int) -> Position:
        pos = Position(
            side=signal.side,
            stage=signal.stage,
            entry_price=signal.entry,
            stop=signal.stop,
            target=signal.target,
            open_index=index,
            risk_pct=signal.risk_pct,
            reward_pct=signal.reward_pct,
            score=signal.score,
            strength=signal.strength,
            open_time=bar.time,
        )
        logger.debug(
            "Open %s/%s at bar %d price=%.6g stop=%.6g target=%.6g",
            pos.side.value, pos.stage.value, index, pos.entry_price, pos.stop, pos.target,
        )
        return pos

    def _close(self, pos: Position, exit_price: float, reason: str, bar: Bar, index: int) -> Trade:
        pct = pnl_pct(pos.side, pos.entry_price, exit_price)
        r = pct / pos.risk_pct if pos.risk_pct > 0 else 0.0
        logger.debug("Close %s at bar %d price=%.6g reason=%s R=%.2f", pos.side.value, index, exit_price, reason, r)
        return Trade(
            side=pos.side,
            stage=pos.stage,
            entry_price=pos.entry_price,
            exit_price=exit_price,
            entry_index=pos.open_index,
            exit_index=index,
            pnl_pct=pct,
            r_multiple=r,
            held_bars=index - pos.open_index,
            exit_reason=reason,
            entry_time=pos.open_time,
            exit_time=bar.time,
        )

    def run(self, bars: BarsLike, symbol: str = "", timeframe: str = "") -> BacktestResult:
        """
        Run over OHLCV bars (list of Bar or DataFrame with time, open, high, low, close, volume).
        Raises InsufficientDataError before any bar is processed if the series is shorter than warm-up.
        """
        bars = as_bars(bars)
        if len(bars) < self.warmup_bars:
            raise InsufficientDataError(self.warmup_bars, len(bars))

        trades: List[Trade] = []
        position: Optional[Position] = None

        for i in range(self.warmup_bars - 1, len(bars)):
            bar = bars[i]

            if position is not None:
                hit = self._check_exit(position, bar, i)
                if hit is not None:
                    exit_price, reason = hit
                    trades.append(self._close(position, exit_price, reason, bar, i))
                    position = None
                continue

            # Decision uses bars[0..i] only; price is this bar's close.
            signal = self.strategy.get_signal(bars[: i + 1], symbol=symbol, timeframe=timeframe)
            if signal is None:
                continue
            position = self._open(signal, bar, i)

        if position is not None:
            last = len(bars) - 1
            trades.append(self._close(position, bars[last].close, EXIT_END, bars[last], last))

        stats = compute_stats(trades)
        logger.info(
            "Backtest %s %s: %d bars, %d trades, total %.2fR, max DD %.2fR",
            symbol or "-", timeframe or "-", len(bars), stats.total_trades, stats.total_r, stats.max_drawdown_r,
        )
        return BacktestResult(trades=trades, stats=stats)


def run_backtest(
    bars: BarsLike,
    config: Optional[Config] = None,
    symbol: str = "",
    timeframe: str = "",
) -> BacktestResult:
    """Backtest the tiered strategy over `bars` with `config`."""
    return BacktestEngine.from_config(config).run(bars, symbol=symbol, timeframe=timeframe)
