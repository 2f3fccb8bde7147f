"""
Tiered checklist strategy.

Confirm ("actionable now"): strict checklist, score >= confirm_min_score.
Watch ("forming, revisit"): trend and structure must hold, then a looser
checklist scored against watch_min_score.
Resolution is confirm before watch, and within a stage the configured side
priority (long first by default). At most one signal per scan.
"""

from __future__ import annotations
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from signal_screener.core.config import Config
from signal_screener.core.types import Bar, IndicatorSnapshot, Side, SidePriority, Signal, Stage
from signal_screener.indicators.snapshot import compute_snapshot
from signal_screener.risk.model import RiskModel
from signal_screener.strategies.base import BaseStrategy
from signal_screener.strategies.predicates import (
    CONFIRM_CHECKLIST,
    WATCH_CHECKLIST,
    WATCH_GATE,
    Predicate,
    describe,
    evaluate,
    vwap_deviation_pct,
)
from signal_screener.utils.frames import BarsLike, as_bars

logger = logging.getLogger("signal_screener.strategy")

WATCH_NOTE = {
    Side.LONG: "Watch: trend holds but entry may be extended, wait for a pullback or retest",
    Side.SHORT: "Watch: trend holds but entry may be extended, wait for a bounce or retest",
}


def resolution_order(priority: SidePriority) -> List[Tuple[Stage, Side]]:
    """(stage, side) candidates in the order they are tried."""
    if SidePriority(priority) == SidePriority.LONG_FIRST:
        sides = (Side.LONG, Side.SHORT)
    else:
        sides = (Side.SHORT, Side.LONG)
    return [(Stage.CONFIRM, s) for s in sides] + [(Stage.WATCH, s) for s in sides]


def strength_from_score(score: int, score_max: int) -> int:
    """Score scaled to 1..5, halves rounded up."""
    return max(1, min(5, int(math.floor(score / score_max * 5 + 0.5))))


class TieredSignalStrategy(BaseStrategy):
    """Scores both sides against the confirm and watch checklists."""

    def __init__(self, config: Optional[Config] = None, risk_model: Optional[RiskModel] = None):
        self.config = config or Config()
        self.risk_model = risk_model or RiskModel.from_config(self.config)

    def compute_snapshot(self, bars: Sequence[Bar]) -> IndicatorSnapshot:
        return compute_snapshot(bars, self.config)

    def evaluate_side(
        self,
        snapshot: IndicatorSnapshot,
        side: Side,
        price: float,
        prev_close: Optional[float],
    ) -> Dict[Stage, Tuple[bool, int, Dict[Predicate, bool]]]:
        """Per stage: (qualifies, score, checks)."""
        checks = evaluate(snapshot, side, price, prev_close, self.config)
        confirm_score = sum(1 for p in CONFIRM_CHECKLIST if checks[p])
        gate = all(checks[p] for p in WATCH_GATE)
        watch_score = sum(1 for p in WATCH_CHECKLIST if checks[p])
        return {
            Stage.CONFIRM: (confirm_score >= self.config.confirm_min_score, confirm_score, checks),
            Stage.WATCH: (gate and watch_score >= self.config.watch_min_score, watch_score, checks),
        }

    def classify(
        self,
        snapshot: IndicatorSnapshot,
        price: float,
        prev_close: Optional[float],
    ) -> Optional[Tuple[Side, Stage, int, Dict[Predicate, bool]]]:
        """First qualifying (side, stage) in resolution order, or None."""
        evaluated = {
            side: self.evaluate_side(snapshot, side, price, prev_close)
            for side in (Side.LONG, Side.SHORT)
        }
        for stage, side in resolution_order(self.config.side_priority):
            qualifies, score, checks = evaluated[side][stage]
            if qualifies:
                return side, stage, score, checks
        return None

    def _reasons(self, side: Side, stage: Stage, checks: Dict[Predicate, bool]) -> List[str]:
        checklist = CONFIRM_CHECKLIST if stage == Stage.CONFIRM else WATCH_CHECKLIST
        lines = [] if stage == Stage.CONFIRM else [WATCH_NOTE[side]]
        for p in checklist:
            mark = "[x]" if checks[p] else "[ ]"
            lines.append(f"{mark} {describe(p, side, self.config)}")
        return lines

    def get_signal(
        self,
        bars: BarsLike,
        current_price: Optional[float] = None,
        symbol: str = "",
        timeframe: str = "",
        **kwargs: Any,
    ) -> Optional[Signal]:
        bars = as_bars(bars)
        if len(bars) < 2:
            return None
        last = bars[-1]
        price = float(current_price) if current_price is not None else last.close
        prev_close = bars[-2].close
        snapshot = self.compute_snapshot(bars)

        picked = self.classify(snapshot, price, prev_close)
        if picked is None:
            return None
        side, stage, score, checks = picked

        levels = self.risk_model.levels(side, stage, price)
        exit_by = None
        if isinstance(last.time, datetime):
            exit_by = last.time + timedelta(hours=self.config.hold_hours)
        signal = Signal(
            symbol=symbol,
            timeframe=timeframe,
            side=side,
            stage=stage,
            score=score,
            score_max=self.config.score_max,
            strength=strength_from_score(score, self.config.score_max),
            entry=price,
            stop=levels.stop,
            target=levels.target,
            risk_pct=levels.risk_pct,
            reward_pct=levels.reward_pct,
            rr=levels.rr,
            reasons=self._reasons(side, stage, checks),
            checks={p.value: ok for p, ok in checks.items()},
            time=last.time,
            exit_by=exit_by,
            vwap=snapshot.vwap,
            vwap_dev_pct=vwap_deviation_pct(price, snapshot.vwap),
            volume_pulse=snapshot.volume_pulse,
            structure_bias=snapshot.structure_bias,
        )
        logger.debug(
            "%s %s %s/%s score=%d/%d entry=%.6g",
            symbol or "-", timeframe or "-", side.value, stage.value, score, signal.score_max, price,
        )
        return signal


def score_signal(
    bars: BarsLike,
    current_price: Optional[float] = None,
    config: Optional[Config] = None,
    symbol: str = "",
    timeframe: str = "",
) -> Optional[Signal]:
    """Classify the latest bar of `bars`. Returns None when nothing qualifies."""
    return TieredSignalStrategy(config).get_signal(bars, current_price, symbol=symbol, timeframe=timeframe)
