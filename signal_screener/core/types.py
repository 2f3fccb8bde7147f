"""
Core data types for bars, indicator snapshots, signals, positions, and trades.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class Side(str, Enum):
    LONG = "long"
    SHORT = "short"


class Stage(str, Enum):
    CONFIRM = "confirm"
    WATCH = "watch"


class StructureBias(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class SidePriority(str, Enum):
    """Which side wins when both qualify for the same stage on one scan."""
    LONG_FIRST = "long_first"
    SHORT_FIRST = "short_first"


@dataclass(frozen=True)
class Bar:
    """OHLCV candle."""
    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3.0


@dataclass(frozen=True)
class MacdValue:
    line: float
    signal: float
    hist: float
    hist_prev: float


@dataclass(frozen=True)
class BollingerBands:
    middle: float
    upper: float
    lower: float
    width: float
    width_prev: float


@dataclass(frozen=True)
class PriceRange:
    high: float
    low: float


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Indicator values at the latest bar of a prefix. None = not enough history."""
    ema_fast: Optional[float] = None
    ema_slow: Optional[float] = None
    rsi: Optional[float] = None
    macd: Optional[MacdValue] = None
    bollinger: Optional[BollingerBands] = None
    vwap: Optional[float] = None
    volume_pulse: Optional[float] = None
    volume_ma: Optional[float] = None
    volume_last: Optional[float] = None
    structure_bias: StructureBias = StructureBias.NEUTRAL
    prior_range: Optional[PriceRange] = None


@dataclass
class Signal:
    """Classified signal with entry, stop, and target."""
    symbol: str
    timeframe: str
    side: Side
    stage: Stage
    score: int
    score_max: int
    strength: int
    entry: float
    stop: float
    target: float
    risk_pct: float
    reward_pct: float
    rr: float
    reasons: List[str] = field(default_factory=list)
    checks: Dict[str, bool] = field(default_factory=dict)
    time: Optional[datetime] = None
    exit_by: Optional[datetime] = None
    vwap: Optional[float] = None
    vwap_dev_pct: Optional[float] = None
    volume_pulse: Optional[float] = None
    structure_bias: StructureBias = StructureBias.NEUTRAL


@dataclass
class Position:
    """Open backtest position."""
    side: Side
    stage: Stage
    entry_price: float
    stop: float
    target: float
    open_index: int
    risk_pct: float
    reward_pct: float
    score: int
    strength: int
    open_time: Optional[datetime] = None


@dataclass(frozen=True)
class Trade:
    """Closed trade for analytics."""
    side: Side
    stage: Stage
    entry_price: float
    exit_price: float
    entry_index: int
    exit_index: int
    pnl_pct: float
    r_multiple: float
    held_bars: int
    exit_reason: str  # "tp" | "sl" | "stop-and-target-same-bar" | "time" | "end"
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
