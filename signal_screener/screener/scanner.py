"""
Screener loop: score every (symbol, timeframe) pair through a market data
source, filter by stage/side, and rank confirm signals ahead of watch ones.
A failing pair is recorded as an error and the scan moves on.
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from signal_screener.core.config import Config
from signal_screener.core.types import Signal, Stage
from signal_screener.screener.source import MarketDataSource
from signal_screener.strategies.tiered import TieredSignalStrategy
from signal_screener.utils.timeframes import timeframe_minutes

logger = logging.getLogger("signal_screener.screener")

STABLECOIN_BASES = frozenset({
    "USDC", "USD1", "USDT", "TUSD", "USDP", "USDD", "DAI",
    "FDUSD", "BUSD", "PYUSD", "FRAX", "GUSD", "USDE",
})

STAGE_FILTERS = ("all", "confirm", "watch")
SIDE_FILTERS = ("all", "long", "short")


def is_excluded_symbol(symbol: str) -> bool:
    """True for BASE-USDT pairs whose base is a stablecoin."""
    parts = str(symbol or "").split("-")
    if len(parts) != 2:
        return False
    base, quote = parts[0].upper(), parts[1].upper()
    return quote == "USDT" and base in STABLECOIN_BASES


def _normalize(value: Optional[str], allowed: Sequence[str]) -> str:
    v = str(value or "").strip().lower()
    return v if v in allowed else "all"


def rank_signals(signals: List[Signal]) -> List[Signal]:
    """Confirm before watch, then strength desc, then score desc."""
    return sorted(
        signals,
        key=lambda s: (0 if s.stage == Stage.CONFIRM else 1, -s.strength, -s.score),
    )


@dataclass
class ScanError:
    symbol: str
    timeframe: str
    source: str  # "PARAMS" | "CANDLES" | "COMPUTE"
    message: str


@dataclass
class ScanResult:
    """Ranked signals plus per-pair errors."""
    signals: List[Signal] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)
    generated_at: Optional[datetime] = None
    duration_ms: int = 0
    params: Dict[str, Any] = field(default_factory=dict)


class Screener:
    """Runs the tiered strategy across symbols and timeframes."""

    def __init__(self, source: MarketDataSource, config: Optional[Config] = None):
        self.source = source
        self.config = config or Config()
        self.strategy = TieredSignalStrategy(self.config)

    def _valid_timeframes(self, timeframes: Sequence[str]) -> List[str]:
        valid = []
        for tf in timeframes:
            try:
                timeframe_minutes(tf)
            except ValueError:
                logger.warning("Skipping unsupported timeframe %r", tf)
                continue
            valid.append(tf)
        return valid

    def scan(
        self,
        symbols: Optional[Sequence[str]] = None,
        timeframes: Optional[Sequence[str]] = None,
        stage: str = "all",
        side: str = "all",
        include_errors: bool = True,
    ) -> ScanResult:
        started = time.monotonic()
        stage_filter = _normalize(stage, STAGE_FILTERS)
        side_filter = _normalize(side, SIDE_FILTERS)
        symbols = [s for s in (symbols or self.config.symbols) if not is_excluded_symbol(s)]
        tfs = self._valid_timeframes(timeframes or self.config.timeframes)
        params = {
            "symbols": list(symbols),
            "timeframes": tfs,
            "stage": stage_filter,
            "side": side_filter,
            "min_bars": self.config.min_bars,
            "limit": self.config.candles_limit,
            "max_signals": self.config.max_signals,
        }

        signals: List[Signal] = []
        errors: List[ScanError] = []
        if not tfs:
            errors.append(ScanError("-", "-", "PARAMS", "no valid timeframe"))

        for symbol in symbols if tfs else []:
            for tf in tfs:
                try:
                    bars = self.source.get_candles(symbol, tf, self.config.candles_limit)
                    if len(bars) < self.config.min_bars:
                        errors.append(ScanError(
                            symbol, tf, "CANDLES",
                            f"not enough candles (need {self.config.min_bars}, got {len(bars)})",
                        ))
                        continue
                    price = self.source.get_price(symbol)
                    signal = self.strategy.get_signal(bars, price, symbol=symbol, timeframe=tf)
                except Exception as e:
                    logger.warning("Scan failed for %s %s: %s", symbol, tf, e)
                    errors.append(ScanError(symbol, tf, "COMPUTE", str(e)))
                    continue
                if signal is None:
                    continue
                if stage_filter != "all" and signal.stage.value != stage_filter:
                    continue
                if side_filter != "all" and signal.side.value != side_filter:
                    continue
                signals.append(signal)
                if len(signals) >= self.config.max_signals:
                    break
            if len(signals) >= self.config.max_signals:
                break

        result = ScanResult(
            signals=rank_signals(signals),
            errors=errors if include_errors else [],
            generated_at=datetime.now(timezone.utc),
            duration_ms=int((time.monotonic() - started) * 1000),
            params=params,
        )
        logger.info(
            "Scan done: %d signals, %d errors in %d ms",
            len(result.signals), len(errors), result.duration_ms,
        )
        return result
