"""
Named predicates for the tiered checklist. Each is evaluated once per side and
kept in the signal so every score can be traced back to its inputs.
A missing indicator always makes its predicate False.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Tuple

from signal_screener.core.config import Config
from signal_screener.core.types import IndicatorSnapshot, Side, StructureBias


class Predicate(str, Enum):
    TREND = "trend"
    STRUCTURE = "structure"
    RSI_PULLBACK = "rsi_pullback"
    RSI_MOMENTUM = "rsi_momentum"
    MACD_MOMENTUM = "macd_momentum"
    BAND_EXPANDING = "band_expanding"
    BAND_EXPANDING_WITH_MID = "band_expanding_with_mid"
    VOLUME_PULSE = "volume_pulse"
    VOLUME_SPIKE = "volume_spike"
    VWAP_CONFIRM = "vwap_confirm"
    VWAP_WATCH = "vwap_watch"
    RANGE_BREAKOUT = "range_breakout"
    PRICE_MOMENTUM = "price_momentum"


CONFIRM_CHECKLIST: Tuple[Predicate, ...] = (
    Predicate.TREND,
    Predicate.RSI_PULLBACK,
    Predicate.MACD_MOMENTUM,
    Predicate.BAND_EXPANDING_WITH_MID,
    Predicate.VOLUME_PULSE,
    Predicate.VWAP_CONFIRM,
)

WATCH_GATE: Tuple[Predicate, ...] = (
    Predicate.TREND,
    Predicate.STRUCTURE,
)

WATCH_CHECKLIST: Tuple[Predicate, ...] = (
    Predicate.RANGE_BREAKOUT,
    Predicate.MACD_MOMENTUM,
    Predicate.RSI_MOMENTUM,
    Predicate.BAND_EXPANDING,
    Predicate.VOLUME_PULSE,
    Predicate.VOLUME_SPIKE,
    Predicate.PRICE_MOMENTUM,
    Predicate.VWAP_WATCH,
)


def vwap_deviation_pct(price: float, vwap: Optional[float]) -> Optional[float]:
    """Percent distance of price from VWAP."""
    if not vwap:
        return None
    return (price - vwap) / vwap * 100.0


def _in_closed(value: Optional[float], band: Tuple[float, float]) -> bool:
    return value is not None and band[0] <= value <= band[1]


def _in_open(value: Optional[float], band: Tuple[float, float]) -> bool:
    return value is not None and band[0] < value < band[1]


def evaluate(
    snapshot: IndicatorSnapshot,
    side: Side,
    price: float,
    prev_close: Optional[float],
    config: Config,
) -> Dict[Predicate, bool]:
    """Evaluate every predicate for one side."""
    long = Side(side) == Side.LONG
    s = snapshot

    if s.ema_fast is None or s.ema_slow is None:
        trend = False
    elif long:
        trend = s.ema_fast > s.ema_slow and price > s.ema_fast
    else:
        trend = s.ema_fast < s.ema_slow and price < s.ema_fast

    contrary = StructureBias.BEARISH if long else StructureBias.BULLISH
    structure = s.structure_bias != contrary

    if s.macd is None:
        macd_ok = False
    elif long:
        macd_ok = s.macd.hist > s.macd.hist_prev and s.macd.hist >= 0
    else:
        macd_ok = s.macd.hist < s.macd.hist_prev and s.macd.hist <= 0

    bb = s.bollinger
    expanding = bb is not None and bb.width_prev > 0 and bb.width >= bb.width_prev
    if not expanding:
        with_mid = False
    elif long:
        with_mid = price >= bb.middle
    else:
        with_mid = price <= bb.middle

    pulse = s.volume_pulse is not None and s.volume_pulse > config.vol_pulse_min
    spike = (
        s.volume_ma is not None
        and s.volume_last is not None
        and s.volume_last > s.volume_ma * config.vol_spike_mult
    )

    if s.prior_range is None:
        breakout = False
    elif long:
        breakout = price >= s.prior_range.high
    else:
        breakout = price <= s.prior_range.low

    if prev_close is None:
        momentum = False
    elif long:
        momentum = price > prev_close
    else:
        momentum = price < prev_close

    dev = vwap_deviation_pct(price, s.vwap)
    return {
        Predicate.TREND: trend,
        Predicate.STRUCTURE: structure,
        Predicate.RSI_PULLBACK: _in_closed(s.rsi, config.rsi_pullback_long if long else config.rsi_pullback_short),
        Predicate.RSI_MOMENTUM: _in_closed(s.rsi, config.rsi_momentum_long if long else config.rsi_momentum_short),
        Predicate.MACD_MOMENTUM: macd_ok,
        Predicate.BAND_EXPANDING: expanding,
        Predicate.BAND_EXPANDING_WITH_MID: with_mid,
        Predicate.VOLUME_PULSE: pulse,
        Predicate.VOLUME_SPIKE: spike,
        Predicate.VWAP_CONFIRM: _in_open(dev, config.vwap_confirm_long if long else config.vwap_confirm_short),
        Predicate.VWAP_WATCH: _in_open(dev, config.vwap_watch_long if long else config.vwap_watch_short),
        Predicate.RANGE_BREAKOUT: breakout,
        Predicate.PRICE_MOMENTUM: momentum,
    }


def describe(predicate: Predicate, side: Side, config: Config) -> str:
    """Human-readable label for a predicate on one side."""
    long = Side(side) == Side.LONG
    fast, slow = config.ema_fast, config.ema_slow
    if predicate == Predicate.TREND:
        if long:
            return f"Trend: EMA{fast} > EMA{slow} and price above EMA{fast}"
        return f"Trend: EMA{fast} < EMA{slow} and price below EMA{fast}"
    if predicate == Predicate.STRUCTURE:
        return "Structure not bearish" if long else "Structure not bullish"
    if predicate == Predicate.RSI_PULLBACK:
        lo, hi = config.rsi_pullback_long if long else config.rsi_pullback_short
        return f"RSI {'pullback' if long else 'bounce'} ({lo:g}-{hi:g})"
    if predicate == Predicate.RSI_MOMENTUM:
        lo, hi = config.rsi_momentum_long if long else config.rsi_momentum_short
        return f"RSI {'hot' if long else 'cold'} ({lo:g}-{hi:g})"
    if predicate == Predicate.MACD_MOMENTUM:
        return "MACD momentum rising/positive" if long else "MACD momentum falling/negative"
    if predicate == Predicate.BAND_EXPANDING:
        return "Bollinger width not contracting"
    if predicate == Predicate.BAND_EXPANDING_WITH_MID:
        return "Bollinger expanding, price above mid" if long else "Bollinger expanding, price below mid"
    if predicate == Predicate.VOLUME_PULSE:
        return f"Volume pulse ({config.vol_fast_len}/{config.vol_ma_len}) > {config.vol_pulse_min:g}"
    if predicate == Predicate.VOLUME_SPIKE:
        return f"Volume spike > {config.vol_spike_mult:g}x average"
    if predicate == Predicate.VWAP_CONFIRM:
        lo, hi = config.vwap_confirm_long if long else config.vwap_confirm_short
        return f"VWAP deviation in ({lo:g}%, {hi:g}%)"
    if predicate == Predicate.VWAP_WATCH:
        lo, hi = config.vwap_watch_long if long else config.vwap_watch_short
        return f"VWAP deviation in ({lo:g}%, {hi:g}%)"
    if predicate == Predicate.RANGE_BREAKOUT:
        n = config.range_lookback
        return f"Breaking prior {n}-bar high" if long else f"Breaking prior {n}-bar low"
    if predicate == Predicate.PRICE_MOMENTUM:
        return "Price above previous close" if long else "Price below previous close"
    raise ValueError(f"Unknown predicate: {predicate}")
