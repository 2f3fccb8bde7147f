"""
Indicator functions over plain sequences of floats or bars.

Every function returns None when the history is too short instead of raising.
RSI uses a fixed window (sum of the last `period` moves) rather than Wilder
smoothing, and the MACD signal line is seeded mid-series at index `slow`.
Both match the values the live screener has always produced.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

import numpy as np

from signal_screener.core.types import Bar, BollingerBands, MacdValue, PriceRange, StructureBias


def ema_series(values: Sequence[float], period: int) -> List[float]:
    """EMA at every index, seeded with values[0]. Same as v*k + e*(1-k) to float tolerance; exact on flat input."""
    if len(values) == 0:
        return []
    k = 2.0 / (period + 1)
    out = [float(values[0])]
    for v in values[1:]:
        out.append(out[-1] + k * (float(v) - out[-1]))
    return out


def ema(values: Sequence[float], period: int) -> Optional[float]:
    """Latest EMA value, or None for empty input."""
    series = ema_series(values, period)
    return series[-1] if series else None


def sma(values: Sequence[float], period: int) -> Optional[float]:
    """Mean of the last `period` values."""
    if period <= 0 or len(values) < period:
        return None
    return float(np.mean(np.asarray(values[-period:], dtype=float)))


def rsi(values: Sequence[float], period: int = 14) -> Optional[float]:
    """Fixed-window RSI over the last `period` differences. 100 when there are no losses."""
    if period <= 0 or len(values) < period + 1:
        return None
    gains = 0.0
    losses = 0.0
    for i in range(len(values) - period, len(values)):
        diff = values[i] - values[i - 1]
        if diff >= 0:
            gains += diff
        else:
            losses -= diff
    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def macd(
    values: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> Optional[MacdValue]:
    """MACD line, signal and histogram at the latest index, plus the previous histogram."""
    if len(values) < slow + signal + 5:
        return None
    fast_series = ema_series(values, fast)
    slow_series = ema_series(values, slow)
    line = [f - s for f, s in zip(fast_series, slow_series)]

    # Signal line starts at index `slow` from the raw MACD value there.
    k = 2.0 / (signal + 1)
    sig = line[slow]
    sig_prev = sig
    for v in line[slow + 1:]:
        sig_prev = sig
        sig = sig + k * (v - sig)

    last, prev = line[-1], line[-2]
    return MacdValue(
        line=last,
        signal=sig,
        hist=last - sig,
        hist_prev=prev - sig_prev,
    )


def bollinger(values: Sequence[float], period: int = 20, mult: float = 2.0) -> Optional[BollingerBands]:
    """Bands from population stddev of the last window, with the width of the window one bar earlier."""
    if period <= 0 or len(values) < period + 1:
        return None
    arr = np.asarray(values[-(period + 1):], dtype=float)
    last, prev = arr[1:], arr[:-1]
    mid, sd = float(last.mean()), float(last.std())
    sd_prev = float(prev.std())
    return BollingerBands(
        middle=mid,
        upper=mid + mult * sd,
        lower=mid - mult * sd,
        width=2 * mult * sd,
        width_prev=2 * mult * sd_prev,
    )


def vwap(bars: Sequence[Bar], period: int = 30) -> Optional[float]:
    """Volume-weighted typical price over the last `period` bars."""
    if period <= 0 or len(bars) < period:
        return None
    window = bars[-period:]
    typical = np.array([b.typical_price for b in window], dtype=float)
    volume = np.array([b.volume for b in window], dtype=float)
    total = volume.sum()
    if total == 0:
        return None
    return float((typical * volume).sum() / total)


def structure_bias(closes: Sequence[float]) -> StructureBias:
    """Short-term bias from the direction of the last four moves."""
    if len(closes) < 5:
        return StructureBias.NEUTRAL
    last5 = closes[-5:]
    ups = sum(1 for a, b in zip(last5, last5[1:]) if b > a)
    downs = sum(1 for a, b in zip(last5, last5[1:]) if b < a)
    if ups >= 3 and last5[-1] > last5[0]:
        return StructureBias.BULLISH
    if downs >= 3 and last5[-1] < last5[0]:
        return StructureBias.BEARISH
    return StructureBias.NEUTRAL


def prior_range(bars: Sequence[Bar], lookback: int = 20) -> Optional[PriceRange]:
    """High/low of the `lookback` bars before the latest bar."""
    if lookback <= 0 or len(bars) < lookback + 2:
        return None
    window = bars[-(lookback + 1):-1]
    return PriceRange(
        high=max(b.high for b in window),
        low=min(b.low for b in window),
    )
