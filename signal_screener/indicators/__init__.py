"""Indicators: EMA, SMA, RSI, MACD, Bollinger, VWAP, structure, prior range."""

from signal_screener.indicators.technical import (
    bollinger,
    ema,
    ema_series,
    macd,
    prior_range,
    rsi,
    sma,
    structure_bias,
    vwap,
)
from signal_screener.indicators.snapshot import compute_snapshot

__all__ = [
    "bollinger",
    "ema",
    "ema_series",
    "macd",
    "prior_range",
    "rsi",
    "sma",
    "structure_bias",
    "vwap",
    "compute_snapshot",
]
