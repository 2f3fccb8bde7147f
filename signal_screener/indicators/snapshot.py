"""Build an IndicatorSnapshot from a bar prefix. Only the bars passed in are read."""

from __future__ import annotations
from typing import Optional, Sequence

from signal_screener.core.config import Config
from signal_screener.core.types import Bar, IndicatorSnapshot
from signal_screener.indicators.technical import (
    bollinger,
    ema,
    macd,
    prior_range,
    rsi,
    sma,
    structure_bias,
    vwap,
)


def compute_snapshot(bars: Sequence[Bar], config: Optional[Config] = None) -> IndicatorSnapshot:
    """Indicator values at bars[-1] using the lookbacks in `config`."""
    config = config or Config()
    closes = [b.close for b in bars]
    volumes = [b.volume for b in bars]

    vol_ma = sma(volumes, config.vol_ma_len)
    vol_fast = sma(volumes, config.vol_fast_len)
    pulse = vol_fast / vol_ma if vol_fast is not None and vol_ma else None

    return IndicatorSnapshot(
        ema_fast=ema(closes, config.ema_fast),
        ema_slow=ema(closes, config.ema_slow),
        rsi=rsi(closes, config.rsi_len),
        macd=macd(closes, config.macd_fast, config.macd_slow, config.macd_signal),
        bollinger=bollinger(closes, config.bb_len, config.bb_mult),
        vwap=vwap(bars, config.vwap_len),
        volume_pulse=pulse,
        volume_ma=vol_ma,
        volume_last=volumes[-1] if volumes else None,
        structure_bias=structure_bias(closes),
        prior_range=prior_range(bars, config.range_lookback),
    )
