"""Convert between OHLCV DataFrames and Bar lists."""

from __future__ import annotations
from typing import List, Sequence, Union

import pandas as pd

from signal_screener.core.types import Bar

OHLCV_COLUMNS = ["time", "open", "high", "low", "close", "volume"]

BarsLike = Union[Sequence[Bar], pd.DataFrame]


def frame_to_bars(df: pd.DataFrame) -> List[Bar]:
    """DataFrame with columns time, open, high, low, close, volume -> list of Bar."""
    missing = [c for c in OHLCV_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing OHLCV columns: {missing}")
    times = pd.to_datetime(df["time"])
    return [
        Bar(
            time=t.to_pydatetime(),
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for t, o, h, lo, c, v in zip(times, df["open"], df["high"], df["low"], df["close"], df["volume"])
    ]


def bars_to_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """List of Bar -> OHLCV DataFrame."""
    return pd.DataFrame(
        [(b.time, b.open, b.high, b.low, b.close, b.volume) for b in bars],
        columns=OHLCV_COLUMNS,
    )


def as_bars(data: BarsLike) -> List[Bar]:
    """Accept a DataFrame or any sequence of Bar."""
    if isinstance(data, pd.DataFrame):
        return frame_to_bars(data)
    return list(data)
