"""Utils: timeframes, DataFrame/bar conversion."""

from signal_screener.utils.frames import as_bars, bars_to_frame, frame_to_bars
from signal_screener.utils.timeframes import timeframe_minutes

__all__ = ["as_bars", "bars_to_frame", "frame_to_bars", "timeframe_minutes"]
