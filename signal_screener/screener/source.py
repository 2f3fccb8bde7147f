"""Market data interface for the screener and a CSV-backed implementation."""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

import pandas as pd

from signal_screener.core.types import Bar
from signal_screener.utils.frames import frame_to_bars


class MarketDataSource(ABC):
    """Candles and last price per symbol. Fetching, retries and caching live behind this."""

    @abstractmethod
    def get_candles(self, symbol: str, timeframe: str, limit: int = 500) -> List[Bar]:
        """Bars in ascending time order, at most `limit` of the most recent."""
        pass

    @abstractmethod
    def get_price(self, symbol: str) -> float:
        """Current price for symbol."""
        pass


class CsvMarketData(MarketDataSource):
    """
    Reads <SYMBOL>_<timeframe>.csv files (columns: time, open, high, low, close, volume).
    The price of a symbol is the last close of the first timeframe file found for it.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, symbol: str, timeframe: str) -> Path:
        return self.directory / f"{symbol}_{timeframe}.csv"

    def get_candles(self, symbol: str, timeframe: str, limit: int = 500) -> List[Bar]:
        path = self._path(symbol, timeframe)
        if not path.exists():
            raise FileNotFoundError(f"No candles file: {path}")
        df = pd.read_csv(path)
        df = df.sort_values("time").tail(limit)
        return frame_to_bars(df)

    def get_price(self, symbol: str) -> float:
        files = sorted(self.directory.glob(f"{symbol}_*.csv"))
        if not files:
            raise FileNotFoundError(f"No candles file for {symbol} in {self.directory}")
        df = pd.read_csv(files[0])
        return float(df.sort_values("time")["close"].iloc[-1])
