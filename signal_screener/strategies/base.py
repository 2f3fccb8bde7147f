"""Abstract strategy: indicator snapshot + signal classification."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from signal_screener.core.types import Bar, IndicatorSnapshot, Signal


class BaseStrategy(ABC):
    """Strategy computes a snapshot from a bar prefix and may return a Signal for its last bar."""

    @abstractmethod
    def compute_snapshot(self, bars: Sequence[Bar]) -> IndicatorSnapshot:
        """Indicator values at bars[-1]. Must not read anything beyond the bars given."""
        pass

    @abstractmethod
    def get_signal(self, bars: Sequence[Bar], current_price: Optional[float] = None, **kwargs: Any) -> Optional[Signal]:
        """
        Return a Signal for the last bar or None.
        current_price defaults to the last close (backtests have no live ticker).
        """
        pass
