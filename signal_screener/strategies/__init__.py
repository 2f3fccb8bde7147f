"""Strategies: base interface and the tiered checklist scorer."""

from signal_screener.strategies.base import BaseStrategy
from signal_screener.strategies.predicates import Predicate
from signal_screener.strategies.tiered import TieredSignalStrategy, resolution_order, score_signal

__all__ = ["BaseStrategy", "Predicate", "TieredSignalStrategy", "resolution_order", "score_signal"]
