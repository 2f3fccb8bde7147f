"""Core: config, types, errors, logging."""

from signal_screener.core.config import load_config, Config
from signal_screener.core.errors import ScreenerError, ConfigError, InsufficientDataError
from signal_screener.core.types import (
    Bar,
    IndicatorSnapshot,
    Position,
    Side,
    SidePriority,
    Signal,
    Stage,
    StructureBias,
    Trade,
)
from signal_screener.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "ScreenerError",
    "ConfigError",
    "InsufficientDataError",
    "Bar",
    "IndicatorSnapshot",
    "Position",
    "Side",
    "SidePriority",
    "Signal",
    "Stage",
    "StructureBias",
    "Trade",
    "setup_logging",
]
