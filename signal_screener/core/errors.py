"""Exceptions raised by the screener core."""

from __future__ import annotations


class ScreenerError(Exception):
    """Base class for signal_screener errors."""


class ConfigError(ScreenerError):
    """Invalid configuration value."""


class InsufficientDataError(ScreenerError):
    """Bar sequence too short to attempt any decision."""

    def __init__(self, required: int, got: int):
        self.required = required
        self.got = got
        super().__init__(f"Not enough bars: need {required}, got {got}")
