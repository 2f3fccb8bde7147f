"""
Load configuration from config.yaml and .env. Env vars override the file.
The core never reads the environment itself; it only sees the Config passed in.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

import yaml
from dotenv import load_dotenv

from signal_screener.core.errors import ConfigError
from signal_screener.core.types import SidePriority

Band = Tuple[float, float]

DEFAULT_SYMBOLS = ("BTC-USDT", "ETH-USDT", "SOL-USDT", "XRP-USDT", "BNB-USDT")
DEFAULT_TIMEFRAMES = ("1h", "6h")


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def _band(value: Any, default: Band) -> Band:
    if value is None:
        return default
    try:
        lo, hi = value
        return float(lo), float(hi)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected a [low, high] pair, got {value!r}")


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_int(key: str, default: int = 0) -> int:
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    scanner = data.get("scanner", {})
    risk = data.get("risk", {})
    backtest = data.get("backtest", {})
    screener = data.get("screener", {})
    logging_cfg = data.get("logging", {})

    return Config(
        # Indicator lookbacks
        ema_fast=scanner.get("ema_fast", 20),
        ema_slow=scanner.get("ema_slow", 50),
        rsi_len=scanner.get("rsi_len", 14),
        macd_fast=scanner.get("macd_fast", 12),
        macd_slow=scanner.get("macd_slow", 26),
        macd_signal=scanner.get("macd_signal", 9),
        bb_len=scanner.get("bb_len", 20),
        bb_mult=scanner.get("bb_mult", 2.0),
        vwap_len=scanner.get("vwap_len", 30),
        range_lookback=scanner.get("range_lookback", 20),
        vol_fast_len=scanner.get("vol_fast_len", 5),
        vol_ma_len=scanner.get("vol_ma_len", 20),
        # Predicate thresholds
        vol_pulse_min=scanner.get("vol_pulse_min", 1.1),
        vol_spike_mult=scanner.get("vol_spike_mult", 1.5),
        rsi_pullback_long=_band(scanner.get("rsi_pullback_long"), (48.0, 55.0)),
        rsi_pullback_short=_band(scanner.get("rsi_pullback_short"), (45.0, 52.0)),
        rsi_momentum_long=_band(scanner.get("rsi_momentum_long"), (60.0, 72.0)),
        rsi_momentum_short=_band(scanner.get("rsi_momentum_short"), (28.0, 40.0)),
        vwap_confirm_long=_band(scanner.get("vwap_confirm_long"), (-1.5, 3.0)),
        vwap_confirm_short=_band(scanner.get("vwap_confirm_short"), (-3.0, 1.5)),
        vwap_watch_long=_band(scanner.get("vwap_watch_long"), (-3.0, 6.0)),
        vwap_watch_short=_band(scanner.get("vwap_watch_short"), (-6.0, 3.0)),
        # Tiers
        confirm_min_score=env_int("CONFIRM_MIN_SCORE", scanner.get("confirm_min_score", 4)),
        watch_min_score=env_int("WATCH_MIN_SCORE", scanner.get("watch_min_score", 2)),
        score_max=scanner.get("score_max", 8),
        side_priority=env("SIDE_PRIORITY", scanner.get("side_priority", "long_first")),
        hold_hours=env_float("HOLD_HOURS", scanner.get("hold_hours", 6.0)),
        # Risk
        confirm_risk_pct=risk.get("confirm_risk_pct", 2.0),
        confirm_reward_pct=risk.get("confirm_reward_pct", 5.0),
        watch_risk_pct=risk.get("watch_risk_pct", 3.0),
        watch_reward_pct=risk.get("watch_reward_pct", 4.0),
        # Backtest
        max_hold_bars=env_int("MAX_HOLD_BARS", backtest.get("max_hold_bars", 24)),
        warmup_bars=env_int("WARMUP_BARS", backtest.get("warmup_bars", 55)),
        # Screener
        symbols=screener.get("symbols", DEFAULT_SYMBOLS),
        timeframes=screener.get("timeframes", DEFAULT_TIMEFRAMES),
        max_signals=screener.get("max_signals", 120),
        min_bars=screener.get("min_bars", 55),
        candles_limit=screener.get("candles_limit", 500),
        # Logging
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "signal_screener.log"),
    )


class Config:
    """Unified configuration. Treat as immutable after load."""

    __slots__ = (
        "ema_fast", "ema_slow", "rsi_len", "macd_fast", "macd_slow", "macd_signal",
        "bb_len", "bb_mult", "vwap_len", "range_lookback", "vol_fast_len", "vol_ma_len",
        "vol_pulse_min", "vol_spike_mult",
        "rsi_pullback_long", "rsi_pullback_short", "rsi_momentum_long", "rsi_momentum_short",
        "vwap_confirm_long", "vwap_confirm_short", "vwap_watch_long", "vwap_watch_short",
        "confirm_min_score", "watch_min_score", "score_max", "side_priority", "hold_hours",
        "confirm_risk_pct", "confirm_reward_pct", "watch_risk_pct", "watch_reward_pct",
        "max_hold_bars", "warmup_bars",
        "symbols", "timeframes", "max_signals", "min_bars", "candles_limit",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        ema_fast: int = 20,
        ema_slow: int = 50,
        rsi_len: int = 14,
        macd_fast: int = 12,
        macd_slow: int = 26,
        macd_signal: int = 9,
        bb_len: int = 20,
        bb_mult: float = 2.0,
        vwap_len: int = 30,
        range_lookback: int = 20,
        vol_fast_len: int = 5,
        vol_ma_len: int = 20,
        vol_pulse_min: float = 1.1,
        vol_spike_mult: float = 1.5,
        rsi_pullback_long: Band = (48.0, 55.0),
        rsi_pullback_short: Band = (45.0, 52.0),
        rsi_momentum_long: Band = (60.0, 72.0),
        rsi_momentum_short: Band = (28.0, 40.0),
        vwap_confirm_long: Band = (-1.5, 3.0),
        vwap_confirm_short: Band = (-3.0, 1.5),
        vwap_watch_long: Band = (-3.0, 6.0),
        vwap_watch_short: Band = (-6.0, 3.0),
        confirm_min_score: int = 4,
        watch_min_score: int = 2,
        score_max: int = 8,
        side_priority: str = "long_first",
        hold_hours: float = 6.0,
        confirm_risk_pct: float = 2.0,
        confirm_reward_pct: float = 5.0,
        watch_risk_pct: float = 3.0,
        watch_reward_pct: float = 4.0,
        max_hold_bars: int = 24,
        warmup_bars: int = 55,
        symbols: Sequence[str] = DEFAULT_SYMBOLS,
        timeframes: Sequence[str] = DEFAULT_TIMEFRAMES,
        max_signals: int = 120,
        min_bars: int = 55,
        candles_limit: int = 500,
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "signal_screener.log",
    ):
        self.ema_fast = int(ema_fast)
        self.ema_slow = int(ema_slow)
        self.rsi_len = int(rsi_len)
        self.macd_fast = int(macd_fast)
        self.macd_slow = int(macd_slow)
        self.macd_signal = int(macd_signal)
        self.bb_len = int(bb_len)
        self.bb_mult = float(bb_mult)
        self.vwap_len = int(vwap_len)
        self.range_lookback = int(range_lookback)
        self.vol_fast_len = int(vol_fast_len)
        self.vol_ma_len = int(vol_ma_len)
        self.vol_pulse_min = float(vol_pulse_min)
        self.vol_spike_mult = float(vol_spike_mult)
        self.rsi_pullback_long = tuple(rsi_pullback_long)
        self.rsi_pullback_short = tuple(rsi_pullback_short)
        self.rsi_momentum_long = tuple(rsi_momentum_long)
        self.rsi_momentum_short = tuple(rsi_momentum_short)
        self.vwap_confirm_long = tuple(vwap_confirm_long)
        self.vwap_confirm_short = tuple(vwap_confirm_short)
        self.vwap_watch_long = tuple(vwap_watch_long)
        self.vwap_watch_short = tuple(vwap_watch_short)
        self.confirm_min_score = int(confirm_min_score)
        self.watch_min_score = int(watch_min_score)
        self.score_max = int(score_max)
        try:
            self.side_priority = SidePriority(str(side_priority).strip().lower())
        except ValueError:
            raise ConfigError(f"Unknown side_priority: {side_priority!r}")
        self.hold_hours = float(hold_hours)
        self.confirm_risk_pct = float(confirm_risk_pct)
        self.confirm_reward_pct = float(confirm_reward_pct)
        self.watch_risk_pct = float(watch_risk_pct)
        self.watch_reward_pct = float(watch_reward_pct)
        self.max_hold_bars = int(max_hold_bars)
        self.warmup_bars = int(warmup_bars)
        if self.warmup_bars < 2:
            raise ConfigError(f"warmup_bars must be >= 2, got {self.warmup_bars}")
        if self.score_max <= 0:
            raise ConfigError(f"score_max must be positive, got {self.score_max}")
        self.symbols = tuple(symbols)
        self.timeframes = tuple(timeframes)
        self.max_signals = int(max_signals)
        self.min_bars = int(min_bars)
        self.candles_limit = int(candles_limit)
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file
