"""Shared bar builders for tests."""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from signal_screener.core.types import Bar

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_bars(closes, volumes=None, highs=None, lows=None, step=timedelta(hours=1)):
    volumes = volumes if volumes is not None else [100.0] * len(closes)
    bars = []
    for i, c in enumerate(closes):
        c = float(c)
        bars.append(Bar(
            time=START + i * step,
            open=c * 0.999,
            high=float(highs[i]) if highs is not None else c * 1.001,
            low=float(lows[i]) if lows is not None else c * 0.998,
            close=c,
            volume=float(volumes[i]),
        ))
    return bars


@pytest.fixture
def make_bars():
    return build_bars


@pytest.fixture
def uptrend_bars():
    """200 bars rising 0.5% per bar, volume ramping 100 -> 300 over the last 10."""
    closes = [100.0 * 1.005 ** i for i in range(200)]
    volumes = [100.0] * 190 + list(np.linspace(100.0, 300.0, 10))
    return build_bars(closes, volumes)


@pytest.fixture
def downtrend_bars():
    closes = [100.0 * 0.995 ** i for i in range(200)]
    volumes = [100.0] * 190 + list(np.linspace(100.0, 300.0, 10))
    return build_bars(closes, volumes)


@pytest.fixture
def flat_bars():
    """200 bars with a constant close."""
    n = 200
    return build_bars([100.0] * n, highs=[100.5] * n, lows=[99.5] * n)


@pytest.fixture
def random_walk_bars():
    rng = np.random.default_rng(7)
    closes = 100.0 * np.cumprod(1 + rng.normal(0.0005, 0.01, 300))
    volumes = rng.uniform(50, 150, 300)
    highs = closes * (1 + rng.uniform(0, 0.01, 300))
    lows = closes * (1 - rng.uniform(0, 0.01, 300))
    return build_bars(closes, volumes, highs, lows)
