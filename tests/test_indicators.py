"""Unit tests for indicators.technical and indicators.snapshot."""

import numpy as np
import pytest

from signal_screener.core.config import Config
from signal_screener.core.types import StructureBias
from signal_screener.indicators.snapshot import compute_snapshot
from signal_screener.indicators.technical import (
    bollinger,
    ema,
    ema_series,
    macd,
    prior_range,
    rsi,
    sma,
    structure_bias,
    vwap,
)


def test_sma_is_mean_of_last_period():
    values = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]
    for p in range(1, len(values) + 1):
        assert sma(values, p) == pytest.approx(sum(values[-p:]) / p)


def test_sma_short_input():
    assert sma([1.0, 2.0], 3) is None
    assert sma([], 1) is None


def test_ema_seed_and_recurrence():
    values = [10.0, 11.0, 12.0]
    k = 2 / (3 + 1)
    e1 = 11.0 * k + 10.0 * (1 - k)
    e2 = 12.0 * k + e1 * (1 - k)
    assert ema_series(values, 3)[0] == 10.0
    assert ema(values, 3) == pytest.approx(e2)
    assert ema([], 5) is None


def test_ema_sma_deterministic():
    values = list(np.linspace(1, 50, 77))
    assert ema(values, 20) == ema(list(values), 20)
    assert sma(values, 20) == sma(list(values), 20)


def test_ema_flat_series_is_exact():
    assert ema([42.0] * 300, 20) == 42.0


def test_ema_matches_original_weighting():
    rng = np.random.default_rng(3)
    values = list(100 + rng.normal(0, 2, 400).cumsum())
    for period in (9, 20, 50):
        k = 2 / (period + 1)
        e = values[0]
        expected = [e]
        for v in values[1:]:
            e = v * k + e * (1 - k)
            expected.append(e)
        assert ema_series(values, period) == pytest.approx(expected, rel=1e-12)


def test_rsi_no_losses_is_100():
    assert rsi([1.0, 2.0, 3.0, 4.0, 5.0], period=4) == 100.0
    assert rsi([5.0] * 20, period=14) == 100.0


def test_rsi_fixed_window():
    # last 4 moves: +1, -1, +1, -1 -> avg gain == avg loss -> 50
    assert rsi([10.0, 11.0, 10.0, 11.0, 10.0], period=4) == pytest.approx(50.0)
    # moves before the window are ignored
    assert rsi([50.0, 10.0, 11.0, 10.0, 11.0, 10.0], period=4) == pytest.approx(50.0)


def test_rsi_bounds():
    rng = np.random.default_rng(1)
    for _ in range(20):
        values = list(100 + rng.normal(0, 5, 40).cumsum())
        value = rsi(values, 14)
        assert 0.0 <= value <= 100.0


def test_rsi_short_input():
    assert rsi([1.0] * 14, period=14) is None


def test_macd_short_input():
    assert macd([1.0] * 39) is None
    assert macd([1.0] * 40) is not None


def test_macd_flat_series_is_zero():
    m = macd([100.0] * 60)
    assert m.line == 0.0
    assert m.signal == 0.0
    assert m.hist == 0.0
    assert m.hist_prev == 0.0


def test_macd_signal_seeded_at_slow_index():
    values = [100.0 + (i % 7) - 0.1 * i for i in range(60)]
    fast, slow, sig = 12, 26, 9
    line = [f - s for f, s in zip(ema_series(values, fast), ema_series(values, slow))]
    signal = ema_series(line[slow:], sig)
    m = macd(values, fast, slow, sig)
    assert m.line == pytest.approx(line[-1])
    assert m.signal == pytest.approx(signal[-1])
    assert m.hist == pytest.approx(line[-1] - signal[-1])
    assert m.hist_prev == pytest.approx(line[-2] - signal[-2])


def test_bollinger_population_stddev():
    values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    bb = bollinger(values, period=5, mult=2)
    last = np.array([2.0, 3.0, 4.0, 5.0, 6.0])
    prev = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    assert bb.middle == pytest.approx(4.0)
    assert bb.upper == pytest.approx(4.0 + 2 * last.std())
    assert bb.lower == pytest.approx(4.0 - 2 * last.std())
    assert bb.width == pytest.approx(4 * last.std())
    assert bb.width_prev == pytest.approx(4 * prev.std())


def test_bollinger_short_input():
    assert bollinger([1.0] * 20, period=20) is None


def test_vwap(make_bars):
    bars = make_bars([10.0, 20.0], volumes=[1.0, 3.0], highs=[10.0, 20.0], lows=[10.0, 20.0])
    assert vwap(bars, period=2) == pytest.approx((10 * 1 + 20 * 3) / 4)


def test_vwap_zero_volume_or_short(make_bars):
    bars = make_bars([10.0, 11.0, 12.0], volumes=[0.0, 0.0, 0.0])
    assert vwap(bars, period=3) is None
    assert vwap(bars, period=4) is None


def test_structure_bias():
    assert structure_bias([1, 2, 3, 4, 5]) == StructureBias.BULLISH
    assert structure_bias([5, 4, 3, 2, 1]) == StructureBias.BEARISH
    assert structure_bias([1, 2, 1, 2, 1]) == StructureBias.NEUTRAL
    # three ups but last not above first
    assert structure_bias([5, 1, 2, 3, 4]) == StructureBias.NEUTRAL
    assert structure_bias([1, 2, 3, 4]) == StructureBias.NEUTRAL


def test_prior_range_excludes_current_bar(make_bars):
    closes = [10.0] * 21 + [50.0]
    highs = [11.0] * 20 + [12.0, 60.0]
    lows = [9.0] * 20 + [8.0, 40.0]
    bars = make_bars(closes, highs=highs, lows=lows)
    r = prior_range(bars, lookback=20)
    assert r.high == 12.0
    assert r.low == 8.0
    assert prior_range(bars[:21], lookback=20) is None


def test_snapshot_short_history_has_absent_values(make_bars):
    snap = compute_snapshot(make_bars([100.0, 101.0, 102.0]), Config())
    assert snap.ema_fast is not None
    assert snap.rsi is None
    assert snap.macd is None
    assert snap.bollinger is None
    assert snap.vwap is None
    assert snap.volume_pulse is None
    assert snap.prior_range is None
    assert snap.structure_bias == StructureBias.NEUTRAL


def test_snapshot_volume_pulse(make_bars):
    volumes = [100.0] * 15 + [200.0] * 5
    snap = compute_snapshot(make_bars([100.0] * 20, volumes=volumes), Config())
    assert snap.volume_ma == pytest.approx(125.0)
    assert snap.volume_pulse == pytest.approx(200.0 / 125.0)
    assert snap.volume_last == 200.0
