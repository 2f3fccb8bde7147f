"""Unit tests for screener.scanner and screener.source."""

from dataclasses import replace
from datetime import timedelta

import pytest

from signal_screener.core.config import Config
from signal_screener.core.types import Side, Stage
from signal_screener.screener.scanner import Screener, is_excluded_symbol, rank_signals
from signal_screener.screener.source import CsvMarketData, MarketDataSource
from signal_screener.strategies.tiered import score_signal
from signal_screener.utils.frames import bars_to_frame


class FakeSource(MarketDataSource):
    def __init__(self, candles, fail=()):
        self.candles = candles
        self.fail = set(fail)
        self.requested = []

    def get_candles(self, symbol, timeframe, limit=500):
        self.requested.append((symbol, timeframe))
        if symbol in self.fail:
            raise RuntimeError("exchange down")
        return self.candles.get((symbol, timeframe), [])[-limit:]

    def get_price(self, symbol):
        return None


@pytest.fixture
def source(uptrend_bars, downtrend_bars, flat_bars, make_bars):
    return FakeSource({
        ("UP-USDT", "1h"): uptrend_bars,
        ("DOWN-USDT", "1h"): downtrend_bars,
        ("FLAT-USDT", "1h"): flat_bars,
        ("SHORT-USDT", "1h"): make_bars([100.0] * 20),
    })


def test_is_excluded_symbol():
    assert is_excluded_symbol("USDC-USDT")
    assert is_excluded_symbol("dai-usdt")
    assert not is_excluded_symbol("BTC-USDT")
    assert not is_excluded_symbol("USDC-BTC")
    assert not is_excluded_symbol("USDCUSDT")


def test_scan_finds_both_trends(source):
    result = Screener(source, Config()).scan(symbols=["UP-USDT", "DOWN-USDT", "FLAT-USDT"], timeframes=["1h"])
    by_symbol = {s.symbol: s for s in result.signals}
    assert set(by_symbol) == {"UP-USDT", "DOWN-USDT"}
    assert by_symbol["UP-USDT"].side == Side.LONG
    assert by_symbol["UP-USDT"].stage == Stage.CONFIRM
    assert by_symbol["DOWN-USDT"].side == Side.SHORT
    assert by_symbol["UP-USDT"].timeframe == "1h"
    assert result.errors == []
    assert result.generated_at is not None


def test_scan_ranks_confirm_first(source):
    result = Screener(source, Config()).scan(symbols=["DOWN-USDT", "UP-USDT"], timeframes=["1h"])
    stages = [s.stage for s in result.signals]
    assert stages == sorted(stages, key=lambda st: 0 if st == Stage.CONFIRM else 1)
    assert result.signals[0].symbol == "UP-USDT"


def test_scan_records_errors_and_continues(source):
    source.fail.add("BROKEN-USDT")
    result = Screener(source, Config()).scan(symbols=["BROKEN-USDT", "SHORT-USDT", "UP-USDT"], timeframes=["1h"])
    kinds = {(e.symbol, e.source) for e in result.errors}
    assert ("BROKEN-USDT", "COMPUTE") in kinds
    assert ("SHORT-USDT", "CANDLES") in kinds
    assert [s.symbol for s in result.signals] == ["UP-USDT"]


def test_scan_can_hide_errors(source):
    result = Screener(source, Config()).scan(symbols=["SHORT-USDT"], timeframes=["1h"], include_errors=False)
    assert result.errors == []


def test_scan_invalid_timeframes(source):
    result = Screener(source, Config()).scan(symbols=["UP-USDT"], timeframes=["1x", "bogus"])
    assert result.signals == []
    assert [e.source for e in result.errors] == ["PARAMS"]
    assert source.requested == []


def test_scan_skips_stablecoins(source):
    Screener(source, Config()).scan(symbols=["USDC-USDT", "UP-USDT"], timeframes=["1h"])
    assert source.requested == [("UP-USDT", "1h")]


def test_scan_stage_and_side_filters(source):
    screener = Screener(source, Config())
    longs = screener.scan(symbols=["UP-USDT", "DOWN-USDT"], timeframes=["1h"], side="long")
    assert [s.symbol for s in longs.signals] == ["UP-USDT"]
    shorts = screener.scan(symbols=["UP-USDT", "DOWN-USDT"], timeframes=["1h"], side="SHORT")
    assert [s.symbol for s in shorts.signals] == ["DOWN-USDT"]
    confirm = screener.scan(symbols=["UP-USDT"], timeframes=["1h"], stage="confirm")
    assert confirm.params["stage"] == "confirm"
    assert all(s.stage == Stage.CONFIRM for s in confirm.signals)
    unknown = screener.scan(symbols=["UP-USDT"], timeframes=["1h"], stage="maybe")
    assert unknown.params["stage"] == "all"


def test_scan_caps_signals(source):
    result = Screener(source, Config(max_signals=1)).scan(symbols=["UP-USDT", "DOWN-USDT"], timeframes=["1h"])
    assert len(result.signals) == 1


def test_rank_signals_orders_by_strength_then_score(uptrend_bars):
    base = score_signal(uptrend_bars)
    a = replace(base, symbol="A", stage=Stage.WATCH, strength=5, score=8)
    b = replace(base, symbol="B", stage=Stage.CONFIRM, strength=2, score=3)
    c = replace(base, symbol="C", stage=Stage.CONFIRM, strength=3, score=4)
    d = replace(base, symbol="D", stage=Stage.CONFIRM, strength=3, score=5)
    assert [s.symbol for s in rank_signals([a, b, c, d])] == ["D", "C", "B", "A"]


def test_csv_source(tmp_path, uptrend_bars):
    df = bars_to_frame(uptrend_bars)
    df.iloc[::-1].to_csv(tmp_path / "UP-USDT_1h.csv", index=False)
    src = CsvMarketData(tmp_path)
    bars = src.get_candles("UP-USDT", "1h", limit=100)
    assert len(bars) == 100
    assert bars[-1].close == pytest.approx(uptrend_bars[-1].close)
    assert bars[1].time - bars[0].time == timedelta(hours=1)
    assert src.get_price("UP-USDT") == pytest.approx(uptrend_bars[-1].close)
    with pytest.raises(FileNotFoundError):
        src.get_candles("UP-USDT", "6h")
