"""Unit tests for risk.model."""

import pytest
from signal_screener.core.config import Config
from signal_screener.core.types import Side, Stage
from signal_screener.risk.model import RiskModel


def test_confirm_long_levels():
    lv = RiskModel().levels(Side.LONG, Stage.CONFIRM, 100.0)
    assert lv.stop == pytest.approx(98.0)
    assert lv.target == pytest.approx(105.0)
    assert lv.rr == pytest.approx(2.5)


def test_watch_short_levels():
    lv = RiskModel().levels(Side.SHORT, Stage.WATCH, 100.0)
    assert lv.stop == pytest.approx(103.0)
    assert lv.target == pytest.approx(96.0)
    assert lv.rr == pytest.approx(4 / 3)


def test_levels_bracket_entry():
    model = RiskModel()
    for stage in (Stage.CONFIRM, Stage.WATCH):
        long_lv = model.levels(Side.LONG, stage, 2.5)
        short_lv = model.levels(Side.SHORT, stage, 2.5)
        assert long_lv.stop < 2.5 < long_lv.target
        assert short_lv.target < 2.5 < short_lv.stop


def test_from_config():
    model = RiskModel.from_config(Config(confirm_risk_pct=1.0, confirm_reward_pct=3.0))
    assert model.percentages(Stage.CONFIRM) == (1.0, 3.0)
    assert model.percentages(Stage.WATCH) == (3.0, 4.0)
