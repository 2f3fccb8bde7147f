"""
Risk model: fixed stop/target percentages keyed by (side, stage).
Confirm signals get a tighter stop and larger target than watch signals.
Not volatility-adaptive; an ATR-based model can replace it behind `levels()`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from signal_screener.core.config import Config
from signal_screener.core.types import Side, Stage


@dataclass(frozen=True)
class RiskLevels:
    """Stop/target for one entry price."""
    stop: float
    target: float
    risk_pct: float
    reward_pct: float

    @property
    def rr(self) -> float:
        """Reward/risk ratio."""
        if self.risk_pct <= 0:
            return 0.0
        return self.reward_pct / self.risk_pct


class RiskModel:
    """Looks up (risk_pct, reward_pct) per stage and turns them into price levels."""

    def __init__(
        self,
        confirm_risk_pct: float = 2.0,
        confirm_reward_pct: float = 5.0,
        watch_risk_pct: float = 3.0,
        watch_reward_pct: float = 4.0,
    ):
        self._table: Dict[Stage, Tuple[float, float]] = {
            Stage.CONFIRM: (confirm_risk_pct, confirm_reward_pct),
            Stage.WATCH: (watch_risk_pct, watch_reward_pct),
        }

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "RiskModel":
        config = config or Config()
        return cls(
            confirm_risk_pct=config.confirm_risk_pct,
            confirm_reward_pct=config.confirm_reward_pct,
            watch_risk_pct=config.watch_risk_pct,
            watch_reward_pct=config.watch_reward_pct,
        )

    def percentages(self, stage: Stage) -> Tuple[float, float]:
        """(risk_pct, reward_pct) for a stage."""
        return self._table[Stage(stage)]

    def levels(self, side: Side, stage: Stage, entry_price: float) -> RiskLevels:
        """Stop and target for an entry. Short levels mirror long ones."""
        risk_pct, reward_pct = self.percentages(stage)
        if Side(side) == Side.LONG:
            stop = entry_price * (1 - risk_pct / 100.0)
            target = entry_price * (1 + reward_pct / 100.0)
        else:
            stop = entry_price * (1 + risk_pct / 100.0)
            target = entry_price * (1 - reward_pct / 100.0)
        return RiskLevels(stop=stop, target=target, risk_pct=risk_pct, reward_pct=reward_pct)
