"""Risk model: stop/target offsets and reward:risk per side and stage."""

from signal_screener.risk.model import RiskModel, RiskLevels

__all__ = ["RiskModel", "RiskLevels"]
