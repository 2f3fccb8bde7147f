#!/usr/bin/env python3
"""
Signal Screener CLI: backtest | scan
Usage:
  python main.py backtest --csv BTC-USDT_1h.csv [--config config.yaml]
  python main.py scan --data-dir data/ [--symbols BTC-USDT ETH-USDT] [--stage confirm] [--side long]
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from signal_screener.backtesting.engine import BacktestEngine
from signal_screener.core.config import load_config
from signal_screener.core.errors import InsufficientDataError
from signal_screener.core.logger import setup_logging
from signal_screener.screener.scanner import Screener
from signal_screener.screener.source import CsvMarketData


def run_backtest(config_path: Path | None, csv_path: Path, symbol: str, timeframe: str) -> int:
    """Backtest the tiered strategy over one CSV of bars."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    logger = logging.getLogger("signal_screener")
    if not csv_path.exists():
        logger.error("CSV not found: %s", csv_path)
        return 1
    df = pd.read_csv(csv_path)
    engine = BacktestEngine.from_config(config)
    try:
        result = engine.run(df, symbol=symbol, timeframe=timeframe)
    except InsufficientDataError as e:
        logger.error("%s", e)
        return 1
    s = result.stats
    print("\n--- Backtest Results ---")
    print(f"Total trades: {s.total_trades} (wins: {s.winning_trades}, losses: {s.losing_trades})")
    print(f"Win rate: {s.win_rate*100:.1f}%")
    print(f"Total R: {s.total_r:.2f}  Avg R: {s.avg_r:.2f}  Best: {s.best_r:.2f}  Worst: {s.worst_r:.2f}")
    print(f"Profit factor: {s.profit_factor:.2f}")
    print(f"Max drawdown: {s.max_drawdown_r:.2f}R")
    print(f"Avg bars held: {s.avg_bars_held:.1f}")
    for t in result.trades:
        print(
            f"  {t.side.value:<5} {t.stage.value:<7} bar {t.entry_index}->{t.exit_index} "
            f"{t.entry_price:.6g} -> {t.exit_price:.6g}  {t.pnl_pct:+.2f}%  {t.r_multiple:+.2f}R  {t.exit_reason}"
        )
    return 0


def run_scan(config_path: Path | None, data_dir: Path, symbols: list[str] | None, stage: str, side: str) -> int:
    """Scan CSV data for every configured symbol/timeframe and print ranked signals."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    screener = Screener(CsvMarketData(data_dir), config)
    result = screener.scan(symbols=symbols, stage=stage, side=side)
    print(f"\n--- Screener ({result.generated_at:%Y-%m-%d %H:%M:%S} UTC, {result.duration_ms} ms) ---")
    for sig in result.signals:
        print(
            f"{sig.symbol:<12} {sig.timeframe:<4} {sig.side.value:<5} {sig.stage.value:<7} "
            f"strength {sig.strength} score {sig.score}/{sig.score_max} "
            f"entry {sig.entry:.6g} SL {sig.stop:.6g} TP {sig.target:.6g} RR {sig.rr:.2f}"
        )
        for line in sig.reasons:
            print(f"    {line}")
    for err in result.errors:
        print(f"! {err.symbol} {err.timeframe} {err.source}: {err.message}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Signal Screener CLI")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="mode", required=True)

    bt = sub.add_parser("backtest", help="Backtest one CSV of bars")
    bt.add_argument("--csv", type=Path, required=True, help="CSV with time,open,high,low,close,volume")
    bt.add_argument("--symbol", default="", help="Symbol label for logs")
    bt.add_argument("--timeframe", default="", help="Timeframe label for logs")

    sc = sub.add_parser("scan", help="Scan <SYMBOL>_<timeframe>.csv files")
    sc.add_argument("--data-dir", type=Path, required=True, help="Directory with candle CSVs")
    sc.add_argument("--symbols", nargs="*", default=None, help="Symbols to scan (default: config)")
    sc.add_argument("--stage", default="all", choices=["all", "confirm", "watch"])
    sc.add_argument("--side", default="all", choices=["all", "long", "short"])

    args = parser.parse_args()
    if args.mode == "backtest":
        return run_backtest(args.config, args.csv, args.symbol, args.timeframe)
    return run_scan(args.config, args.data_dir, args.symbols, args.stage, args.side)


if __name__ == "__main__":
    sys.exit(main())
