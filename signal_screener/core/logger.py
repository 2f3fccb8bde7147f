"""
Logging for the "signal_screener" logger tree.
Console goes to stderr so CLI reports on stdout stay clean; a file handler is optional.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger. Calling it again replaces the handlers.
    Unknown level names fall back to INFO.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    pkg = logging.getLogger("signal_screener")
    pkg.setLevel(log_level)
    for handler in list(pkg.handlers):
        pkg.removeHandler(handler)
        handler.close()
    pkg.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    pkg.addHandler(console)

    if log_dir and log_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        pkg.addHandler(fh)

    return pkg
