# travel_exporter/infra/logging.py
# -*- coding: utf-8 -*-

"""
Logging setup for the exporter process.

Only the entry point configures handlers; every other module just asks for a
named logger.

Usage
-----
    from travel_exporter.infra.logging import init_logging, get_logger

    init_logging(level="DEBUG", write_output=True)   # stdout + logs/<run>.log
    log = get_logger(__name__)

Environment
-----------
- WAZE_LOG_LEVEL, when set, wins over the `level` argument.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# ────────────────────────────────────────────────────────────────────────────────
# Globals
# ────────────────────────────────────────────────────────────────────────────────

DEFAULT_LOGS_DIR = Path("logs")
LOG_FORMAT = "[{asctime}][{levelname}][{name}] {message}"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# urllib3 logs every connection at DEBUG
_NOISY_LOGGERS = ("urllib3", "requests")

_current_log_file: Optional[Path] = None


# ────────────────────────────────────────────────────────────────────────────────
# Public helpers
# ────────────────────────────────────────────────────────────────────────────────

def get_current_log_path() -> Optional[Path]:
    """File the last `init_logging()` call attached, or None for stdout only."""
    return _current_log_file


def _run_log_file(logs_dir: Optional[Path]) -> Path:
    base_dir = Path(logs_dir) if logs_dir is not None else DEFAULT_LOGS_DIR
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return base_dir / f"waze_exporter__{stamp}.log"


def init_logging(
      level: str = "INFO"
    , *
    , force: bool = True
    , write_output: bool = False
    , log_file: Optional[Path] = None
    , logs_dir: Optional[Path] = None
) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    level : str, default "INFO"
        Level name; unknown names fall back to INFO. WAZE_LOG_LEVEL overrides it.
    force : bool, default True
        Drop handlers already attached to the root logger first.
    write_output : bool, default False
        Also log to a timestamped file under `logs_dir` (default `logs/`).
    log_file : Optional[Path]
        Also log to this exact file. Takes precedence over `write_output`.
    logs_dir : Optional[Path]
        Directory for the timestamped file.
    """
    global _current_log_file

    level = os.getenv("WAZE_LOG_LEVEL") or level
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root = logging.getLogger()
    if force:
        for handler in list(root.handlers):
            root.removeHandler(handler)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT, style="{")

    stdout = logging.StreamHandler(stream=sys.stdout)
    stdout.setFormatter(formatter)
    root.addHandler(stdout)

    _current_log_file = None
    if log_file is not None or write_output:
        target = Path(log_file) if log_file is not None else _run_log_file(logs_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        _current_log_file = target.resolve()

    if numeric_level < logging.WARNING:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    get_logger(__name__).debug(
        "Logging configured level=%s file=%s", logging.getLevelName(numeric_level), _current_log_file
    )


def log_banner(
      log: logging.Logger
    , msg: str
    , *
    , char: str = "="
    , width: int = 60
) -> None:
    """Log `msg` between two bars of `char`."""
    bar = char * width
    log.info(bar)
    log.info(msg)
    log.info(bar)


def get_logger(
    name: Optional[str] = None
) -> logging.Logger:
    """Named logger; modules call this rather than logging.getLogger()."""
    return logging.getLogger(name if name is not None else __name__)
