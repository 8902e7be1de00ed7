#!/usr/bin/env python
"""
logging_helper.py – one-call setup: file + stdout.

Usage:
    from proofdesk.utils.logging_helper import get_logger
    log = get_logger()                  # derives name from caller's file
    log.info("It works")
"""

from __future__ import annotations
import inspect, logging, sys, os
from pathlib import Path

from .paths import LOG_DIR

DEF_FMT  = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEF_DATE = "%Y-%m-%d %H:%M:%S"

def get_logger(level: int | None = None,
               log_dir: str | Path = LOG_DIR) -> logging.Logger:
    """
    Create (or return existing) logger whose name is the caller's module
    (e.g. 'history'). Writes to <log_dir>/<name>.log and echoes to stdout.

    The level defaults to INFO and can be overridden with PROOFDESK_LOG_LEVEL.
    """
    # ── derive name from caller ───────────────────────────────────────────
    caller = inspect.stack()[1]
    module = inspect.getmodule(caller[0])
    if module and module.__name__ != "__main__":
        name = module.__name__.split(".")[-1]
    else:
        # called as a script: use the file-stem (e.g., proofread)
        name = os.path.splitext(os.path.basename(caller.filename))[0]

    logger = logging.getLogger(f"proofdesk.{name}")
    if logger.handlers:                 # already initialised
        return logger

    if level is None:
        level_name = os.getenv("PROOFDESK_LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_path = Path(log_dir) / f"{name}.log"

    # file handler
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(logging.Formatter(DEF_FMT, DEF_DATE))
    fh.setLevel(level)

    # console handler – warnings only, the CLI owns stdout
    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    ch.setLevel(max(level, logging.WARNING))

    logger.addHandler(fh)
    logger.addHandler(ch)
    logger.propagate = True
    return logger
