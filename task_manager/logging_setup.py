# task_manager/logging_setup.py

from __future__ import annotations

import logging
import sys


def setup_logging(level: str | int = logging.INFO, *, sql_echo: bool = False) -> None:
    """
    Configure the root logger with a single stderr handler.

    Call this once, at startup. Uvicorn keeps its own handlers for the
    access log; everything under ``task_manager.*`` goes through here.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates on reload.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # SQLAlchemy echo already prints statements; otherwise keep the engine quiet.
    if not sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.captureWarnings(True)
