"""Shared logging configuration for the type predictor entry points.

Call ``configure_logging()`` once from the CLI or the HTTP app. Library
modules only create loggers; they never attach handlers themselves.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger with a console handler.

    Only configures if the root logger has no handlers (idempotent), but
    always applies ``level``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(console)

    root.setLevel(level)
