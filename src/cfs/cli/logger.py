"""Logging helpers for the cfs CLI."""

from __future__ import annotations

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "bold_cyan",
    "INFO": "bold_green",
    "WARNING": "bold_yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red,bg_white",
}

_FORMAT = "[%(asctime)s] <%(name)s> %(levelname)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _use_color() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def _formatter() -> logging.Formatter:
    if not _use_color():
        return logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    return colorlog.ColoredFormatter(
        fmt="%(log_color)s[%(asctime)s] <%(name)s> %(levelname)s:%(reset)s %(message)s",
        log_colors=LOG_COLORS,
        datefmt=_DATEFMT,
    )


def configure_logging(verbose: bool) -> None:
    """
    Configure the root logger for a cfs command.

    Without verbose only warnings and errors are shown, so that progress
    bars and command output stay readable. With verbose we show the
    per-file and per-request diagnostics as well.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(_formatter())
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        handlers=[handler],
        force=True,
    )
    # urllib3 logs every pooled connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO)
