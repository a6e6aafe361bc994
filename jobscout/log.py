"""Logging setup shared by every jobscout module."""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Named logger; the root handlers are installed the first time this runs."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _env_flag(key: str, default: bool) -> bool:
    raw = os.environ.get(key, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def log_dir() -> Path:
    override = os.environ.get("JOBSCOUT_LOG_DIR", "").strip()
    return Path(override) if override else DEFAULT_LOG_DIR


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler() -> logging.Handler:
    """Daily file under log_dir(); always at DEBUG so the file keeps full detail."""
    directory = log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(
        directory / f"jobscout_{date.today().isoformat()}.log", encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _configure() -> None:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    # Respect handlers installed by the host application (or pytest).
    if root.handlers:
        return

    root.addHandler(_console_handler(level))
    if not _env_flag("JOBSCOUT_LOG_FILE", True):
        return
    try:
        root.addHandler(_file_handler())
    except OSError as exc:
        root.warning("File logging disabled, cannot open %s: %s", log_dir(), exc)
