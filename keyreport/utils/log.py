"""Logging helpers for the keyreport package."""

# Module responsibilities:
# - Centralize logging configuration with stream + optional rotating file handlers.
# - Provide get_logger() that configures the package namespace only once.

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

LOG_DIR_ENV = "KEYREPORT_LOG_DIR"
_LOG_CONFIGURED = False


def _resolve_log_dir(log_dir: Optional[Path] = None) -> Optional[Path]:
    """Resolve the log directory from the argument or environment, ensuring existence."""
    if log_dir is None:
        raw = os.getenv(LOG_DIR_ENV)
        if not raw:
            return None
        log_dir = Path(raw).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def configure_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> None:
    """Configure the package logger once with console + rotating file handlers."""
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger("keyreport")
    root_logger.setLevel(level)
    root_logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    directory = _resolve_log_dir(log_dir)
    if directory is not None:
        file_handler = logging.handlers.RotatingFileHandler(
            directory / "keyreport.log", maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _LOG_CONFIGURED = True


def reset_logging() -> None:
    """Drop configured handlers so the next get_logger() call reconfigures."""
    global _LOG_CONFIGURED
    root_logger = logging.getLogger("keyreport")
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    _LOG_CONFIGURED = False


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return a package-scoped logger.

    Args:
        name: Logger name suffix appended to the package root logger namespace.
        log_dir: Optional override for the logging directory.

    Returns:
        Configured logger scoped under ``keyreport``.
    """

    configure_logging(log_dir)
    return logging.getLogger(f"keyreport.{name}")
