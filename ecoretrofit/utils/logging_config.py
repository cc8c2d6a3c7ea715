"""
Logging setup for EcoRetrofit.

Console records go to stderr (stdout is reserved for --json output) with a
trailing [key=value] block for any calculator context passed via extra=.
An optional file handler writes one JSON object per record.

Usage:
    from ecoretrofit.utils.logging_config import get_logger

    logger = get_logger(__name__)
    logger.debug("Retrofit selected", extra={"retrofit_id": 4})
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULT_LOG_LEVEL = os.environ.get("ECORETROFIT_LOG_LEVEL", "INFO").upper()

LOG_DIR = Path(os.environ.get("ECORETROFIT_LOG_DIR", "logs"))

# Attributes picked up from `extra=` on a log call
CONTEXT_KEYS = ("retrofit_id", "field", "command")

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
RESET = "\033[0m"


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Calculator context attached to a record, in CONTEXT_KEYS order."""
    return {key: getattr(record, key) for key in CONTEXT_KEYS if hasattr(record, key)}


class EcoRetrofitFormatter(logging.Formatter):
    """Console formatter: timestamp, level, logger, message, then context."""

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"
        if not self.use_colors:
            return line
        return f"{LEVEL_COLORS.get(record.levelno, '')}{line}{RESET}"


class FileFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_to_file: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Console log level name (case-insensitive)
        log_to_file: Also write records to a file as JSON lines
        log_file: Path for that file (default: LOG_DIR/ecoretrofit_YYYYMMDD.log)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(EcoRetrofitFormatter())
    root.addHandler(console_handler)

    if not log_to_file:
        return

    if log_file is None:
        LOG_DIR.mkdir(exist_ok=True)
        path = LOG_DIR / f"ecoretrofit_{datetime.now():%Y%m%d}.log"
    else:
        path = Path(log_file)

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(FileFormatter())
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)."""
    return logging.getLogger(name)
