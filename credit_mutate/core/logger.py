"""
Logging Utilities

Root logger setup for study runs (console plus an optional rotating log
file inside the run directory) and a small structured logger for the
study pipeline's step and metric lines.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional


# Global logger registry
_loggers: Dict[str, logging.Logger] = {}

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that are chatty at DEBUG
QUIET_LOGGERS = ("matplotlib", "PIL", "joblib")


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_FORMAT,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger for a study run.

    Existing root handlers are replaced, so calling this again for a new
    run does not duplicate lines.

    Args:
        log_level: Level name for the root logger and its handlers.
        log_file: Also write to this file (rotating) when given.
        log_format: Record format shared by every handler.
        max_bytes: Rotation size of the log file.
        backup_count: Rotated files kept.
    """
    level = getattr(logging, log_level.upper())
    formatter = logging.Formatter(log_format, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Registry-backed ``logging.getLogger``."""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


class PipelineLogger:
    """
    Structured logger for one study run.

    Messages are prefixed with the run context (e.g. ``[run_id=...]``)
    once one is set.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        self._context.update(kwargs)

    def _format_message(self, message: str) -> str:
        if not self._context:
            return message
        context_str = " ".join(f"{k}={v}" for k, v in self._context.items())
        return f"[{context_str}] {message}"

    def info(self, message: str) -> None:
        self.logger.info(self._format_message(message))

    def debug(self, message: str) -> None:
        self.logger.debug(self._format_message(message))

    def warning(self, message: str) -> None:
        self.logger.warning(self._format_message(message))

    def error(self, message: str) -> None:
        self.logger.error(self._format_message(message))

    def step_start(self, step_name: str) -> None:
        self.info(f"{'='*20} Starting: {step_name} {'='*20}")

    def step_complete(self, step_name: str, duration: Optional[float] = None) -> None:
        timing = f" ({duration:.2f}s)" if duration is not None else ""
        self.info(f"{'='*20} Completed: {step_name}{timing} {'='*20}")

    def metric(self, name: str, value: Any) -> None:
        self.info(f"METRIC | {name}: {value}")

    def data_stats(self, name: str, count: int, columns: Optional[int] = None) -> None:
        shape = f"{count:,} rows" if columns is None else f"{count:,} rows, {columns} columns"
        self.info(f"DATA | {name}: {shape}")
