"""Logging configuration for evaluation runs.

Console output is human readable. When a log directory is configured, every
record is also written as one JSON object per line to ``app.jsonl``, and
errors additionally to ``errors.jsonl``. Structured fields go through
``extra={"props": {...}}`` and become top-level JSON keys.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a record, plus its `props`, as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "lineNo": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        props = getattr(record, "props", None)
        if props:
            payload.update(props)

        # Series keys, timestamps and numpy scalars fall back to str
        return json.dumps(payload, default=str)


def _jsonl_handler(path: Path, level: Union[int, str]) -> logging.Handler:
    handler = logging.FileHandler(path)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        log_level: Logging level name (DEBUG, INFO, ...)
        log_dir: Directory for app.jsonl / errors.jsonl; console only if None
    """
    level = log_level.upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_jsonl_handler(directory / "app.jsonl", level))
        root_logger.addHandler(_jsonl_handler(directory / "errors.jsonl", logging.ERROR))

    root_logger.info(
        f"Logging configured with level {level}",
        extra={"props": {"log_dir": str(log_dir) if log_dir else None}},
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
