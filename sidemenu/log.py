"""Structured JSON logging for the side menu service.

Revision writes, import scrubbing and normalisation fallbacks are logged
with a ``data`` payload so they can be grepped from the JSON lines file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

ROOT_LOGGER = "sidemenu"


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "data"):
            entry["data"] = record.data  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False, default=str)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """Configure structured logging for the ``sidemenu`` logger tree.

    Args:
        log_dir: Directory for the JSON lines file. If None, logs to stderr only.
        level: Logging level, as a number or a level name.

    Returns:
        The root 'sidemenu' logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    resolved = _resolve_level(level)
    logger.setLevel(resolved)

    # Avoid duplicate handlers on repeated calls
    if logger.handlers:
        return logger

    fmt = JSONFormatter()

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(directory / "sidemenu.jsonl", encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(resolved)
        logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    sh.setLevel(logging.WARNING)
    logger.addHandler(sh)

    return logger


__all__ = ["JSONFormatter", "setup_logging", "ROOT_LOGGER"]
