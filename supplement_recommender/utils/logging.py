"""
Logging setup for the supplement recommender.

``configure_logging(config)`` is called once by each CLI command before any
work starts. Library modules only ever do ``logging.getLogger(__name__)``.
The scoring core logs nothing but malformed catalog conditions; run summaries
come from the aggregator, the catalog loader and ``RecommendationRunner``.

Console output goes to stderr so ``recommend --json`` keeps stdout clean.
With ``json_format = true`` every record becomes one JSON line::

    {"ts": "2026-01-15T08:30:00Z", "level": "INFO", "logger": "...", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from supplement_recommender.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_QUIET_LOGGERS = ("httpx", "httpcore")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg`` (+ ``exc``)."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line = {
            "ts": ts.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        return json.dumps(line)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLineFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr and optional file handlers on the root logger.

    Replaces any handlers installed by an earlier call. The parent
    directory of ``config.log_file`` is created when missing; an empty
    ``log_file`` disables file output.
    """
    level = logging.getLevelName(config.level.upper())
    formatter = _build_formatter(config.json_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
