"""
Logging setup for the CLI.

Library modules only call `logging.getLogger(__name__)` and log dotted event
names with `extra=` context. The CLI attaches one handler to the package
logger: Rich-rendered lines for people, or JSON lines for machines.
"""

import json
import logging
from typing import Any, Dict

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "qobuz_api"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(_context(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _ContextFormatter(logging.Formatter):
    """Appends `key=value` pairs from `extra=` to the event name."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        text = super().format(record)
        context = _context(record)
        if context:
            text += " " + " ".join(f"{k}={v}" for k, v in context.items())
        return text


def _level(verbose: bool | None, quiet: bool | None) -> int:
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    *, json_logs: bool = False, verbose: bool | None = None, quiet: bool | None = None
) -> logging.Logger:
    """Configure the package logger and return it.

    - json_logs: one JSON object per line on stderr, `extra=` keys included
    - verbose: DEBUG level
    - quiet: WARNING level, wins over verbose
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(_level(verbose, quiet))

    if json_logs:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(_ContextFormatter("%(message)s"))
    logger.addHandler(handler)
    return logger
