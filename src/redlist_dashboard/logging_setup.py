"""
Logging configuration.

Installs a single stdout handler on the root logger. By default records are
emitted as JSON via python-json-logger; set ``JSON_LOGS=false`` for plain text
during local development. Modules log through ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO", *, json_logs: bool = True) -> None:
    """Configure the root logger. Safe to call more than once."""
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn installs its own handlers; route its records through ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
