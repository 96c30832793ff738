"""Structured logging configuration.

Call ``setup_logging()`` once from every entrypoint (CLI / web) before
any other application code runs.  Engine modules simply use
``logging.getLogger(__name__)`` and inherit the root configuration.
"""

from __future__ import annotations

import logging
import os
import sys

_TEXT_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_JSON_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s",'
    '"logger":"%(name)s","message":"%(message)s"}'
)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with a consistent format.

    ``LOG_FORMAT=json`` emits one-line JSON records for log shippers;
    anything else gives the human-readable format.  ``level`` overrides
    ``LOG_LEVEL`` when given (the CLI passes ``WARNING`` so engine
    chatter does not interleave with the questionnaire).
    """
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_format = os.getenv("LOG_FORMAT", "text").lower()

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=_JSON_FORMAT if log_format == "json" else _TEXT_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    # Quieten noisy third-party loggers
    for noisy in ("httpx", "httpcore", "langgraph", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
