"""Logging setup for pagewise.

structlog events are handed to the standard library so that records from
httpx and the search client share the same handlers. The console gets a
human-readable rendering, the optional log file one JSON object per line.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any

import structlog

# Applied to structlog events and to foreign stdlib records alike
_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.StackInfoRenderer(),
]

# Libraries that log every HTTP request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "primp")


def _formatter(renderer: Any, pre_chain: list[Any]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging(
    level: str | None = "INFO",
    log_file: Path | None = None,
    show_timestamps: bool = True,
) -> None:
    """Route structlog and stdlib logging to the console and an optional file.

    Args:
        level: Level name; unknown names and None mean INFO
        log_file: Optional JSON-lines log file, created with its parent directory
        show_timestamps: Prefix console lines with the local time
    """
    log_level = logging.getLevelName((level or "INFO").upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    pre_chain = list(_SHARED_PROCESSORS)
    if show_timestamps:
        pre_chain.append(structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False))

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        _formatter(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()), pre_chain)
    )
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            _formatter(
                structlog.processors.JSONRenderer(),
                [*_SHARED_PROCESSORS, structlog.processors.TimeStamper(fmt="iso")],
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.dict_tracebacks,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a module, e.g. ``get_logger("pagewise.sessions.crawl")``."""
    return structlog.get_logger(name)


class Timer:
    """Measure a block's wall-clock time and log it at debug level.

    The block may contain awaits, so the same timer works inside coroutines::

        with Timer("crawl", logger) as timer:
            chunks = [c async for c in session.stream(url)]
        logger.info("done", elapsed_s=timer.elapsed)
    """

    def __init__(self, name: str, logger: Any | None = None):
        self.name = name
        self.logger = logger or get_logger("pagewise.timer")
        self.elapsed = 0.0
        self._started: float | None = None

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        self.logger.debug(f"{self.name} started")
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.elapsed = time.perf_counter() - (self._started or 0.0)
        self.logger.debug(
            f"{self.name} finished",
            elapsed_s=round(self.elapsed, 3),
            failed=exc_type is not None,
        )
