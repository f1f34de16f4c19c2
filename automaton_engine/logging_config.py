"""
Logging Configuration for the automaton engine.
structlog on top of stdlib logging: console output plus an optional rotating JSON file.

The engine modules only call structlog.get_logger(); entry points (api.py,
main.py) decide where the output goes by calling setup_logging().
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog

_SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
    console_output: bool = True,
) -> None:
    """
    Configure structured logging.

    Args:
        log_dir: Directory for the rotating JSON log. Falls back to $LOG_DIR;
            no file handler when neither is set.
        log_level: DEBUG, INFO, WARNING or ERROR. Falls back to $LOG_LEVEL, then INFO.
        max_bytes: Max size per log file before rotation
        backup_count: Number of rotated files to keep
        console_output: Whether to also output to console
    """
    log_dir = log_dir or os.environ.get("LOG_DIR")
    level = getattr(logging, (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "automaton.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_SHARED_PROCESSORS,
        ))
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=_SHARED_PROCESSORS,
        ))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *_SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)
