"""
Dyno Utils - Logging & Diagnostics
==================================

Logging setup and diagnostic helpers.

Features:
---------
1. Logging Setup
   - Configure a named logger (never the root logger)
   - Console and size-rolling file output
   - Structured logging format

2. Module Loggers
   - Get loggers for specific modules
   - Hierarchical logger organization

3. Telemetry Logging
   - Log derived samples
   - Buffer statistics summaries

Log Format:
-----------
[2025-12-24 12:30:45.123] [INFO    ] [dyno.session] Message here
[TIMESTAMP] [LEVEL] [MODULE] Message

Example:
--------
>>> from utils import setup_logging
>>> from telemetry import DynoSession
>>>
>>> logger = setup_logging("logs/", level="INFO")
>>> session = DynoSession(config, logger=logger)
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any
from datetime import datetime

DEFAULT_LOGGER_NAME = "dyno"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


class StructuredFormatter(logging.Formatter):
    """Structured logging formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with structure.

        Args:
            record: Log record

        Returns:
            Formatted string
        """
        timestamp = datetime.fromtimestamp(record.created).strftime(
            "%Y-%m-%d %H:%M:%S.%f"
        )[:-3]

        message = (
            f"[{timestamp}] [{record.levelname:8}] "
            f"[{record.name}] {record.getMessage()}"
        )
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def _level(level) -> int:
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(log_dir: str = "logs",
                 level: str = "INFO",
                 console_output: bool = True,
                 file_output: bool = True,
                 name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Set up the logging capability for one process.

    Configures the logger ``name`` only; calling again replaces its
    handlers instead of stacking them.

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Enable console output
        file_output: Enable rolling file output
        name: Logger name

    Returns:
        Configured logger, to be passed to DynoSession / FrameDecoder / storage
    """
    log_level = _level(level)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.propagate = False

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter()

    # Console handler
    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    if file_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"{name}_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.info(f"Logging configured: level={logging.getLevelName(log_level)}, dir={log_dir}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_sample(logger: logging.Logger,
               sample,
               step: int = None) -> None:
    """
    Log one derived telemetry sample at DEBUG.

    Args:
        logger: Target logger
        sample: TelemetrySample
        step: Optional sample index
    """
    prefix = f"Sample {step}: " if step is not None else "Sample: "
    logger.debug(f"{prefix}{sample.summary()}")


def log_statistics(logger: logging.Logger,
                   stats: Dict[str, Any]) -> None:
    """
    Log statistics summary.

    Args:
        logger: Target logger
        stats: Flat or per-channel ({channel: {stat: value}}) dictionary

    Example:
        >>> log_statistics(logger, session.statistics())
    """
    logger.info("=== Statistics Summary ===")
    for key, value in stats.items():
        if isinstance(value, dict):
            summary = ", ".join(
                f"{stat}={v:.4f}" if isinstance(v, float) else f"{stat}={v}"
                for stat, v in value.items()
            )
            logger.info(f"{key}: {summary}")
        elif isinstance(value, float):
            logger.info(f"{key}: {value:.4f}")
        else:
            logger.info(f"{key}: {value}")


def set_log_level(name: str,
                 level: str) -> None:
    """
    Set log level for a logger and its handlers.

    Args:
        name: Logger name
        level: Log level string

    Example:
        >>> set_log_level("dyno", "DEBUG")
    """
    log_level = _level(level)
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
