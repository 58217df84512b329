"""Logging configuration for Infinite Comic."""

import logging
import sys
import time
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.settings._paths import LOGS_DIR

# Default log file location
DEFAULT_LOG_FILE = LOGS_DIR / "infinite_comic.log"

# Third-party loggers that flood DEBUG output with request/response noise
NOISY_LOGGERS = ("httpx", "httpcore", "nicegui", "google_genai", "urllib3")


class ContextFilter(logging.Filter):
    """Add the active correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Stamp the record with the current context's correlation ID, or '-'."""
        record.correlation_id = _correlation_id.get()
        return True


# One id per thread and asyncio task
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")

# Global context filter instance
_context_filter = ContextFilter()

_suppression_logged = False


def _resolve_level(level: str) -> int:
    """Map a level name to its logging constant.

    Raises:
        ValueError: If the level name is unknown.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return log_level


def _suppress_noisy_loggers() -> None:
    """Pin third-party loggers to WARNING.

    Always re-applied so a later set_log_level("DEBUG") cannot unmute them,
    but only announced once per process.
    """
    global _suppression_logged
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not _suppression_logged:
        logging.getLogger(__name__).debug(
            "Third-party loggers pinned to WARNING: %s", ", ".join(NOISY_LOGGERS)
        )
        _suppression_logged = True


def reset_logger_suppression() -> None:
    """Forget that suppression was announced (for tests)."""
    global _suppression_logged
    _suppression_logged = False


def setup_logging(level: str = "INFO", log_file: str | None = "default") -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: File path for logs. "default" uses logs/infinite_comic.log,
                  None disables file logging.

    Raises:
        ValueError: If the level name is unknown.
    """
    log_level = _resolve_level(level)

    # Create formatter with correlation ID
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] [%(correlation_id)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Note: Filter must be on HANDLERS, not logger, for child logger records
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_context_filter)
    root_logger.addHandler(console_handler)

    if log_file == "default":
        log_path = DEFAULT_LOG_FILE
    elif log_file:
        log_path = Path(log_file)
    else:
        log_path = None

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)

        class FlushingRotatingFileHandler(RotatingFileHandler):
            """RotatingFileHandler that flushes immediately after each log."""

            def emit(self, record: logging.LogRecord) -> None:
                super().emit(record)
                self.flush()

        # Max 10MB per file, keep 5 backup files (50MB total)
        file_handler = FlushingRotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_context_filter)
        root_logger.addHandler(file_handler)

        root_logger.info("Logging to file: %s (max 10MB, 5 backups)", log_path)

    _suppress_noisy_loggers()


def set_log_level(level: str) -> None:
    """Change the root logger and handler levels at runtime.

    Args:
        level: New log level name.

    Raises:
        ValueError: If the level name is unknown.
    """
    log_level = _resolve_level(level)
    root_logger = logging.getLogger()
    if root_logger.level == log_level:
        return

    old_name = logging.getLevelName(root_logger.level)
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers:
        handler.setLevel(log_level)
    _suppress_noisy_loggers()
    logging.getLogger(__name__).info("Log level changed: %s -> %s", old_name, level.upper())


@contextmanager
def log_context(correlation_id: str | None = None) -> Generator[str]:
    """Context manager for setting correlation ID in logs.

    Args:
        correlation_id: Optional correlation ID. If not provided, generates a new UUID.

    Yields:
        The correlation ID being used.

    Example:
        with log_context("turn-approve"):
            logger.info("Rendering panel")  # Will include correlation_id in log
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())[:8]

    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


@contextmanager
def log_performance(logger: logging.Logger, operation: str) -> Generator[None]:
    """Context manager for logging operation performance.

    Args:
        logger: Logger instance to use
        operation: Name of the operation being timed

    Example:
        with log_performance(logger, "image_generation"):
            client.generate_image(prompt, style)  # Will log duration after completion
    """
    start_time = time.time()
    logger.info("%s: Starting", operation)
    try:
        yield
    except Exception as e:
        duration = time.time() - start_time
        logger.error("%s: Failed after %.2fs - %s", operation, duration, e)
        raise
    else:
        duration = time.time() - start_time
        logger.info("%s: Completed in %.2fs", operation, duration)
