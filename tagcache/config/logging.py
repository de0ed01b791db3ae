"""Logging configuration and utilities using Loguru.

Key Components:
--------------
- Structured logging with Loguru
- Error handling decorator for operation boundaries
- Startup information logging

Public API:
----------
setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

get_logger(name: str) -> Logger
    Get a context-aware logger for your module
    Usage: logger = get_logger(__name__)

log_startup_info() -> None
    Log the active configuration at debug level

@resilient_operation(operation_name: str, fallback=...)
    Decorator for handling errors at an operation boundary
    Usage: @resilient_operation("fingerprint_cache_get", fallback=None)

Quick Start:
-----------
1. Get a logger for your module:
    ```python
    from tagcache.config import get_logger
    logger = get_logger(__name__)
    ```

2. Log with structured context:
    ```python
    logger.info("Cache hit", fingerprint=fp)
    ```
"""

import functools
from pathlib import Path
import sys
from typing import Any

from loguru import logger

from .settings import settings

# Sentinel meaning "re-raise instead of returning a fallback value"
_RAISE = object()

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


def setup_loguru_logger(verbose: bool = False) -> None:
    """Configure Loguru logger for the application.

    Args:
        verbose: Enable verbose logging with debug level and detailed tracebacks

    Note:
        - Removes default logger and sets up console and file handlers
        - Console output goes to stderr so command output stays clean
        - File format is JSON structured, rotated and retained automatically
    """
    logger.remove()

    log_file_path = Path(settings.logging.log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    logger.configure(extra={"service": "tagcache", "module": "root"})

    # -------------------------------------------------------------------------
    # Console Handler
    # -------------------------------------------------------------------------
    console_level = "DEBUG" if verbose else settings.logging.console_level
    logger.add(
        sink=sys.stderr,
        level=console_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:"
            "<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    # -------------------------------------------------------------------------
    # File Handler
    # -------------------------------------------------------------------------
    logger.add(
        sink=str(log_file_path),
        level=settings.logging.file_level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {process}:{thread} | {extra[service]} | {extra[module]} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        backtrace=True,
        diagnose=True,
        enqueue=not settings.logging.real_time_debug,
        catch=True,
        serialize=True,
    )


# =============================================================================
# LOGGER FACTORY
# =============================================================================


def get_logger(name: str) -> Any:  # Use Any for Loguru logger type
    """Get a pre-configured logger instance for the given module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Loguru logger bound with module and service context
    """
    return logger.bind(
        module=name,
        service="tagcache",
    )


# =============================================================================
# STARTUP LOGGING
# =============================================================================


def log_startup_info() -> None:
    """Log application configuration, one debug line per setting."""
    local_logger = get_logger(__name__)

    local_logger.debug("Configuration:")
    for section_name, section_values in settings.model_dump().items():
        local_logger.debug("  {}:", section_name.upper())
        if isinstance(section_values, dict):
            for key, value in section_values.items():
                if isinstance(value, Path):
                    value = str(value)
                local_logger.debug("    {}: {}", key.upper(), value)
        else:
            local_logger.debug("    {}", section_values)


# =============================================================================
# ERROR HANDLING DECORATORS
# =============================================================================


def resilient_operation(operation_name=None, fallback: Any = _RAISE):
    """Decorator for boundary operations with standardized error handling.

    Logs any exception raised by the wrapped coroutine together with the
    operation name and its keyword/positional arguments. Without a fallback
    the exception is re-raised; with one, the fallback is returned instead.

    Args:
        operation_name: Optional name for the operation (defaults to function name)
        fallback: Value returned when the operation fails. Omit to re-raise.

    Example:
        >>> @resilient_operation("recording_cache_get", fallback=None)
        >>> async def get(self, recording_id):
        >>>     ...
    """

    def decorator(func):
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                # Skip `self` when reporting call context
                call_args = (
                    args[1:] if args and hasattr(type(args[0]), func.__name__) else args
                )
                logger.opt(exception=e).error(
                    "Error in {}: {!s} (args={!r}, kwargs={!r})",
                    op_name,
                    e,
                    call_args,
                    kwargs,
                )
                if fallback is _RAISE:
                    raise
                return fallback

        return wrapper

    return decorator
