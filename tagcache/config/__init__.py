"""Configuration module for tagcache.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration

get_config(key: str, default=None) -> Any
    Flat-key configuration access

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

resilient_operation(operation_name: str, fallback=...)
    Decorator for handling errors at an operation boundary

Usage:
------
```python
from tagcache.config import settings
ttl = settings.cache.ttl_days

from tagcache.config import get_logger
logger = get_logger(__name__)
```
"""

from .logging import (
    get_logger,
    log_startup_info,
    resilient_operation,
    setup_loguru_logger,
)
from .settings import CacheConfig, LoggingConfig, Settings, get_config, settings

__all__ = [
    "CacheConfig",
    "LoggingConfig",
    "Settings",
    "get_config",
    "get_logger",
    "log_startup_info",
    "resilient_operation",
    "settings",
    "setup_loguru_logger",
]
