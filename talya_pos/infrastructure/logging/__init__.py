"""
Logging infrastructure
"""

from .logging_config import (
    LoggingConfig,
    LoggingConfigOptions,
    OrderContextFormatter,
    get_structured_logger,
    setup_logging,
)

__all__ = [
    "LoggingConfig",
    "LoggingConfigOptions",
    "OrderContextFormatter",
    "get_structured_logger",
    "setup_logging",
]
