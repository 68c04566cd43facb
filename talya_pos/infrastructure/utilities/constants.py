"""
Application constants for the Talya POS engine

Centralizes magic numbers and hard-coded strings.
"""

from typing import Final


class PrintSettings:
    """Ticket printer timeouts and retries"""

    TIMEOUT_SECONDS: Final[float] = 15.0
    MAX_ATTEMPTS: Final[int] = 2
    RETRY_BACKOFF_SECONDS: Final[float] = 1.0
    CONTENT_TYPE: Final[str] = "application/json"


class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour
    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30
    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10
    CONNECTION_TIMEOUT_SECONDS: Final[int] = 60


class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10
    JSON_LOG_BACKUP_COUNT: Final[int] = 5


class FileSettings:
    """Log file names"""

    MAIN_LOG_FILE: Final[str] = "talya_pos.log"
    ERROR_LOG_FILE: Final[str] = "errors.log"
    JSON_LOG_FILE: Final[str] = "talya_pos.json.log"


class MenuSettings:
    """Catalog display defaults"""

    DEFAULT_ITEM_EMOJI: Final[str] = "🍽️"
    PORTION_VARIANT_EMOJI: Final[str] = "🔸"
    PIECE_CATEGORY_IDS: Final[tuple] = ("5f4d89", "hors-doeuvre-froid")
    DEMI_CATEGORY_IDS: Final[tuple] = ("4bad96", "hors-doeuvre-chaud")


class AnalyticsSettings:
    """Dashboard defaults"""

    TOP_DISHES_LIMIT: Final[int] = 5


class UserMessages:
    """User-facing messages"""

    PRINT_WARNING: Final[str] = "Order created but the ticket may not have printed"
    PRINTER_NOT_CONFIGURED: Final[str] = "Printer address not configured"
    STORE_UNAVAILABLE: Final[str] = "The order could not be saved. Please try again."
