"""
Logging configuration for the Talya POS engine

Console output for development, rotating plain and JSON files, and structlog
for the structured loggers used by integrations.
"""

import logging
import logging.handlers
import os
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pythonjsonlogger import jsonlogger

from talya_pos.infrastructure.utilities.constants import FileSettings, LoggingSettings


class OrderContextFormatter(jsonlogger.JsonFormatter):
    """JSON formatter carrying order context fields when present"""

    context_fields = ("order_id", "status", "attempt", "table_number", "client_number")

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        for field_name in self.context_fields:
            if hasattr(record, field_name):
                log_record[field_name] = getattr(record, field_name)


@dataclass
class LoggingConfigOptions:
    """Dataclass for logging configuration options"""
    log_level: str = "INFO"
    log_dir: str = "logs"
    enable_console: bool = True
    enable_file: bool = True
    enable_json: bool = True
    max_file_size: int = LoggingSettings.MAX_LOG_FILE_SIZE
    backup_count: int = LoggingSettings.MAIN_LOG_BACKUP_COUNT

    @classmethod
    def from_settings(cls, settings) -> "LoggingConfigOptions":
        """Build options from application settings; production skips the console"""
        return cls(
            log_level=settings.log_level,
            log_dir=settings.log_dir,
            enable_console=settings.environment != "production",
        )


class LoggingConfig:
    """Installs handlers on the root logger and configures structlog"""

    def __init__(self, options: LoggingConfigOptions):
        self.options = options

    def __repr__(self):
        return f"LoggingConfig(options={self.options})"

    def _configure_structlog(self):
        """Configure structlog for structured logging"""
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer(),
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def setup_logging(self):
        level = getattr(logging, self.options.log_level.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        if self.options.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(console_handler)

        if self.options.enable_file or self.options.enable_json:
            Path(self.options.log_dir).mkdir(parents=True, exist_ok=True)

        if self.options.enable_file:
            app_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

            app_handler = self._rotating_handler(FileSettings.MAIN_LOG_FILE, self.options.backup_count)
            app_handler.setLevel(logging.INFO)
            app_handler.setFormatter(app_formatter)
            root_logger.addHandler(app_handler)

            # Error-only log for critical issues
            error_handler = self._rotating_handler(
                FileSettings.ERROR_LOG_FILE, LoggingSettings.ERROR_LOG_BACKUP_COUNT
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(app_formatter)
            root_logger.addHandler(error_handler)

        if self.options.enable_json:
            json_handler = self._rotating_handler(
                FileSettings.JSON_LOG_FILE, LoggingSettings.JSON_LOG_BACKUP_COUNT
            )
            json_handler.setLevel(logging.INFO)
            json_handler.setFormatter(OrderContextFormatter())
            root_logger.addHandler(json_handler)

        self._configure_structlog()
        self._configure_external_loggers()

        logging.getLogger(__name__).info(
            "✅ Logging configured successfully - Level: %s, Console: %s, File: %s, JSON: %s",
            self.options.log_level,
            self.options.enable_console,
            self.options.enable_file,
            self.options.enable_json,
        )

    def _rotating_handler(self, filename: str, backup_count: int) -> logging.Handler:
        return logging.handlers.RotatingFileHandler(
            Path(self.options.log_dir) / filename,
            maxBytes=self.options.max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )

    @staticmethod
    def _configure_external_loggers():
        logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_logging(options: LoggingConfigOptions):
    """Setup logging using the LoggingConfig class"""
    config = LoggingConfig(options)
    config.setup_logging()


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)
