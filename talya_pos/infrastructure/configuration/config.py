"""
Configuration management for the Talya POS engine
"""


import threading
from typing import Dict

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.utilities.constants import MenuSettings, PrintSettings


def _default_portion_categories() -> Dict[str, str]:
    mapping = {category_id: PortionType.PIECE.value for category_id in MenuSettings.PIECE_CATEGORY_IDS}
    mapping.update({category_id: PortionType.DEMI.value for category_id in MenuSettings.DEMI_CATEGORY_IDS})
    return mapping


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    environment: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")

    # Database configuration
    database_url: str = Field(
        default="sqlite:///data/talya_pos.db", description="Database connection URL"
    )

    # Restaurant settings
    restaurant_slug: str = Field(default="talya", description="Restaurant identifier")
    currency: str = Field(default="EUR", description="Currency code")

    # Ticket printer
    printer_endpoint: str = Field(
        default="http://localhost:8080/print", description="HTTP endpoint of the print relay"
    )
    printer_address: str = Field(default="", description="Network address of the ticket printer")
    printer_auth_token: str = Field(default="", description="Bearer token for the print relay")
    print_timeout_seconds: float = Field(
        default=PrintSettings.TIMEOUT_SECONDS, description="Timeout of one print attempt", gt=0
    )
    print_max_attempts: int = Field(
        default=PrintSettings.MAX_ATTEMPTS, description="Print attempts before giving up", ge=1
    )
    print_retry_backoff_seconds: float = Field(
        default=PrintSettings.RETRY_BACKOFF_SECONDS,
        description="Linear backoff unit between print attempts",
        ge=0,
    )

    # Menu configuration
    composed_menus_path: str = Field(
        default="", description="JSON file overriding the bundled composed menus"
    )
    portion_categories: Dict[str, str] = Field(
        default_factory=_default_portion_categories,
        description="Category id to reduced portion ('piece' or 'demi')",
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        if len(value) != 3:
            raise ValueError("Currency must be a 3-letter code")
        return value.upper()

    @field_validator("printer_endpoint")
    @classmethod
    def validate_printer_endpoint(cls, value: str) -> str:
        if not value:
            return value
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid printer endpoint: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("Printer endpoint must be an http(s) URL")
        return value

    @field_validator("portion_categories")
    @classmethod
    def validate_portion_categories(cls, value: Dict[str, str]) -> Dict[str, str]:
        for category_id, portion in value.items():
            PortionType(portion)
            if not category_id:
                raise ValueError("Portion category id cannot be empty")
        return value

    def portion_mapping(self) -> Dict[str, PortionType]:
        return {category_id: PortionType(portion) for category_id, portion in self.portion_categories.items()}


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment"""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
