"""Application configuration via environment variables with Pydantic validation.

All configuration is loaded from environment variables prefixed with
NETAUDIT_ (with .env file support). Invalid values fail loudly at startup.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from netaudit.parser.vendors import VENDOR_SCHEMAS

LOG_FORMATS = ("json", "console")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """netaudit settings. All values sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NETAUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Parsing
    default_vendor: str = "cisco-ios"
    max_config_bytes: int = 10 * 1024 * 1024
    max_nesting_depth: int = 50

    # Rules
    rule_paths: list[str] = []
    include_builtin_rules: bool = True

    # Multi-file scans
    max_parallel_scans: int = 8

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("default_vendor")
    @classmethod
    def vendor_known(cls, v: str) -> str:
        vendor = v.strip().lower()
        if vendor not in VENDOR_SCHEMAS:
            raise ValueError(f"NETAUDIT_DEFAULT_VENDOR must be one of: {', '.join(sorted(VENDOR_SCHEMAS))}")
        return vendor

    @field_validator("max_config_bytes", "max_nesting_depth", "max_parallel_scans")
    @classmethod
    def limits_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("limits must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"NETAUDIT_LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def log_format_known(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"NETAUDIT_LOG_FORMAT must be one of: {', '.join(LOG_FORMATS)}")
        return fmt


def get_settings() -> Settings:
    """Create and return a validated Settings instance.

    Raises ValidationError with clear messages if an env var is invalid.
    """
    return Settings()
