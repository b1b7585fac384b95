"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerConfig(BaseSettings):
    """Eon token ledger configuration"""

    model_config = SettingsConfigDict(
        env_prefix="EON_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Token metadata
    token_name: str = "Eon"
    token_symbol: str = "EON"

    # Storage configuration
    storage_backend: str = "memory"  # memory or sqlite
    database_path: str = ":memory:"

    # Business rules
    enable_testing_operations: bool = False  # mint/burn fixtures; never enable in production
    validate_issue_amount: bool = True  # False accepts negative issue amounts unchecked

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
