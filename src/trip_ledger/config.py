"""Configuration management for Trip Ledger."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRIP_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Display
    currency_code: str = "USD"

    # Expense defaults
    default_category: str = "OTHER"  # Used when an expense has no category

    # Logging
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the TRIP_LEDGER_* environment "
            f"variables or your .env file. See .env.example for reference.\n"
            f"Error: {e}"
        ) from e
