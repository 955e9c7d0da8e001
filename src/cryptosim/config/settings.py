"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STARTING_CASH = Decimal("10000")
SELL_TAX_RATE = Decimal("0.02")


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".cryptosim"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Paper Crypto Ledger"
    app_version: str = "0.1.0"

    # Data directory (all app data lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    # "sqlite" or "json"
    persistence_backend: str = "sqlite"

    # Ledger behavior
    default_starting_cash: Decimal = DEFAULT_STARTING_CASH
    sell_tax_rate: Decimal = SELL_TAX_RATE
    base_currency: str = "USD"

    log_level: str = "INFO"

    # Market data settings
    market_data_cache_ttl_seconds: int = 60
    market_data_seed: Optional[int] = None

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "ledger.db"
        return f"sqlite:///{db_path}"

    def get_state_file(self) -> Path:
        """Get the JSON state file used by the json persistence backend."""
        return self.get_data_dir() / "ledger.json"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
