"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "FraudShield Risk"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # JSON lines in production, console renderer locally

    # IP reputation data files (downloaded by the list refresh job)
    DATA_DIR: str = "data"
    VPN_LIST_FILE: str = "vpn-ipv4.txt"
    TOR_LIST_FILE: str = "tor-exits.txt"
    DATACENTER_LIST_FILE: str = "datacenters.csv"

    # Detection
    BOT_SCORE_THRESHOLD: float = 0.5  # botScore at or above this is reported as a bot

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("BOT_SCORE_THRESHOLD")
    @classmethod
    def validate_bot_threshold(cls, v: float) -> float:
        """Bot scores live in [0, 1], so must the threshold."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("BOT_SCORE_THRESHOLD must be between 0 and 1")
        return v

    @property
    def vpn_list_path(self) -> Path:
        """Full path of the VPN CIDR list."""
        return Path(self.DATA_DIR) / self.VPN_LIST_FILE

    @property
    def tor_list_path(self) -> Path:
        """Full path of the Tor exit node list."""
        return Path(self.DATA_DIR) / self.TOR_LIST_FILE

    @property
    def datacenter_list_path(self) -> Path:
        """Full path of the datacenter range CSV."""
        return Path(self.DATA_DIR) / self.DATACENTER_LIST_FILE


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
