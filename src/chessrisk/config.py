"""
Configuration management for chessrisk.

Uses Pydantic Settings to load configuration from environment variables
(prefixed CHESSRISK_) with defaults that reproduce the reference engine.

Usage:
    from chessrisk.config import settings
    print(settings.decay_rate)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chessrisk.risk.constants import DECAY_RATE, GAMES_WINDOW, K_FACTOR


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory, e.g. CHESSRISK_K_FACTOR=20.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHESSRISK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Engine Configuration
    # ==========================================================================

    decay_rate: float = Field(
        default=DECAY_RATE,
        gt=0,
        description="Recency decay per day of game age (controls the half-life of form)",
    )
    k_factor: float = Field(
        default=K_FACTOR,
        gt=0,
        description="Maximum rating swing for one game (scales expected point gain/loss)",
    )
    games_window: int = Field(
        default=GAMES_WINDOW,
        ge=1,
        description="How many recent games feed each side's performance index",
    )

    # ==========================================================================
    # chess.com API Configuration
    # ==========================================================================

    api_base_url: str = Field(
        default="https://api.chess.com/pub",
        description="Root of the chess.com published-data API",
    )
    http_timeout_s: float = Field(
        default=10.0,
        description="Total timeout per API request in seconds",
    )
    http_max_retries: int = Field(
        default=3,
        ge=1,
        description="Maximum attempts per API request",
    )
    http_retry_base_delay: float = Field(
        default=1.0,
        description="Initial delay between retries (doubles each attempt)",
    )
    user_agent: str = Field(
        default="chessrisk/1.0 (game risk overlay)",
        description="User-Agent sent with API requests",
    )

    # ==========================================================================
    # Browser Configuration
    # ==========================================================================

    browser_headless: bool = Field(
        default=True,
        description="Run browser in headless mode",
    )
    browser_timeout: int = Field(
        default=45000,
        description="Default timeout for page loads in milliseconds",
    )

    # ==========================================================================
    # Presentation Configuration
    # ==========================================================================

    overlay_slot_id: str = Field(
        default="riskBox",
        description="DOM id of the overlay element (re-rendered in place)",
    )
    watch_interval_s: float = Field(
        default=30.0,
        description="Seconds between re-assessments in watch mode",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
