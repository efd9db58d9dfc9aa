"""
Configuration Management Module

This module handles loading, validating, and providing access to the exchange
core configuration from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Global pair-admission thresholds (max transfer fee, max confirmation time)
- Public query retry budget and timeouts
- TLS verification switch for the public channel
- Log level

Usage:
    from core.config import settings

    print(settings.max_tx_fee_allowed)
    print(settings.max_confirmations_allowed)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Exchange Core Settings

    Values are automatically loaded from environment variables or .env file.

    Attributes:
        max_tx_fee_allowed: Pairs whose fixed transfer fee, converted with the
            average rate, reaches this value are not tradeable
        max_confirmations_allowed: Pairs whose confirmation time reaches this
            value are not tradeable
        query_max_attempts: Retry budget of the public query client
        query_connect_timeout: Connection-establishment timeout (seconds)
        query_timeout: Total-call timeout (seconds)
        query_verify_tls: Verify TLS certificates on the public channel
        query_user_agent: User-Agent header sent with public queries
        log_level: Logging level
    """

    # ============================================
    # Tradeable-Pair Admission
    # ============================================

    max_tx_fee_allowed: float = Field(
        default=0.005,
        description="Maximum transfer fee, in price-reference units, for a pair to be tradeable"
    )

    max_confirmations_allowed: int = Field(
        default=30,
        description="Maximum confirmation time (minutes) for a pair to be tradeable"
    )

    # ============================================
    # Public Query Client
    # ============================================

    query_max_attempts: int = Field(
        default=5,
        description="Number of attempts before a public query fails"
    )

    query_connect_timeout: float = Field(
        default=15.0,
        description="Connection-establishment timeout in seconds"
    )

    query_timeout: float = Field(
        default=60.0,
        description="Total-call timeout in seconds"
    )

    query_verify_tls: bool = Field(
        default=False,
        description="Verify TLS certificates for public (unauthenticated) endpoints"
    )

    query_user_agent: str = Field(
        default="Mozilla/4.0 (compatible; coinbridge Python client)",
        description="User-Agent header sent with public queries"
    )

    # ============================================
    # Application Configuration
    # ============================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False
    )


# ============================================
# Global Settings Instance
# ============================================

settings = Settings()


# ============================================
# Configuration Validation
# ============================================

def validate_configuration(config: Settings = None) -> None:
    """
    Validate critical configuration settings on startup.

    Args:
        config: Settings to validate (defaults to the global settings)

    Raises:
        ValueError: If a setting is missing or out of range
    """
    # logging.py imports config.py, so the logger is imported lazily
    from core.logging import logger

    config = config or settings

    if config.max_tx_fee_allowed <= 0:
        raise ValueError(
            f"Invalid MAX_TX_FEE_ALLOWED: {config.max_tx_fee_allowed}. Must be positive"
        )

    if config.max_confirmations_allowed <= 0:
        raise ValueError(
            f"Invalid MAX_CONFIRMATIONS_ALLOWED: {config.max_confirmations_allowed}. Must be positive"
        )

    if config.query_max_attempts < 1:
        raise ValueError(
            f"Invalid QUERY_MAX_ATTEMPTS: {config.query_max_attempts}. Must be at least 1"
        )

    if config.query_connect_timeout <= 0 or config.query_timeout <= 0:
        raise ValueError("Query timeouts must be positive")

    if config.query_connect_timeout > config.query_timeout:
        raise ValueError(
            f"QUERY_CONNECT_TIMEOUT ({config.query_connect_timeout}s) cannot exceed "
            f"QUERY_TIMEOUT ({config.query_timeout}s)"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.log_level.upper() not in valid_log_levels:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{config.log_level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )

    logger.info("Configuration validated successfully")
    logger.info(f"Max transfer fee: {config.max_tx_fee_allowed}")
    logger.info(f"Max confirmation time: {config.max_confirmations_allowed}")
    logger.info(
        f"Public queries: {config.query_max_attempts} attempts, "
        f"connect {config.query_connect_timeout}s, total {config.query_timeout}s, "
        f"TLS verify {'on' if config.query_verify_tls else 'off'}"
    )
    logger.info(f"Log level: {config.log_level.upper()}")
