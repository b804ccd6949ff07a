"""
Review Data API Configuration Module
====================================

Centralized configuration management using environment variables.
Supports both .env files and system environment variables.

Environment Variables:
    REVIEWS_PATH: JSON document holding {"reviews": [...]} (default: data/reviews.json)

    API_HOST: Bind host for the HTTP server (default: 0.0.0.0)
    API_PORT: Bind port for the HTTP server (default: 8000)
    CORS_ORIGINS: Comma-separated allowed origins (default: *)

    LOG_LEVEL: Root log level (default: INFO)
    LOG_JSON: Emit JSON structured logs (default: false)
    LOG_FILE: Optional rotating log file path

    ENVIRONMENT: development / production (default: development)
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path
from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_REVIEWS_PATH = PROJECT_ROOT / "data" / "reviews.json"

# Load environment variables from .env file if present
env_path = PROJECT_ROOT / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raises ValueError when not set

    Returns:
        Environment variable value or default

    Raises:
        ValueError: If required=True and variable is not set
    """
    value = os.getenv(key, default)
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be an integer, got: {value}")


def get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def get_env_list(key: str, default: List[str]) -> List[str]:
    """Get comma-separated environment variable as a list of stripped items."""
    value = os.getenv(key)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class DataConfig:
    """Review source document configuration."""

    reviews_path: str = field(
        default_factory=lambda: get_env("REVIEWS_PATH", str(DEFAULT_REVIEWS_PATH))
    )


@dataclass
class APIConfig:
    """HTTP server configuration."""

    host: str = field(default_factory=lambda: get_env("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: get_env_int("API_PORT", 8000))

    # "*" mirrors a wide-open cors() middleware
    cors_origins: List[str] = field(default_factory=lambda: get_env_list("CORS_ORIGINS", ["*"]))

    def __post_init__(self):
        """Validate configuration."""
        if not 0 < self.port < 65536:
            raise ValueError(f"API_PORT must be between 1 and 65535, got: {self.port}")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE"))

    # Structured logging
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))


@dataclass
class Settings:
    """Main application settings container."""

    data: DataConfig = field(default_factory=DataConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Application metadata
    app_name: str = "Review Data API"
    app_version: str = "1.0.0"
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() in ("production", "prod")

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() in ("development", "dev")


def load_settings() -> Settings:
    """
    Load and validate all application settings.

    Returns:
        Fully configured Settings instance

    Raises:
        ValueError: If configuration is invalid
    """
    return Settings()


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
