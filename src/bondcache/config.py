"""Configuration management for bond-cache.

Loads settings from environment variables (or .env) using Pydantic.
Nothing is required: defaults point at a local bonds API.

Usage:
    from bondcache.config import settings

    print(settings.bonds_api_url)
    print(settings.log_level)
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """bond-cache configuration from environment variables.

    Attributes:
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
        bonds_api_url: Base URL of the remote bonds API
        bonds_api_key: Optional bearer token for the bonds API
        bonds_rate_limit: Max requests per second to the bonds API
        bonds_timeout: Request timeout in seconds
        coalesce_inflight: Share one fetch between concurrent misses
        simulated_delay: Response delay of the simulated transport (seconds)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    # System Settings
    log_level: str = Field(default="INFO", description="Logging level")

    # Bonds API
    bonds_api_url: str = Field(
        default="http://localhost:8080/api",
        min_length=1,
        description="Base URL of the bonds API",
    )
    bonds_api_key: str | None = Field(default=None, description="Bonds API bearer token")
    bonds_rate_limit: int = Field(default=10, ge=1, description="Bonds API requests/second")
    bonds_timeout: float = Field(default=30.0, gt=0, description="Request timeout (seconds)")

    # Cache behaviour
    coalesce_inflight: bool = Field(
        default=False,
        description="Coalesce concurrent misses for the same (date, ISIN) into one fetch",
    )
    simulated_delay: float = Field(
        default=0.5,
        ge=0,
        description="Delay of the simulated transport used by the demo (seconds)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper


# Global settings instance — loaded once at import
settings = Settings()
