"""Application configuration using Pydantic BaseSettings."""

import logging

import structlog
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # CORS Configuration
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Image reachability probe (empty proxy disables the HEAD requests)
    proxy_url: str = Field(default="", alias="PROMPT_PROXY_URL")
    probe_timeout_seconds: float = Field(default=10.0, alias="PROMPT_PROBE_TIMEOUT_SECONDS")

    # Vocabulary tables (empty path falls back to built-in params / no banned terms)
    params_file: str = Field(default="", alias="PROMPT_PARAMS_FILE")
    banned_words_file: str = Field(default="", alias="PROMPT_BANNED_WORDS_FILE")
    check_banned_words: bool = Field(default=True, alias="PROMPT_CHECK_BANNED_WORDS")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @model_validator(mode="after")
    def validate_probe_config(self) -> "Settings":
        """Reject probe settings that would make every HEAD request fail or hang."""
        if self.probe_timeout_seconds <= 0:
            raise ValueError(
                "PROMPT_PROBE_TIMEOUT_SECONDS must be positive "
                f"(got {self.probe_timeout_seconds})"
            )
        return self


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on application environment.

    - Production: JSON output for log aggregation
    - Development: Console output for human readability
    """
    if settings.app_env == "production":
        processors = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # Cached loggers pin sys.stdout; tests swap it per test
        cache_logger_on_first_use=settings.app_env not in ("test", "testing"),
    )
