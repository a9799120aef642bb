"""Server configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Server configuration loaded from environment variables.

    All settings can be configured via environment variables with the
    RULESD_SERVER_ prefix (e.g., RULESD_SERVER_HOST, RULESD_SERVER_PORT).
    Core settings such as RULESD_MAX_WORKERS still apply to the engine.
    """

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # CORS
    cors_origins: list[str] = ["*"]

    # Corpus root; falls back to RULESD_RULES_DIR handling in core settings
    rules_dir: str | None = None

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="RULESD_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> ServerSettings:
    """Get cached server settings instance."""
    return ServerSettings()
