"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here. No scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode and DEBUG logging. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        database_url: SQLAlchemy URL of the bus database. When unset,
            buses are kept in memory and lost on restart.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "ShuttleTrack"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    database_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8080

    def effective_log_level(self) -> str:
        """Return DEBUG in debug mode, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level


settings = Settings()
