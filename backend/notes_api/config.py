"""
Notes API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py and anything that needs a default configuration.
When:  Loaded once at module import time; tests build their own Settings.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that work for local development.
    Attributes are grouped by concern for readability.
    """

    # ── Persistence ───────────────────────────────────────────────────────
    # What: Path of the JSON file mirroring the in-memory notes
    # Relative paths resolve against the process working directory
    data_file: str = Field(
        default="notes.json",
        description="JSON file the notes collection is mirrored to",
    )

    # What: Write to <data_file>.tmp and rename over the target on each save
    # When False: truncate and rewrite the file in place
    atomic_write: bool = Field(default=True)

    # ── CORS ──────────────────────────────────────────────────────────────
    # What: Value of Access-Control-Allow-Origin on every response
    cors_origin: str = Field(default="*")

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATA_FILE and data_file both work
    }


# Singleton instance used when create_app() is called without explicit settings
settings = Settings()
