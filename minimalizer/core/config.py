"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from the current working directory (the host application root)
ENV_FILE = Path.cwd() / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "minimalizer"
    app_env: str = Field(default="development", description="Application environment")
    secret_key: str = Field(default="change-me", description="Secret key for the session cookie")
    session_cookie: str = Field(default="minimalizer_session", description="Session cookie name")

    # Views and translations
    templates_dir: str = Field(default="templates", description="Jinja2 templates directory")
    template_suffix: str = Field(default=".html", description="Suffix for conventional view names")
    locales_dir: str = Field(default="locales", description="Directory with <locale>.json files")
    default_locale: str = Field(default="en", description="Locale used for translations")

    # Responses
    redirect_status_code: int = Field(default=302, ge=300, le=399, description="Status for redirects")
    failure_status_code: int = Field(default=422, ge=400, le=499, description="Status for failed saves")

    # Database
    database_url: str = Field(default="sqlite:///./minimalizer.db", description="SQLAlchemy database URL")
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"minimalizer.controllers": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(default="logs/minimalizer.log", description="Path to log file")
    log_file_retention: int = Field(default=30, ge=1, description="Number of rotated log files to keep")
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens) - NOT RECOMMENDED"
    )

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        """Only json and text formats are supported"""
        if v.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

    @property
    def templates_path(self) -> Path:
        return Path(self.templates_dir)

    @property
    def locales_path(self) -> Path:
        return Path(self.locales_dir)

    model_config = SettingsConfigDict(
        env_prefix="MINIMALIZER_",
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
