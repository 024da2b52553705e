"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what the application depends on and
ensures all configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """File-backed record store configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        extra="ignore"
    )
    
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per collection"
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation used when serializing collections"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for the atomic rename before giving up"
    )


class AuthSettings(BaseSettings):
    """Password hashing and bearer token configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="FINANCE_AUTH_",
        extra="ignore"
    )
    
    jwt_secret: str = Field(
        default="change-me",
        min_length=1,
        description="Secret used to sign bearer tokens"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Token signing algorithm"
    )
    token_expires_minutes: int = Field(
        default=7 * 24 * 60,
        ge=1,
        description="Token lifetime in minutes"
    )
    password_schemes: str = Field(
        default="pbkdf2_sha256",
        description="Comma-separated list of passlib hashing schemes"
    )
    
    @field_validator('jwt_secret')
    @classmethod
    def warn_default_secret(cls, v: str) -> str:
        """Warn if the default secret is in use (but don't fail - fine for local use)."""
        if v == "change-me":
            import warnings
            warnings.warn(
                "FINANCE_AUTH_JWT_SECRET is not set. "
                "Tokens are signed with the default secret."
            )
        return v
    
    @property
    def password_schemes_list(self) -> list[str]:
        """Get hashing schemes as a list."""
        return [s.strip() for s in self.password_schemes.split(",") if s.strip()]


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    
    # Reporting
    salary_csv_label: str = Field(
        default="Monthly salary",
        min_length=1,
        description="Description used for the salary row in CSV exports"
    )


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Note: These are loaded lazily to allow partial configuration
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("storage", "auth", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
