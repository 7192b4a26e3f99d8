"""Configuration using pydantic-settings.

Settings come from ``SHEETJSON_*`` environment variables or a local ``.env``
file. The access token is only required by commands that call the API.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """sheetjson settings loaded from environment variables.

    Environment variables:
    - SHEETJSON_ACCESS_TOKEN: OAuth2 token with the sheets.readonly scope
    - SHEETJSON_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    - SHEETJSON_LOG_FORMAT: "text" for colored output, "json" for JSON lines
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETJSON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "text"

    # Google Sheets API
    access_token: str = ""
    timeout: float = 60.0

    # Output
    indent: int = 2

    @property
    def json_logs(self) -> bool:
        """Check if logs should be emitted as JSON lines."""
        return self.log_format == "json"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {allowed}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is a known value."""
        allowed = {"text", "json"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of: {allowed}")
        return v_lower

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError("indent must be >= 0")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return Settings()
