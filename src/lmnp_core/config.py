"""Configuration for the LMNP accounting core.

Pydantic Settings classes read from environment variables and a ``.env``
file.

Usage:
    from lmnp_core.config import LmnpConfig

    config = LmnpConfig()
    configure_logging(config.log_level, json_output=config.json_logs)

    # Export format
    print(config.export.csv_delimiter)
"""

from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lmnp_core.exceptions import ConfigurationError


class ExportConfig(BaseSettings):
    """Report export settings.

    Environment Variables:
        LMNP_EXPORT_CSV_DELIMITER: Field separator of CSV exports
        LMNP_EXPORT_TEXT_DELIMITER: Field separator of plaintext exports
        LMNP_EXPORT_CURRENCY_SYMBOL: Symbol appended to amounts in plaintext
    """

    model_config = SettingsConfigDict(
        env_prefix="LMNP_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    csv_delimiter: str = Field(
        default=";",
        min_length=1,
        max_length=1,
        description="Single-character CSV field separator",
    )
    text_delimiter: str = Field(
        default=" \t ",
        description="Separator between columns of plaintext exports",
    )
    currency_symbol: str = Field(
        default="€",
        description="Currency symbol for human-readable amounts",
    )

    @field_validator("text_delimiter")
    @classmethod
    def validate_text_delimiter(cls, v: str) -> str:
        """Text delimiter cannot be empty."""
        if not v:
            raise ValueError("Text delimiter cannot be empty")
        return v


class LmnpConfig(BaseSettings):
    """Root configuration.

    Environment Variables:
        LMNP_ENV: Environment name (development, staging, production, test)
        LMNP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        LMNP_JSON_LOGS: Render logs as JSON lines instead of console output

    Example:
        config = LmnpConfig(env="production", export=ExportConfig(csv_delimiter=","))
    """

    model_config = SettingsConfigDict(
        env_prefix="LMNP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines (production) instead of console output",
    )

    export: ExportConfig = Field(default_factory=ExportConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def load_config(env_file: Optional[str] = ".env") -> LmnpConfig:
    """Load configuration, turning validation failures into ConfigurationError."""
    try:
        return LmnpConfig(_env_file=env_file)
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigurationError(
            f"Invalid configuration: {first['msg']}",
            config_key=".".join(str(part) for part in first["loc"]),
            expected=first["type"],
            actual=first.get("input"),
        ) from e


__all__ = ["ExportConfig", "LmnpConfig", "load_config"]
