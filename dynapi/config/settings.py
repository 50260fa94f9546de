"""
Unified Configuration System for dynapi

Single source of truth for all configuration using pydantic-settings.

ARCHITECTURAL PRINCIPLES:
- Only this module accesses environment variables directly
- All other modules receive configuration as constructor arguments
- Type-safe validation with automatic conversion
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict
from enum import Enum
import json


# =============================================================================
# ENVIRONMENT AND LOGGING ENUMS
# =============================================================================

class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# NESTED CONFIGURATION SECTIONS
# =============================================================================

class ServerSettings(BaseSettings):
    """Core server configuration"""
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    reload: bool = Field(default=False, validation_alias="RELOAD")

    environment: Environment = Field(default=Environment.DEVELOPMENT, validation_alias="ENVIRONMENT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


class LoggingSettings(BaseSettings):
    """Logging configuration"""
    level: LogLevel = Field(default=LogLevel.INFO, validation_alias="LOG_LEVEL")

    # Structured logging renders JSON, otherwise structlog's console renderer
    structured_logging: bool = Field(default=True, validation_alias="STRUCTURED_LOGGING")
    include_trace_id: bool = Field(default=True, validation_alias="INCLUDE_TRACE_ID")

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


class TimeoutSettings(BaseSettings):
    """Request timeout configuration

    ``policies`` maps timeout policy names to seconds. Routes declaring a
    named timeout are resolved against this table at registration time.
    """
    default_seconds: Optional[float] = Field(default=None, validation_alias="REQUEST_TIMEOUT_DEFAULT_SECONDS")
    policies: Dict[str, float] = Field(default_factory=dict, validation_alias="REQUEST_TIMEOUT_POLICIES")
    status_code: int = Field(default=504, validation_alias="REQUEST_TIMEOUT_STATUS_CODE")

    @field_validator("policies", mode="before")
    @classmethod
    def parse_policies(cls, v):
        """Accept a JSON object string or a comma separated name=seconds list

        The environment variable is decoded as JSON before it reaches here.
        """
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return {}
            if v.startswith("{"):
                return json.loads(v)
            pairs = [item.split("=", 1) for item in v.split(",") if item.strip()]
            return {name.strip(): float(seconds) for name, seconds in pairs}
        return v or {}

    @field_validator("default_seconds")
    @classmethod
    def validate_default(cls, v):
        if v is not None and v <= 0:
            raise ValueError("default request timeout must be positive")
        return v

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


class HttpLoggingSettings(BaseSettings):
    """Defaults for per-route HTTP logging"""
    request_body_limit: int = Field(default=32 * 1024, validation_alias="HTTP_LOGGING_REQUEST_BODY_LIMIT")
    response_body_limit: int = Field(default=32 * 1024, validation_alias="HTTP_LOGGING_RESPONSE_BODY_LIMIT")

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


class ErrorSettings(BaseSettings):
    """Problem response configuration"""
    unhandled_detail: str = Field(default="Unhandled exception was thrown", validation_alias="UNHANDLED_EXCEPTION_DETAIL")
    problem_media_type: str = Field(default="application/problem+json", validation_alias="PROBLEM_MEDIA_TYPE")
    log_tracebacks: bool = Field(default=True, validation_alias="LOG_UNHANDLED_TRACEBACKS")

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


class DynamicAPISettings(BaseSettings):
    """
    Unified configuration for dynapi.

    All configuration access should go through this class, obtained with
    ``get_settings()`` and handed to the components that need it.
    """

    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    http_logging: HttpLoggingSettings = Field(default_factory=HttpLoggingSettings)
    errors: ErrorSettings = Field(default_factory=ErrorSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "validate_assignment": True,
        "extra": "ignore"
    }

    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.server.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.server.environment == Environment.PRODUCTION


# =============================================================================
# SINGLETON MANAGEMENT
# =============================================================================

_settings_instance: Optional[DynamicAPISettings] = None


def get_settings() -> DynamicAPISettings:
    """
    Get global settings instance (singleton pattern).

    Raises:
        ConfigurationError: If settings validation fails
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            from dotenv import load_dotenv

            load_dotenv(override=False)
            _settings_instance = DynamicAPISettings()
        except Exception as e:
            from dynapi.exceptions import ConfigurationError
            raise ConfigurationError(
                f"Settings initialization failed: {e}",
                error_code="SETTINGS_INIT_ERROR",
                context={"original_error": str(e), "error_type": type(e).__name__}
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """
    Reset settings instance (primarily for testing).

    Forces recreation of settings on next get_settings() call.
    """
    global _settings_instance
    _settings_instance = None
