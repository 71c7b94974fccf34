"""
Application Settings
===================

Card rendering, cache and browser settings read from ``SOCIAL_CARDS_*``
environment variables or a ``.env`` file.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Social Cards", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(
        default=None, description="Directory for rotating log files, console only when unset"
    )
    render_debug: bool = Field(
        default=False, description="Verbose capture and inlining diagnostics"
    )

    # Cache Configuration
    cache_backend: str = Field(default="redis", description="Cache backend: redis, memory")
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    redis_max_connections: int = Field(default=20, description="Redis connection pool size")
    cache_key_prefix: str = Field(default="social_cards:", description="Prefix for cache keys")
    default_cache_ttl: int = Field(
        default=7 * 24 * 3600, description="Cache TTL in seconds when a key has no explicit TTL"
    )
    response_max_age: int = Field(
        default=24 * 3600, description="Public Cache-Control max-age for card responses"
    )

    # Template Configuration
    template_namespace: str = Field(default="social_cards", description="Card template namespace")
    template_dirs: List[Path] = Field(
        default=[], description="Extra template directories searched after the bundled ones"
    )
    images_path: Optional[Path] = Field(default=None, description="Directory of card images")
    fonts_path: Optional[Path] = Field(default=None, description="Directory of card fonts")
    logo_path: Optional[Path] = Field(default=None, description="Logo inlined into cards")
    base_url: str = Field(default="http://localhost:8000", description="Public base URL")

    # Card Configuration
    card_width: int = Field(default=1200, description="Default card width")
    card_height: int = Field(default=630, description="Default card height")

    # Browser Configuration
    capture_timeout: float = Field(default=30.0, description="Capture timeout in seconds")
    browser_headless: bool = Field(default=True, description="Run browser in headless mode")
    browser_hardened: bool = Field(
        default=False, description="Pass container hardening flags to Chromium"
    )
    browser_no_sandbox: bool = Field(
        default=False, description="Disable the Chromium sandbox (containers without user namespaces)"
    )
    browser_extra_args: List[str] = Field(default=[], description="Additional Chromium arguments")

    # Capture Tuning
    markup_file_threshold: int = Field(
        default=1_000_000, description="Markup length at which a temporary file is used"
    )
    temp_path: Optional[Path] = Field(default=None, description="Directory for markup files")
    blank_frame_threshold: int = Field(
        default=10_000, description="Screenshots smaller than this many bytes are retried once"
    )
    blank_retry_delay: float = Field(default=1.0, description="Delay before the retry screenshot")
    settle_delay_ms: int = Field(default=50, description="Settle delay after the ready frame")

    # Asset Inlining
    max_inline_bytes: int = Field(default=2_000_000, description="Hard ceiling for inlined assets")
    warn_inline_bytes: int = Field(default=500_000, description="Soft warning size for assets")

    # Previews
    show_previews: bool = Field(default=True, description="Expose developer preview endpoints")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("cache_backend")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        """Validate cache backend."""
        allowed = {"redis", "memory"}
        if v.lower() not in allowed:
            raise ValueError(f"Cache backend must be one of: {allowed}")
        return v.lower()

    @field_validator("browser_extra_args", mode="before")
    @classmethod
    def parse_browser_args(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse browser arguments from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["--a", "--b"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "--a,--b"
            return [arg.strip() for arg in v.split(",") if arg.strip()]
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="SOCIAL_CARDS_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
