"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="PuttyBox", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/puttybox",
        description="SQLAlchemy database URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Quick order lifecycle (seconds since creation)
    quick_confirm_after_sec: float = Field(
        default=20, gt=0, description="pending -> confirmed"
    )
    quick_cooking_after_sec: float = Field(
        default=60, gt=0, description="confirmed -> cooking"
    )
    quick_dispatch_after_sec: float = Field(
        default=240, gt=0, description="cooking -> out for delivery"
    )
    quick_deliver_after_sec: float = Field(
        default=300, gt=0, description="out for delivery -> delivered"
    )

    # Plan order lifecycle (seconds since creation)
    plan_start_after_sec: float = Field(
        default=120, gt=0, description="scheduled -> in-progress"
    )
    plan_deliver_after_sec: float = Field(
        default=300, gt=0, description="in-progress -> delivered"
    )

    # Cancellation window measured from order creation
    cancel_window_sec: float = Field(
        default=180, ge=0, description="Seconds after creation an order may be cancelled"
    )

    # Background sweeper
    sweeper_enabled: bool = Field(
        default=True, description="Run the periodic order status sweeper"
    )
    sweep_interval_sec: float = Field(
        default=5.0, gt=0, description="Seconds between sweeps"
    )

    # Delivery surcharge tiers for quick orders
    delivery_tier_low: float = Field(
        default=200, ge=0, description="Subtotal below which the low-tier charge applies"
    )
    delivery_tier_high: float = Field(
        default=500, ge=0, description="Subtotal below which the mid-tier charge applies"
    )
    delivery_charge_low: float = Field(default=30, ge=0)
    delivery_charge_mid: float = Field(default=20, ge=0)

    # Admin
    admin_api_key: Optional[str] = Field(
        default=None, description="If set, admin routes require X-Admin-Key"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization", "X-Admin-Key"],
        description="Allowed HTTP headers",
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="PuttyBox API", description="API documentation title"
    )
    api_description: str = Field(
        default="Meal subscription and food ordering with live order tracking",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @model_validator(mode="after")
    def validate_thresholds(self):
        """Lifecycle thresholds increase strictly; cancellation closes before delivery"""
        quick = [
            self.quick_confirm_after_sec,
            self.quick_cooking_after_sec,
            self.quick_dispatch_after_sec,
            self.quick_deliver_after_sec,
        ]
        plan = [self.plan_start_after_sec, self.plan_deliver_after_sec]
        for name, values in (("quick", quick), ("plan", plan)):
            if any(b <= a for a, b in zip(values, values[1:])):
                raise ValueError(f"{name} lifecycle thresholds must be strictly increasing")
        if self.cancel_window_sec >= min(self.quick_deliver_after_sec, self.plan_deliver_after_sec):
            raise ValueError("cancel_window_sec must be shorter than both deliver thresholds")
        return self

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
