"""
Core configuration module.
Organized into separate settings classes, one per concern, each read from
the environment (or .env) under its own prefix.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API configuration settings."""

    app_name: str = "DeviceGuard API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 3001
    workers: int = 1

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class DatabaseSettings(BaseSettings):
    """Database configuration settings.

    SQLite (aiosqlite) is the default for local runs. Point DATABASE_URL at
    postgresql+asyncpg://... for a pooled PostgreSQL deployment; the pool
    settings below only apply there.
    """

    url: str = "sqlite+aiosqlite:///./deviceguard.db"
    pool_size: int = 10
    max_overflow: int = 5
    pool_timeout: int = 30
    pool_recycle: int = 1800  # 30 minutes
    seed_demo_data: bool = False

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    origins: List[str] = ["http://localhost:5173"]

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse origins from JSON array string or comma-separated list."""
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class PerformanceSettings(BaseSettings):
    """Performance configuration settings."""

    enable_query_logging: bool = False

    model_config = SettingsConfigDict(
        env_prefix="PERFORMANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration settings (per client IP)."""

    enabled: bool = True
    default_limit: str = "100/15 minutes"

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class MonitoringSettings(BaseSettings):
    """Monitoring configuration settings."""

    enable_metrics: bool = True
    metrics_endpoint: str = "/metrics"

    model_config = SettingsConfigDict(
        env_prefix="MONITORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = "INFO"
    enable_file_logging: bool = True
    log_dir: str = "logs"
    max_size: int = 10_485_760  # 10MB
    backup_count: int = 5
    enable_console_logging: bool = True

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def log_config(self) -> dict:
        """Get logging configuration."""
        return {
            "level": self.level,
            "enable_file_logging": self.enable_file_logging,
            "log_dir": self.log_dir,
            "max_file_size": self.max_size,
            "backup_count": self.backup_count,
            "enable_console": self.enable_console_logging,
        }


class PaginationSettings(BaseSettings):
    """Pagination configuration settings."""

    default_page_size: int = 20
    max_page_size: int = 100

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class FleetSettings(BaseSettings):
    """Windows and limits used when summarizing the device fleet."""

    online_window_minutes: int = Field(
        default=60, description="A device is online if seen within this window"
    )
    warranty_window_days: int = Field(
        default=30, description="Warranty expiring soon when expiry falls within this many days"
    )
    contract_window_days: int = Field(
        default=30, description="Contract expiring soon when it ends within this many days"
    )
    contract_length_days: int = 365
    default_telemetry_hours: int = 24
    max_telemetry_hours: int = 168
    detail_telemetry_limit: int = 100
    detail_related_limit: int = 10

    model_config = SettingsConfigDict(
        env_prefix="FLEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Settings(BaseSettings):
    """Main application settings."""

    api: APISettings = APISettings()
    database: DatabaseSettings = DatabaseSettings()
    cors: CORSSettings = CORSSettings()
    performance: PerformanceSettings = PerformanceSettings()
    rate_limit: RateLimitSettings = RateLimitSettings()
    monitoring: MonitoringSettings = MonitoringSettings()
    logging: LoggingSettings = LoggingSettings()
    pagination: PaginationSettings = PaginationSettings()
    fleet: FleetSettings = FleetSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
