"""
Configuration Management for Water Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Nothing in this app is strictly required - every backend has a
local fallback - so every field carries a default.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from uuid import uuid4

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """Tracker defaults."""
    
    model_config = SettingsConfigDict(
        env_prefix="WATER_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    default_daily_goal: int = Field(
        default=2000,
        gt=0,
        description="Daily goal (mL) used when none is stored or the stored one is 0"
    )
    max_custom_volume: int = Field(
        default=2000,
        gt=0,
        description="Upper bound of the custom-add slider (mL)"
    )
    default_custom_volume: int = Field(
        default=250,
        ge=0,
        description="Initial value of the custom-add slider (mL)"
    )


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="WATER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Which key-value store to use"
    )
    database_path: str = Field(
        default="water_tracker.db",
        description="Path to the SQLite database file"
    )
    
    @field_validator('database_path')
    @classmethod
    def validate_database_path(cls, v: str) -> str:
        """Warn if the parent directory doesn't exist (but don't fail - might be mounted later)."""
        parent = Path(v).expanduser().parent
        if not parent.exists():
            import warnings
            warnings.warn(
                f"Directory for water tracker database not found: {parent}. "
                "Make sure it exists before running the application."
            )
        return v


class ReplicationSettings(BaseSettings):
    """Paired-device replication (MQTT) configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="WATER_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    enabled: bool = Field(
        default=False,
        description="Mirror state to a paired device over MQTT"
    )
    broker_host: str = Field(
        default="localhost",
        description="MQTT broker hostname"
    )
    broker_port: int = Field(
        default=1883,
        ge=1,
        le=65535,
        description="MQTT broker port"
    )
    username: Optional[str] = None
    password: Optional[str] = None
    
    # Both devices of a pair must share pair_id; device_id must differ
    pair_id: str = Field(
        default="default",
        min_length=1,
        description="Shared identifier of the device pair"
    )
    device_id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Identifier of this device within the pair"
    )
    topic_prefix: str = Field(
        default="water-tracker",
        description="MQTT topic prefix"
    )
    keepalive: int = Field(
        default=60,
        ge=5,
        description="MQTT keepalive interval in seconds"
    )
    qos: int = Field(
        default=1,
        ge=0,
        le=2,
        description="MQTT quality of service for snapshots"
    )
    
    @property
    def snapshot_topic(self) -> str:
        """Topic both devices of the pair publish to and subscribe on."""
        return f"{self.topic_prefix.rstrip('/')}/{self.pair_id}/snapshot"


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
        description="Minimum level for local structured logs"
    )
    
    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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
    def tracker(self) -> TrackerSettings:
        return TrackerSettings()
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def replication(self) -> ReplicationSettings:
        return ReplicationSettings()
    
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
    
    for name in ("tracker", "storage", "replication", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
