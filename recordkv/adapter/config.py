"""
recordkv Configuration

This module provides configuration management for the record adapter and the
store service using Pydantic Settings. All configuration values can be set via
environment variables, a .env file, or benchmark properties.
"""

from typing import Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class AdapterConfig(BaseSettings):
    """
    Record Adapter Configuration

    All settings can be overridden via environment variables.
    Example: STORE_BACKEND=embedded SNAPSHOT_PATH=/tmp/store.json python scripts/run_workload.py
    """

    # ========== Store Selection ==========
    store_backend: str = Field(
        default="http",
        description="Transactional store variant: 'http' or 'embedded'"
    )

    # ========== Network Store Configuration ==========
    store_host: str = Field(
        default="localhost",
        description="Store service host"
    )
    store_port: int = Field(
        default=9090,
        description="Store service port"
    )
    store_url: Optional[str] = Field(
        default=None,
        description="Store service base URL (overrides host and port)"
    )

    # ========== Embedded Store Configuration ==========
    snapshot_path: Optional[str] = Field(
        default=None,
        description="Snapshot file loaded at open and saved at close (in-memory only if unset)"
    )

    # ========== HTTP Timeout Configuration ==========
    http_connect_timeout: float = Field(
        default=5,
        description="HTTP connection timeout in seconds"
    )
    http_read_timeout: float = Field(
        default=30,
        description="HTTP read timeout in seconds"
    )

    # ========== Store Service Configuration ==========
    service_host: str = Field(
        default="0.0.0.0",
        description="Store service bind address"
    )
    service_port: int = Field(
        default=9090,
        description="Store service bind port"
    )

    # ========== Logging Configuration ==========
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def base_url(self) -> str:
        if self.store_url:
            return self.store_url.rstrip("/")
        return f"http://{self.store_host}:{self.store_port}"

    @classmethod
    def from_properties(cls, properties: Optional[Mapping[str, str]] = None) -> "AdapterConfig":
        """
        Build a configuration from benchmark properties.

        Dotted property names map onto fields ("store.host" -> store_host).
        Properties that name no field are ignored; fields not given fall back
        to the environment and defaults.
        """
        overrides = {}
        for name, value in (properties or {}).items():
            field = name.replace(".", "_").replace("-", "_").lower()
            if field in cls.model_fields:
                overrides[field] = value
        return cls(**overrides)


# Global configuration instance
config = AdapterConfig()


def get_config() -> AdapterConfig:
    """
    Get the global configuration instance.

    Returns:
        AdapterConfig: The global configuration instance
    """
    return config
