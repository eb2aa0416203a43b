"""
Telemetry client configuration management.
"""

from pydantic_settings import BaseSettings
from typing import Optional, Union


class Settings(BaseSettings):
    """Telemetry settings loaded from environment variables."""
    
    # Collection endpoint
    endpoint_url: str = "https://api.wpcio.com/telemetry/v1/collect"
    request_timeout_seconds: float = 15.0
    
    # Host environment
    site_url: str = "http://localhost"
    platform_name: str = "wordpress"
    platform_version: str = "unknown"
    locale: str = "en_US"
    is_multisite: bool = False
    root_path: Optional[str] = None  # Stripped from error file paths
    
    # Error reporting
    debug: bool = False
    reporting_level: int = 32767  # Every severity bit
    
    # Performance thresholds
    execution_time_threshold: float = 1.0  # seconds
    memory_usage_threshold: int = 32 * 1024 * 1024  # bytes
    resource_count_threshold: int = 100
    
    # Delivery
    max_exported_errors: int = 50
    flush_interval: Union[int, str] = "daily"
    
    # Application
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        env_prefix = "telemetry_"
        case_sensitive = False


# Global settings instance
settings = Settings()
