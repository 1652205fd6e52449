"""
Configuration management for the Tool Sync service
Uses Pydantic Settings for environment variable management
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Composio (connector aggregation) Configuration
    composio_api_key: Optional[str] = Field(default=None)
    composio_api_base: str = Field(default="https://backend.composio.dev/api/v3")

    # ElevenLabs Conversational AI Configuration
    elevenlabs_api_key: Optional[str] = Field(default=None)
    elevenlabs_api_base: str = Field(default="https://api.elevenlabs.io/v1")

    # Supabase Configuration
    supabase_url: Optional[str] = Field(default=None)
    supabase_service_role_key: Optional[str] = Field(default=None)

    # Webhook dispatch target registered on every tool
    site_url: Optional[str] = Field(default=None)
    root_domain: str = Field(default="reluit.com")
    tool_dispatch_path: str = Field(default="/api/composio/execute")

    # Tool fetching
    http_timeout: float = Field(default=30.0)
    tool_fetch_page_size: int = Field(default=50)
    tool_fetch_max_tools: int = Field(default=1000)

    # Scheduled sync
    cron_secret: Optional[str] = Field(default=None)
    redis_url: str = Field(default="redis://localhost:6379/0")
    sync_schedule_hour: int = Field(default=2)

    # Application Settings
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    environment: str = Field(default="development")

    # Server Configuration
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=8000)

    # CORS Settings
    allowed_origins: str = Field(default="http://localhost:3000,http://localhost:8000")

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def webhook_url(self) -> str:
        """URL the voice agent calls when it invokes a synced tool"""
        base_url = self.site_url or f"https://{self.root_domain}"
        return f"{base_url.rstrip('/')}{self.tool_dispatch_path}"

    def missing_credentials(self) -> List[str]:
        """Names of required secrets that are not configured"""
        required = {
            "COMPOSIO_API_KEY": self.composio_api_key,
            "ELEVENLABS_API_KEY": self.elevenlabs_api_key,
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_service_role_key,
        }
        return [name for name, value in required.items() if not value]

    def require_credentials(self) -> None:
        """Raise ConfigurationError when any required secret is missing"""
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(missing)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
