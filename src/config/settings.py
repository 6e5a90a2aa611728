"""Application settings and configuration management."""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Hotel CMS REST API configuration."""

    base_url: str = "http://localhost:3001/api"
    request_timeout: int = 30
    max_retries: int = 3  # Applies to GET requests only; writes are sent once
    user_agent: str = "HotelOnboardingWizard/1.0"

    # Either a pre-issued bearer token or login credentials
    token: str = ""
    email: str = ""
    password: str = ""

    model_config = SettingsConfigDict(env_prefix="API_")


class RedisSettings(BaseSettings):
    """Redis configuration for auth token caching."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    ssl: bool = False
    socket_timeout: int = 5
    socket_connect_timeout: int = 5
    token_ttl: int = 23 * 3600  # Backend issues 24h tokens

    model_config = SettingsConfigDict(env_prefix="REDIS_")


class WizardSettings(BaseSettings):
    """Onboarding wizard behaviour."""

    hotel_view_path: str = "/view/hotel/{hotel_id}"
    temp_files_entity_type: str = "hotels"
    approval_entry_type: str = "hotel"

    model_config = SettingsConfigDict(env_prefix="WIZARD_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Sub-settings
    api: ApiSettings = ApiSettings()
    redis: RedisSettings = RedisSettings()
    wizard: WizardSettings = WizardSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_api_auth(self) -> list[str]:
        """Validate that some form of API auth is configured. Returns list of missing var names."""
        if self.api.token.strip():
            return []
        missing = []
        if not self.api.email.strip():
            missing.append("API_EMAIL")
        if not self.api.password.strip():
            missing.append("API_PASSWORD")
        return missing

    def hotel_view_url(self, hotel_id: int) -> str:
        """Path of the hotel view page the wizard redirects to once onboarding is done."""
        return self.wizard.hotel_view_path.replace("{hotel_id}", str(hotel_id))


# Global settings instance
settings = Settings()
