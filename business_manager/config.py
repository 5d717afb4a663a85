"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Document store
    database_url: str = "sqlite:///./business_manager.db"

    # Identity provider
    identity_api_base: str = "https://identitytoolkit.googleapis.com"
    identity_api_key: str = ""

    # Service
    service_name: str = "business-manager"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Presentation
    notification_history: int = 50


settings = Settings()
