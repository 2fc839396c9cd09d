"""
Picky Joy - Configuration and settings.

Credentials are optional at load time so the app (and its CLI) import
cleanly without a .env. Anything that needs them calls
require_chat_settings() and gets a ConfigurationError instead of a crash.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from picky_joy.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from the environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 60.0
    chat_max_tokens: int = 1000
    chat_temperature: float = 0.7

    # Supabase
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None

    # Dev user for the CLI chat loop (access token for a test account)
    dev_access_token: str | None = None

    # Application
    picky_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    cors_max_age: int = 86400

    # PICKY_LOG_PROMPTS=1 - log prompts to local files (dev only)
    picky_log_prompts: bool = False

    def missing_chat_settings(self) -> list[str]:
        """Names of the environment variables the chat pipeline needs but lacks."""
        required = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_service_role_key,
            "OPENAI_API_KEY": self.openai_api_key,
        }
        return [name for name, value in required.items() if not value]

    def require_chat_settings(self) -> None:
        missing = self.missing_chat_settings()
        if missing:
            raise ConfigurationError(
                details=f"Missing environment variables: {', '.join(missing)}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

