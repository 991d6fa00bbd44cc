"""
Configuration module using Pydantic Settings.

Loads the Azure OpenAI deployment, the Azure AI Search index and the
system prompt from environment variables. Supports .env files for
local development.
"""

from collections.abc import Iterable

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = "You are an AI assistant that helps people find information."


class ConfigurationError(ValueError):
    """A required setting is missing. Raised at startup, never per request."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Azure OpenAI
    azure_openai_endpoint: str
    azure_openai_chat_deployment: str = "gpt-4o"
    azure_openai_embedding_deployment: str | None = "text-embedding-3-small"
    azure_openai_api_version: str = "2024-10-21"
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Azure AI Search
    azure_search_endpoint: str
    azure_search_index_name: str

    # Application Insights
    applicationinsights_connection_string: str = ""

    # App
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


def require_settings(settings: Settings, fields: Iterable[str]) -> None:
    """
    Fail fast when any of the named settings is absent or blank.

    Raises:
        ConfigurationError: listing every missing field.
    """
    missing = [name for name in fields if not (getattr(settings, name, None) or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")


def get_settings() -> Settings:
    """Load settings once at startup; callers pass the instance along."""
    return Settings()
