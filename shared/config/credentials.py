"""
Provider credentials.

Read from the process environment (and .env) on every call so that a rotated
key takes effect on the next request.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderCredentials(BaseSettings):
    """Provider API keys. Deliberately not cached."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
        description="Gemini API key (GEMINI_API_KEY or GOOGLE_API_KEY)",
    )
    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("ANTHROPIC_API_KEY"),
        description="Anthropic API key",
    )
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY"),
        description="OpenAI API key (embeddings)",
    )


def get_credentials() -> ProviderCredentials:
    """
    Read provider credentials from the environment.

    Returns:
        Fresh ProviderCredentials instance
    """
    return ProviderCredentials()
