"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mentor_proxy.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    google_ai_api_key: str | None = Field(default=None, alias="GOOGLE_AI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-flash-latest", alias="GEMINI_MODEL")
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_API_BASE",
    )
    gemini_temperature: float = Field(default=0.7, alias="GEMINI_TEMPERATURE")
    gemini_top_p: float = Field(default=0.8, alias="GEMINI_TOP_P")
    gemini_top_k: int = Field(default=40, alias="GEMINI_TOP_K")
    gemini_max_output_tokens: int = Field(default=2048, alias="GEMINI_MAX_OUTPUT_TOKENS")
    provider_timeout: float = Field(
        default=30.0, alias="PROVIDER_TIMEOUT", description="Seconds"
    )
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True, extra="ignore"
    )

    def require_api_key(self) -> str:
        """Return the provider credential or fail if it is not configured."""

        if not self.google_ai_api_key:
            raise ConfigurationError("Google AI API key not configured")
        return self.google_ai_api_key


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
