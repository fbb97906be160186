"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    gemini_model: str = Field(
        default="gemini-2.5-flash", validation_alias="HEADLINES_GEMINI_MODEL"
    )
    llm_timeout_seconds: float = Field(
        default=20.0, gt=0.0, validation_alias="HEADLINES_LLM_TIMEOUT_SECONDS"
    )
    llm_max_retries: int = Field(
        default=1, ge=0, le=8, validation_alias="HEADLINES_LLM_MAX_RETRIES"
    )
    pipeline_deadline_seconds: float = Field(
        default=45.0, gt=0.0, validation_alias="HEADLINES_PIPELINE_DEADLINE_SECONDS"
    )
    config_path: Path | None = Field(
        default=None, validation_alias="HEADLINES_CONFIG_PATH"
    )
    log_level: str = Field(default="INFO", validation_alias="HEADLINES_LOG_LEVEL")
    log_json: bool = Field(default=True, validation_alias="HEADLINES_LOG_JSON")

    @property
    def llm_enabled(self) -> bool:
        """Whether a model arbitrator can be constructed."""
        return bool(self.gemini_api_key)


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
