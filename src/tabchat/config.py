"""Application settings, read from the environment and an optional .env file."""
from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATA_DIR: Path = Path("data")

    DEFAULT_ROW_LIMIT: int = 200
    MAX_ROW_LIMIT: int = 1000
    PREVIEW_ROW_LIMIT: int = 10

    LOG_LEVEL: str = "INFO"

    # LLM providers; OpenRouter wins when both keys are set
    OPENROUTER_API_KEY: SecretStr | None = None
    OPENROUTER_MODEL: str = "openrouter/auto"
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_REFERER: str = "http://localhost"
    OPENROUTER_TITLE: str = "Tabchat Insights"

    GEMINI_API_KEY: SecretStr | None = None
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    LLM_TEMPERATURE: float = 0.2
    LLM_TIMEOUT: float = 60.0

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR.resolve()


settings = Settings()
