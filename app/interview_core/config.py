"""
Purpose: Application settings, loaded from the environment and `.env`.
Why: one place for the generator endpoint/credential, session directory and
logging knobs; nothing else reads os.environ directly.
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .models import LLMSettings

DEFAULT_BASE_URL = "https://api.minimax.io/v1"
DEFAULT_MODEL = "MiniMax-M2.1-lightning"


class AppConfig(BaseSettings):
    """
    Global settings. Every field maps to an upper-case environment variable
    of the same name (LLM_API_KEY, SESSION_DIR, ...).
    """

    PROJECT_NAME: str = "Interview Prep Core"

    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = DEFAULT_BASE_URL
    LLM_MODEL: str = DEFAULT_MODEL
    LLM_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    LLM_MAX_TOKENS: int = Field(default=2048, gt=0)
    LLM_TIMEOUT: float = Field(default=60.0, gt=0)

    # Unset -> sessions live in memory only and die with the process.
    SESSION_DIR: Optional[Path] = None

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def load(cls, **overrides) -> "AppConfig":
        """Load settings and wrap any validation failure."""
        try:
            return cls(**overrides)
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration: {e}"
            ) from e

    def llm_settings(self, **overrides) -> LLMSettings:
        params = dict(
            model=self.LLM_MODEL.strip() or DEFAULT_MODEL,
            temperature=self.LLM_TEMPERATURE,
            max_tokens=self.LLM_MAX_TOKENS,
        )
        params.update(overrides)
        return LLMSettings(**params)
