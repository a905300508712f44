from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    openrouter_api_key: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # LLM
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "deepseek/deepseek-chat"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 2000
    llm_timeout_seconds: float = 30.0
    app_url: str = "http://localhost:3009"  # sent as HTTP-Referer
    app_title: str = "Assessment Manager AI Import"

    # Import defaults
    default_due_days: int = 14
    current_semester: str = "Current"
    recent_subjects_limit: int = 20
    max_import_chars: int = 10000

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def has_llm(self) -> bool:
        return bool(self.openrouter_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
