"""Tests for application settings."""

from __future__ import annotations

import pytest

from assessment_ai.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
        monkeypatch.delenv("LLM_MODEL", raising=False)
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]

        assert cfg.openrouter_base_url == "https://openrouter.ai/api/v1"
        assert cfg.llm_model == "deepseek/deepseek-chat"
        assert cfg.llm_temperature == 0.2
        assert cfg.llm_max_tokens == 2000
        assert cfg.llm_timeout_seconds > 0
        assert cfg.default_due_days == 14
        assert cfg.current_semester == "Current"
        assert cfg.has_llm is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
        monkeypatch.setenv("DEFAULT_DUE_DAYS", "21")
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]

        assert cfg.openrouter_api_key == "sk-or-test"
        assert cfg.default_due_days == 21
        assert cfg.has_llm is True

    def test_invalid_int_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFAULT_DUE_DAYS", "soon")
        with pytest.raises(ValueError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
