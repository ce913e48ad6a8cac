"""Tests for environment-driven settings and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from bouwplan.config import Settings, configure_logging

_ENV_VARS = (
    "BOUWPLAN_LOG_LEVEL",
    "BOUWPLAN_IDEMPOTENT_RELEASE",
    "BOUWPLAN_SEED_DEMO",
    "BOUWPLAN_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _from_env() -> Settings:
    return Settings(_env_file=None)


class TestSettingsFromEnvironment:
    def test_defaults(self) -> None:
        settings = _from_env()
        assert settings.log_level == "INFO"
        assert settings.idempotent_release is False
        assert settings.seed_demo is False
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_flags_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOUWPLAN_IDEMPOTENT_RELEASE", "true")
        monkeypatch.setenv("BOUWPLAN_SEED_DEMO", "1")
        settings = _from_env()
        assert settings.idempotent_release is True
        assert settings.seed_demo is True

    def test_prefix_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("bouwplan_seed_demo", "yes")
        assert _from_env().seed_demo is True

    def test_unrecognised_flag_is_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOUWPLAN_SEED_DEMO", "misschien")
        with pytest.raises(ValidationError, match="seed_demo"):
            _from_env()

    def test_log_level_is_normalised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOUWPLAN_LOG_LEVEL", "debug")
        assert _from_env().log_level == "DEBUG"

    def test_cors_origins_are_split(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            "BOUWPLAN_CORS_ORIGINS", "https://bouwplan.nl, http://localhost:5173,"
        )
        assert _from_env().cors_origins == [
            "https://bouwplan.nl",
            "http://localhost:5173",
        ]

    def test_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOUWPLAN_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError, match="Unknown log level"):
            _from_env()

    def test_unprefixed_variables_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEED_DEMO", "true")
        assert _from_env().seed_demo is False


class TestSettingsFromEnvFile:
    def test_env_file_is_read(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(
            "BOUWPLAN_IDEMPOTENT_RELEASE=on\nBOUWPLAN_LOG_LEVEL=warning\nOTHER_TOOL=1\n",
            encoding="utf-8",
        )
        settings = Settings(_env_file=env_file)
        assert settings.idempotent_release is True
        assert settings.log_level == "WARNING"

    def test_environment_wins_over_env_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("BOUWPLAN_SEED_DEMO=true\n", encoding="utf-8")
        monkeypatch.setenv("BOUWPLAN_SEED_DEMO", "false")
        assert Settings(_env_file=env_file).seed_demo is False


class TestConfigureLogging:
    def test_sets_package_level(self) -> None:
        logger = logging.getLogger("bouwplan")
        previous = logger.level
        try:
            configure_logging(Settings(_env_file=None, log_level="warning"))
            assert logger.level == logging.WARNING
        finally:
            logger.setLevel(previous)
