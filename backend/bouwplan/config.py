"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_backend_dir = Path(__file__).resolve().parent.parent
_project_root = _backend_dir.parent


class Settings(BaseSettings):
    """bouwplan settings.

    Environment variables:
        BOUWPLAN_LOG_LEVEL: logging level name (default INFO).
        BOUWPLAN_IDEMPOTENT_RELEASE: release an already released tranche
            without error (default false).
        BOUWPLAN_SEED_DEMO: new projects start with the demo progress
            (default false).
        BOUWPLAN_CORS_ORIGINS: comma-separated origins for the HTTP API.

    ``.env`` files in the project root and the backend directory are read
    as well; the backend one wins, and real environment variables win over
    both.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOUWPLAN_",
        env_file=(_project_root / ".env", _backend_dir / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"
    idempotent_release: bool = False
    seed_demo: bool = False
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )

    @field_validator("log_level")
    @classmethod
    def log_level_must_exist(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level '{v}'"
            raise ValueError(msg)
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v


def configure_logging(settings: Settings) -> None:
    """Install a basic root handler and apply the level to bouwplan loggers."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("bouwplan").setLevel(settings.log_level)
