"""Environment-driven settings for the hydration engine.

Centralized config using pydantic-settings. Reads from a .env file and
HYDRATE_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler

from hydrate.models.functions import Runtime


class HydrateSettings(BaseSettings):
    """Engine settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export HYDRATE_LOG_LEVEL=DEBUG
        export HYDRATE_MAX_WORKERS=4
        export HYDRATE_DEFAULT_RUNTIME=python

    Or via .env file::

        HYDRATE_FINGERPRINT_STATIC=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HYDRATE_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Concurrency: functions hydrated in parallel
    max_workers: int = 8

    # Project defaults
    default_runtime: Runtime = Runtime.NODEJS
    shared_dir: Path = Path("src/shared")
    views_dir: Path = Path("src/views")
    static_dir: Path | None = Path("public")
    fingerprint_static: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def configure_logging(settings: HydrateSettings | None = None) -> None:
    """Route the ``hydrate`` logger through a Rich handler.

    Only touches the package logger so host applications keep control of
    the root logger.
    """
    settings = settings or HydrateSettings()
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logger = logging.getLogger("hydrate")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, rich_tracebacks=settings.debug))


# Module-level singleton, import as `from hydrate.config import settings`
settings = HydrateSettings()
