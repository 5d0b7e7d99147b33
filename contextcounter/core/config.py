# File: contextcounter/core/config.py
# Version: v0.1.0
"""
Application settings using Pydantic Settings.

Environment variables (prefix CONTEXTCOUNTER_) supply CLI defaults:
- CONTEXTCOUNTER_OUTPUT_DIR: folder for count files
- CONTEXTCOUNTER_WORKERS: parallel contig workers (0 = auto)
- CONTEXTCOUNTER_LOG_LEVEL: DEBUG / INFO / WARNING / ERROR
"""
from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- App ---
    APP_NAME: str = "contextcounter"
    APP_VERSION: str = "0.1.0"

    # --- Counting / output ---
    OUTPUT_DIR: Path = Path("contexts")
    WORKERS: int = 1

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "[%(asctime)s %(levelname)s %(name)s] %(message)s"

    model_config = SettingsConfigDict(
        env_prefix="CONTEXTCOUNTER_",
        extra="ignore",
        env_file=None,
    )


settings = Settings()
