"""Application configuration using pydantic-settings."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration loaded from environment / .env file."""

    # ── Remote service ────────────────────────────────────────────────────────
    # Token of the authenticated session.  Login itself is handled by the host;
    # the bundle session only forwards it to the remote service.
    session_token: str = Field(
        default="",
        description="Session token passed to every remote service call",
    )

    # ── Progress ──────────────────────────────────────────────────────────────
    progress_title: str = Field(
        default="Analysing workspace code",
        description="Title of the progress notification shown during analysis",
    )

    # ── Local file collection ─────────────────────────────────────────────────
    ignored_dirs: List[str] = Field(
        default=[
            ".git",
            ".hg",
            ".svn",
            "node_modules",
            "__pycache__",
            ".venv",
            "venv",
        ]
    )

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
