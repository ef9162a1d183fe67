"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `CITEWEAVER_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Citeweaver settings.

    All fields are environment-configurable. Prefix is `CITEWEAVER_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="CITEWEAVER_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Citation markup
    format_name: str = Field(default="abt/citation")
    citation_class: str = Field(default="abt-citation")
    legacy_items_attribute: str = Field(default="data-reflist")
    placeholder_text: str = Field(default="[?]")
    id_prefix: str = Field(default="cite-")

    # Transient cursor marker used while indexing
    marker_class: str = Field(default="citeweaver-marker")
    marker_id: str = Field(default="CITEWEAVER-CURSOR")

    # Documents
    default_backend: Literal["tree", "value"] = Field(default="tree")
    html_parser: str = Field(default="html.parser")

    # API
    api_max_document_chars: int = Field(default=2_000_000, ge=1_000)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("CITEWEAVER_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
