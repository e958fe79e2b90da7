"""Configuration settings using Pydantic Settings.

Provides typed defaults for the view engine and the save controller with
environment variable support.

Usage:
    from recordflow.config import PersistenceSettings, ViewSettings

    # Load from environment variables (RECORDVIEW_*, AUTOSAVE_*)
    view_settings = ViewSettings()
    save_settings = PersistenceSettings()

    # Or override with explicit values
    save_settings = PersistenceSettings(debounce_seconds=0.25)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ViewSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for record views.

    Attributes:
        default_page_size: Rows per page when a view does not pass one.

    Environment Variables:
        RECORDVIEW_DEFAULT_PAGE_SIZE
    """

    model_config = SettingsConfigDict(
        env_prefix="RECORDVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_page_size: int = Field(default=10, ge=1)


class PersistenceSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for deferred saves.

    Attributes:
        debounce_seconds: Quiet period after the last edit before a write.

    Environment Variables:
        AUTOSAVE_DEBOUNCE_SECONDS
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTOSAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debounce_seconds: float = Field(default=0.6, ge=0.0)
