"""Configuration module using Pydantic Settings.

Provides typed configuration for views and deferred saves with environment
variable support.

Usage:
    from recordflow.config import PersistenceSettings, ViewSettings

    settings = ViewSettings(default_page_size=25)
    autosave = PersistenceSettings(debounce_seconds=1.0)
"""

from recordflow.config.settings import PersistenceSettings, ViewSettings

__all__ = [
    "ViewSettings",
    "PersistenceSettings",
]
