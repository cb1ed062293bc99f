# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for vectorwrap.

Settings are Pydantic-based and loaded from environment variables
(and an optional ``.env`` file).

Example:
    >>> from vectorwrap.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.collection.vector_size
    384
"""

from vectorwrap.core.config.settings import (
    CollectionSettings,
    EmbeddingSettings,
    QdrantSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "QdrantSettings",
    "EmbeddingSettings",
    "CollectionSettings",
]
