# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for vectorwrap.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from vectorwrap.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.qdrant.url)
    'http://localhost:6333'
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration.

    Attributes:
        host: Qdrant server host.
        http_port: HTTP API port.
        grpc_port: gRPC API port.
        api_key: Optional API key for authentication.
        prefer_grpc: Whether to prefer gRPC over HTTP.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="QDRANT_",
        extra="ignore",
    )

    host: str = "localhost"
    http_port: int = 6333
    grpc_port: int = 6334
    api_key: SecretStr | None = None
    prefer_grpc: bool = False
    timeout: float = 30.0

    @property
    def url(self) -> str:
        """Build the Qdrant HTTP URL."""
        return f"http://{self.host}:{self.http_port}"


class EmbeddingSettings(BaseSettings):
    """Embedding model configuration.

    Uses LiteLLM for API-based embedding generation. Models prefixed with
    ``ollama/`` are called directly on the Ollama ``/api/embed`` endpoint.

    Attributes:
        model: Model name in LiteLLM format (e.g., 'ollama/all-minilm').
        dimension: Vector dimension (must match model output).
        batch_size: Batch size for embedding generation.
        api_base: Base URL of the embedding provider.
        api_key: Optional API key for the embedding provider.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        extra="ignore",
    )

    model: str = "ollama/all-minilm"
    dimension: int = 384
    batch_size: int = 32
    api_base: str | None = "http://localhost:11434"
    api_key: SecretStr | None = None


class CollectionSettings(BaseSettings):
    """Defaults applied when collections are created.

    Attributes:
        vector_size: Dimension of every vector space in a new collection.
        distance: Distance metric (Cosine, Euclid, Dot, Manhattan).
        timeout_ms: Creation timeout in milliseconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="COLLECTION_",
        extra="ignore",
    )

    vector_size: int = 384
    distance: Literal["Cosine", "Euclid", "Dot", "Manhattan"] = "Cosine"
    timeout_ms: int = 1000


class Settings(BaseSettings):
    """Main settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        qdrant: Qdrant settings.
        embedding: Embedding model settings.
        collection: Collection creation defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    collection: CollectionSettings = Field(default_factory=CollectionSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
