# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mocked Qdrant and embedding function)
- Integration tests (require a running Qdrant)
"""

import hashlib
import uuid
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from qdrant_client.http import models

from vectorwrap.core.config.settings import Settings, clear_settings_cache
from vectorwrap.core.embeddings import EmbeddingAdapter

VECTOR_SIZE = 384


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires Qdrant)"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Provide fresh settings for each test."""
    clear_settings_cache()
    return Settings()


# =============================================================================
# Embedding Fixtures
# =============================================================================


def fake_embedding(text: str) -> list[float]:
    """Deterministic text-dependent vector of VECTOR_SIZE floats."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [digest[i % len(digest)] / 255.0 for i in range(VECTOR_SIZE)]


@pytest.fixture
def embedding_adapter() -> EmbeddingAdapter:
    """Embedding adapter backed by the deterministic fake embedding."""
    return EmbeddingAdapter.from_function(fake_embedding)


# =============================================================================
# Qdrant Fixtures
# =============================================================================


def collection_info(status: models.CollectionStatus = models.CollectionStatus.GREEN) -> MagicMock:
    """Build a stand-in for CollectionInfo with the given status."""
    info = MagicMock()
    info.status = status
    return info


@pytest.fixture
def mock_qdrant_client() -> MagicMock:
    """Create a mock QdrantVectorClient with no collections."""
    client = MagicMock()
    client.connect = AsyncMock()
    client.close = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.list_collection_names = AsyncMock(return_value=[])
    client.create_collection = AsyncMock(return_value=True)
    client.delete_collection = AsyncMock(return_value=True)
    client.get_collection = AsyncMock(return_value=collection_info())
    client.get_collections = AsyncMock(
        return_value=models.CollectionsResponse(collections=[])
    )
    client.upsert_batch = AsyncMock(
        return_value=models.UpdateResult(operation_id=1, status=models.UpdateStatus.COMPLETED)
    )
    client.upsert = AsyncMock(
        return_value=models.UpdateResult(operation_id=2, status=models.UpdateStatus.COMPLETED)
    )
    client.delete_by_filter = AsyncMock(
        return_value=models.UpdateResult(operation_id=3, status=models.UpdateStatus.COMPLETED)
    )
    client.search = AsyncMock(return_value=[])
    client.search_batch = AsyncMock(return_value=[])
    return client


@pytest.fixture
def test_collection_name() -> str:
    """Generate a unique test collection name."""
    return f"test_collection_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Provide caller metadata for inserted points."""
    return {"lang": "en", "source": "unit-test"}
