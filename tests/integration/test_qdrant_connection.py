# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests against a running Qdrant instance.

These tests require a running Qdrant instance.
Run with: pytest tests/integration/test_qdrant_connection.py -v

Prerequisites:
    - Qdrant running at localhost:6333
"""

import uuid

import pytest

from vectorwrap.core.config.settings import Settings
from vectorwrap.core.embeddings import EmbeddingAdapter
from vectorwrap.domains.text_store import (
    SOURCE_FIELDS_KEY,
    SOURCE_TEXT_KEY,
    FieldsDocument,
    SearchOptions,
    TextDocument,
    TextVectorStore,
    close_store,
    get_store,
    init_store,
)
from vectorwrap.infrastructure.vectors import QdrantError, QdrantVectorClient, SearchResult


@pytest.fixture
async def qdrant_client(settings: Settings) -> QdrantVectorClient:
    """Provide a Qdrant client for testing."""
    client = QdrantVectorClient(settings)
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
async def text_store(settings: Settings, embedding_adapter: EmbeddingAdapter) -> TextVectorStore:
    """Provide a connected text store using the deterministic fake embedding."""
    store = TextVectorStore(settings=settings, embedding=embedding_adapter)
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def test_vector() -> list[float]:
    """Provide a test vector with 384 dimensions."""
    return [0.1] * 384


@pytest.mark.integration
class TestQdrantInitialization:
    """Tests for connection handling."""

    async def test_ping(self, qdrant_client: QdrantVectorClient) -> None:
        """Test ping health check."""
        result = await qdrant_client.ping()
        assert result is True

    async def test_init_and_close_store(
        self, settings: Settings, embedding_adapter: EmbeddingAdapter
    ) -> None:
        """Test the module-level store lifecycle."""
        store = await init_store(settings, embedding_adapter)

        try:
            assert get_store() is store
            assert await store.ping() is True
        finally:
            await close_store()

        with pytest.raises(QdrantError) as exc_info:
            get_store()

        assert "not initialized" in str(exc_info.value)


@pytest.mark.integration
class TestQdrantCollectionManagement:
    """Tests for Qdrant collection operations."""

    async def test_create_and_delete_collection(
        self, qdrant_client: QdrantVectorClient, test_collection_name: str
    ) -> None:
        """Test creating and deleting a collection."""
        await qdrant_client.create_collection(
            test_collection_name, vector_size=384, distance="Cosine", timeout_ms=1000
        )

        assert await qdrant_client.collection_exists(test_collection_name) is True
        assert test_collection_name in await qdrant_client.list_collection_names()

        result = await qdrant_client.delete_collection(test_collection_name)
        assert result is True
        assert await qdrant_client.collection_exists(test_collection_name) is False

    async def test_delete_nonexistent_collection(
        self, qdrant_client: QdrantVectorClient
    ) -> None:
        """Test deleting a non-existent collection."""
        result = await qdrant_client.delete_collection(
            f"nonexistent_{uuid.uuid4().hex[:8]}"
        )
        assert result is False

    async def test_named_vectors(
        self, qdrant_client: QdrantVectorClient, test_collection_name: str
    ) -> None:
        """Test that a fields collection gets one vector space per field."""
        await qdrant_client.create_collection(
            test_collection_name, vector_size=384, fields=["title", "body"]
        )

        try:
            info = await qdrant_client.get_collection(test_collection_name)
            assert set(info.config.params.vectors) == {"title", "body"}
        finally:
            await qdrant_client.delete_collection(test_collection_name)


@pytest.mark.integration
class TestQdrantVectorOperations:
    """Tests for raw vector operations."""

    async def test_upsert_and_search(
        self,
        qdrant_client: QdrantVectorClient,
        test_collection_name: str,
        test_vector: list[float],
    ) -> None:
        """Test upserting and searching vectors."""
        await qdrant_client.create_collection(test_collection_name, vector_size=384)
        point_id = str(uuid.uuid4())

        try:
            await qdrant_client.upsert_batch(
                test_collection_name,
                [point_id],
                [test_vector],
                [{"topic": "math"}],
            )

            results = await qdrant_client.search(
                test_collection_name, query_vector=test_vector, limit=5
            )

            assert len(results) == 1
            assert isinstance(results[0], SearchResult)
            assert results[0].id == point_id
            assert results[0].payload["topic"] == "math"
            assert results[0].score > 0.9  # Same vector should have high score
        finally:
            await qdrant_client.delete_collection(test_collection_name)


@pytest.mark.integration
class TestTextStore:
    """Tests for the text store end to end."""

    async def test_insert_provisions_and_search(
        self, text_store: TextVectorStore, test_collection_name: str
    ) -> None:
        """Test that inserting creates the collection and the text is searchable."""
        try:
            await text_store.insert(
                test_collection_name,
                [
                    TextDocument(text="qdrant is a vector database", payload={"lang": "en"}),
                    TextDocument(text="qdrant ist eine vektordatenbank", payload={"lang": "de"}),
                ],
            )

            results = await text_store.search(
                test_collection_name,
                "qdrant is a vector database",
                SearchOptions(limit=5, filter=[{"lang": "en"}]),
            )

            assert len(results) == 1
            assert results[0].payload[SOURCE_TEXT_KEY] == "qdrant is a vector database"
            assert results[0].score > 0.99
        finally:
            await text_store.delete_collection(test_collection_name)

    async def test_delete_by_filter(
        self, text_store: TextVectorStore, test_collection_name: str
    ) -> None:
        try:
            await text_store.insert(
                test_collection_name,
                [
                    TextDocument(text="first", payload={"source": "a.txt"}),
                    TextDocument(text="second", payload={"source": "b.txt"}),
                ],
            )

            await text_store.delete(test_collection_name, {"source": "a.txt"})

            results = await text_store.search(test_collection_name, "first")
            assert [r.payload["source"] for r in results] == ["b.txt"]
        finally:
            await text_store.delete_collection(test_collection_name)

    async def test_fields_insert_and_batch_search(
        self, text_store: TextVectorStore, test_collection_name: str
    ) -> None:
        """Test a multi-field document searched across both fields."""
        try:
            await text_store.insert(
                test_collection_name,
                FieldsDocument(fields={"title": "vector search", "body": "similarity"}),
            )

            results = await text_store.search(
                test_collection_name,
                "vector search",
                SearchOptions(fields=["title", "body"], limit=10),
            )

            assert [r.field for r in results] == ["title", "body"]
            assert results[0].payload[SOURCE_FIELDS_KEY]["body"] == "similarity"
        finally:
            await text_store.delete_collection(test_collection_name)


@pytest.mark.integration
class TestQdrantErrors:
    """Tests for Qdrant error handling."""

    async def test_operation_without_connect_raises_error(
        self, settings: Settings
    ) -> None:
        """Test that operations without connect raise error."""
        client = QdrantVectorClient(settings)

        with pytest.raises(QdrantError) as exc_info:
            await client.get_collections()

        assert "not connected" in str(exc_info.value)
