# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Qdrant vector database client for similarity search.

This module provides an async Qdrant client wrapper shaped around the two
collection layouts vectorwrap uses:

- Single vector: one unnamed vector space per collection.
- Named vectors: one vector space per text field, all of the same size and
  distance metric.

Errors raised by qdrant-client (UnexpectedResponse, transport errors) are
not wrapped; they reach the caller unchanged.

Example:
    client = QdrantVectorClient(settings)
    await client.connect()

    await client.create_collection("articles", vector_size=384)
    results = await client.search("articles", query_vector=embedding, limit=5)

    await client.close()
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models

if TYPE_CHECKING:
    from vectorwrap.core.config.settings import Settings

logger = logging.getLogger(__name__)

DISTANCES: dict[str, models.Distance] = {
    "Cosine": models.Distance.COSINE,
    "Euclid": models.Distance.EUCLID,
    "Dot": models.Distance.DOT,
    "Manhattan": models.Distance.MANHATTAN,
}


class QdrantError(Exception):
    """Exception raised for failures detected by vectorwrap itself.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying error, if any.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class CollectionNotReadyError(QdrantError):
    """Raised when a collection exists but its status is not green.

    Attributes:
        collection_name: The collection that was checked.
        status: The status Qdrant reported.
    """

    def __init__(self, collection_name: str, status: Any) -> None:
        status_value = getattr(status, "value", status)
        super().__init__(
            f"Collection {collection_name!r} is not ready (status={status_value})"
        )
        self.collection_name = collection_name
        self.status = status


@dataclass
class SearchResult:
    """Result from a vector similarity search.

    Attributes:
        id: Point ID in Qdrant.
        score: Similarity score.
        payload: Associated metadata.
        field: Named vector that produced the hit; None for unnamed vectors.
    """

    id: str
    score: float
    payload: dict[str, Any]
    field: Optional[str] = None

    @classmethod
    def from_point(cls, point: models.ScoredPoint, field: Optional[str] = None) -> "SearchResult":
        return cls(
            id=str(point.id),
            score=point.score,
            payload=point.payload or {},
            field=field,
        )


def build_vectors_config(
    vector_size: int,
    distance: str = "Cosine",
    fields: Optional[Sequence[str]] = None,
) -> models.VectorParams | dict[str, models.VectorParams]:
    """Build the vector space layout of a collection.

    Args:
        vector_size: Dimension of the vectors.
        distance: Distance metric name (Cosine, Euclid, Dot, Manhattan).
        fields: Named vector spaces to create. None or empty for a single
            unnamed vector space.

    Returns:
        A VectorParams, or a mapping of field name to VectorParams.

    Raises:
        ValueError: If the distance metric is unknown.
    """
    if distance not in DISTANCES:
        raise ValueError(f"Unknown distance metric: {distance}")

    params = models.VectorParams(size=vector_size, distance=DISTANCES[distance])
    if not fields:
        return params
    return {field: params.model_copy() for field in fields}


def timeout_seconds(timeout_ms: Optional[int]) -> Optional[int]:
    """Convert a millisecond timeout to the whole seconds Qdrant expects."""
    if timeout_ms is None:
        return None
    return max(1, math.ceil(timeout_ms / 1000))


class QdrantVectorClient:
    """Async Qdrant client for collection management, upserts and search.

    Attributes:
        settings: Application settings containing Qdrant configuration.
    """

    def __init__(
        self,
        settings: "Settings",
        client: Optional[AsyncQdrantClient] = None,
    ) -> None:
        """Initialize the Qdrant client.

        Args:
            settings: Application settings containing Qdrant configuration.
            client: Pre-built AsyncQdrantClient. When given, connect() only
                verifies connectivity.
        """
        self._settings = settings
        self._client: Optional[AsyncQdrantClient] = client

    async def connect(self) -> None:
        """Create the Qdrant client connection.

        Raises:
            QdrantError: If connection fails.
        """
        qdrant_settings = self._settings.qdrant
        api_key = (
            qdrant_settings.api_key.get_secret_value()
            if qdrant_settings.api_key
            else None
        )

        try:
            if self._client is None:
                self._client = AsyncQdrantClient(
                    host=qdrant_settings.host,
                    port=qdrant_settings.http_port,
                    grpc_port=qdrant_settings.grpc_port,
                    api_key=api_key,
                    prefer_grpc=qdrant_settings.prefer_grpc,
                    timeout=int(qdrant_settings.timeout),
                )

            # Verify connection
            await self._client.get_collections()
        except Exception as e:
            raise QdrantError(f"Failed to connect to Qdrant at {qdrant_settings.url}", e) from e

        logger.info("Connected to Qdrant at %s", qdrant_settings.url)

    async def close(self) -> None:
        """Close the Qdrant client connection."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    def _ensure_connected(self) -> AsyncQdrantClient:
        """Ensure the client is connected.

        Raises:
            QdrantError: If not connected.
        """
        if self._client is None:
            raise QdrantError("Qdrant client not connected. Call connect() first.")
        return self._client

    # ========== Collection management ==========

    async def create_collection(
        self,
        collection_name: str,
        vector_size: int,
        distance: str = "Cosine",
        fields: Optional[Sequence[str]] = None,
        timeout_ms: Optional[int] = None,
        on_disk_payload: Optional[bool] = None,
    ) -> bool:
        """Create a new collection.

        Args:
            collection_name: Name of the collection.
            vector_size: Dimension of the vectors.
            distance: Distance metric (Cosine, Euclid, Dot, Manhattan).
            fields: One named vector space per field; None for a single
                unnamed vector space.
            timeout_ms: Creation timeout in milliseconds.
            on_disk_payload: Whether to keep payloads on disk.

        Returns:
            True if the collection was created.
        """
        client = self._ensure_connected()

        kwargs: dict[str, Any] = {}
        if on_disk_payload is not None:
            kwargs["on_disk_payload"] = on_disk_payload

        result = await client.create_collection(
            collection_name=collection_name,
            vectors_config=build_vectors_config(vector_size, distance, fields),
            timeout=timeout_seconds(timeout_ms),
            **kwargs,
        )

        logger.info(
            "Created collection %s (size=%d, distance=%s, fields=%s)",
            collection_name,
            vector_size,
            distance,
            list(fields) if fields else None,
        )
        return result

    async def delete_collection(
        self,
        collection_name: str,
        timeout_ms: Optional[int] = None,
    ) -> bool:
        """Delete a collection.

        Args:
            collection_name: Name of the collection to delete.
            timeout_ms: Deletion timeout in milliseconds.

        Returns:
            The result reported by Qdrant.
        """
        client = self._ensure_connected()
        return await client.delete_collection(
            collection_name,
            timeout=timeout_seconds(timeout_ms),
        )

    async def get_collection(self, collection_name: str) -> models.CollectionInfo:
        """Get collection info (status, config, point counts)."""
        client = self._ensure_connected()
        return await client.get_collection(collection_name)

    async def get_collections(self) -> models.CollectionsResponse:
        """List all collections."""
        client = self._ensure_connected()
        return await client.get_collections()

    async def list_collection_names(self) -> list[str]:
        """List the names of all collections."""
        response = await self.get_collections()
        return [collection.name for collection in response.collections]

    async def collection_exists(self, collection_name: str) -> bool:
        """Check if a collection exists."""
        client = self._ensure_connected()
        return await client.collection_exists(collection_name)

    # ========== Vector operations ==========

    async def upsert_batch(
        self,
        collection_name: str,
        ids: Sequence[str],
        vectors: Sequence[list[float]],
        payloads: Sequence[dict[str, Any]],
    ) -> models.UpdateResult:
        """Upsert points given as parallel id/vector/payload lists.

        Args:
            collection_name: Name of the collection.
            ids: Point IDs.
            vectors: One unnamed vector per point.
            payloads: One payload per point.

        Returns:
            The update result reported by Qdrant.
        """
        client = self._ensure_connected()
        return await client.upsert(
            collection_name=collection_name,
            points=models.Batch(
                ids=list(ids),
                vectors=list(vectors),
                payloads=list(payloads),
            ),
        )

    async def upsert(
        self,
        collection_name: str,
        points: list[dict[str, Any]],
    ) -> models.UpdateResult:
        """Upsert points into a collection.

        Args:
            collection_name: Name of the collection.
            points: List of points with id, vector, and payload.
                Each point should have: {"id": str, "vector": list[float] |
                dict[str, list[float]], "payload": dict}

        Returns:
            The update result reported by Qdrant.
        """
        client = self._ensure_connected()

        qdrant_points = [
            models.PointStruct(
                id=p["id"],
                vector=p["vector"],
                payload=p.get("payload", {}),
            )
            for p in points
        ]

        return await client.upsert(
            collection_name=collection_name,
            points=qdrant_points,
        )

    async def delete_by_filter(
        self,
        collection_name: str,
        query_filter: models.Filter,
    ) -> models.UpdateResult:
        """Delete every point matching a filter.

        Args:
            collection_name: Name of the collection.
            query_filter: Points matching this filter are deleted.

        Returns:
            The update result reported by Qdrant.
        """
        client = self._ensure_connected()
        return await client.delete(
            collection_name=collection_name,
            points_selector=models.FilterSelector(filter=query_filter),
        )

    # ========== Search operations ==========

    async def search(
        self,
        collection_name: str,
        query_vector: list[float],
        using: Optional[str] = None,
        limit: int = 10,
        offset: Optional[int] = None,
        score_threshold: Optional[float] = None,
        query_filter: Optional[models.Filter] = None,
    ) -> list[SearchResult]:
        """Search for similar vectors in a collection.

        Args:
            collection_name: Name of the collection.
            query_vector: The query embedding vector.
            using: Named vector to search; None for the unnamed vector.
            limit: Maximum number of results.
            offset: Number of results to skip.
            score_threshold: Minimum similarity score.
            query_filter: Optional payload filter.

        Returns:
            List of SearchResult objects.
        """
        client = self._ensure_connected()

        response = await client.query_points(
            collection_name=collection_name,
            query=query_vector,
            using=using,
            limit=limit,
            offset=offset,
            score_threshold=score_threshold,
            query_filter=query_filter,
            with_payload=True,
            with_vectors=False,
        )

        return [SearchResult.from_point(point, using) for point in response.points]

    async def search_batch(
        self,
        collection_name: str,
        requests: Sequence[models.QueryRequest],
    ) -> list[list[SearchResult]]:
        """Run several searches in one round-trip.

        Hits are tagged with the named vector (``using``) of their request.

        Args:
            collection_name: Name of the collection.
            requests: Query requests.

        Returns:
            One result list per request, in request order.
        """
        client = self._ensure_connected()

        responses = await client.query_batch_points(
            collection_name=collection_name,
            requests=list(requests),
        )

        return [
            [SearchResult.from_point(point, request.using) for point in response.points]
            for request, response in zip(requests, responses)
        ]

    # ========== Health check ==========

    async def ping(self) -> bool:
        """Check if Qdrant is reachable.

        Returns:
            True if Qdrant responds, False otherwise.
        """
        try:
            client = self._ensure_connected()
            await client.get_collections()
            return True
        except Exception:
            return False
